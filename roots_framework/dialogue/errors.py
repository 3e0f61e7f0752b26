"""
Dialogue error types.

InvalidTransition is raised only by the session's internal transition
check. Public session operations test their state guard before calling
it and return False when the request does not apply, so they never raise
it. ResourceConflict comes from the player lock and is logged by the
session, which carries on without freezing the player.
"""


class DialogueError(Exception):
    """Base class for dialogue errors."""


class ConfigurationEmpty(DialogueError):
    """The dialogue source yields zero lines."""

    def __init__(self, owner: str = ""):
        self.owner = owner
        super().__init__(f"No dialogue lines for {owner or 'speaker'}")


class InvalidTransition(DialogueError):
    """A transition the state table does not allow."""

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(f"Invalid dialogue transition {source.name} -> {target.name}")


class ResourceConflict(DialogueError):
    """An exclusive resource (the player lock) is already held."""

    def __init__(self, resource: str, holder: str = ""):
        self.resource = resource
        self.holder = holder
        msg = f"{resource} already held"
        if holder:
            msg += f" by {holder}"
        super().__init__(msg)


class SpeakerConfigError(DialogueError):
    """A speaker definition file is invalid."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
