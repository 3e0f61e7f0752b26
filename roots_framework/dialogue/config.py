"""
Speaker database.

Loads speaker definitions from JSON, validates them against SPEAKER_SCHEMA
and builds ready-to-use entities.

A definition file holds one object or a list of objects:

    {
        "id": "phone",
        "name": "Phone",
        "position": [320, 96],
        "script_file": "phone.txt",
        "speaker": {"max_chars_per_row": 32, "seconds_per_line": 2.5},
        "trigger": {"mode": "delay_locking", "entry_delay": 3, "intro_sound": "ring.wav"},
        "zone": {"width": 96, "height": 96},
        "scene_transition": {"scene_id": "street", "spawn_point": "street_door"}
    }

script_file is resolved relative to the JSON file and wins over script.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import jsonschema
import pygame
from pydantic import ValidationError

from roots_engine.core import Entity, World
from roots_framework.components import (
    DialogueSpeaker,
    InteractionTrigger,
    SceneTransition,
    SessionState,
    Transform,
    TriggerMode,
    TriggerZone,
)
from roots_framework.dialogue.errors import SpeakerConfigError

logger = logging.getLogger(__name__)

_COLOR = {
    "type": "array",
    "items": {"type": "integer", "minimum": 0, "maximum": 255},
    "minItems": 4,
    "maxItems": 4,
}

_VEC2 = {
    "type": "array",
    "items": {"type": "number"},
    "minItems": 2,
    "maxItems": 2,
}

SPEAKER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id"],
    "additionalProperties": False,
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "position": _VEC2,
        "script": {"type": ["string", "null"]},
        "script_file": {"type": "string"},
        "speaker": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "max_chars_per_row": {"type": "integer", "minimum": 10, "maximum": 100},
                "auto_advance": {"type": "boolean"},
                "seconds_per_line": {"type": "number", "minimum": 0},
                "terminal_state": {"enum": ["idle", "prompting"]},
                "dialogue_sound": {"type": ["string", "null"]},
                "dialogue_sound_volume": {"type": "number", "minimum": 0, "maximum": 1},
                "dialogue_sound_duration": {"type": "number", "minimum": 0},
                "bubble": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "offset": _VEC2,
                        "background_size": _VEC2,
                        "background_color": _COLOR,
                        "text_color": _COLOR,
                        "text_size": {"type": "integer", "minimum": 6},
                        "padding": {"type": "integer", "minimum": 0},
                    },
                },
                "prompt": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "text": {"type": "string"},
                        "offset": _VEC2,
                        "color": _COLOR,
                        "text_size": {"type": "integer", "minimum": 6},
                    },
                },
            },
        },
        "trigger": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "mode": {"enum": ["key_gated", "auto_play", "delay_locking"]},
                "interact_key": {"type": ["string", "integer"]},
                "skip_key": {"type": ["string", "integer", "null"]},
                "allow_key_advance": {"type": "boolean"},
                "entry_delay": {"type": "number", "minimum": 0},
                "intro_sound": {"type": ["string", "null"]},
                "intro_volume": {"type": "number", "minimum": 0, "maximum": 1},
                "intro_duration": {"type": "number", "minimum": 0},
                "once_only": {"type": "boolean"},
            },
        },
        "zone": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "width": {"type": "number", "exclusiveMinimum": 0},
                "height": {"type": "number", "exclusiveMinimum": 0},
                "offset_x": {"type": "number"},
                "offset_y": {"type": "number"},
                "filter_tags": {"type": "array", "items": {"type": "string"}},
            },
        },
        "scene_transition": {
            "type": "object",
            "required": ["scene_id"],
            "additionalProperties": False,
            "properties": {
                "scene_id": {"type": "string"},
                "delay": {"type": "number", "minimum": 0},
                "spawn_point": {"type": ["string", "null"]},
            },
        },
    },
}


def parse_key(value: str | int) -> int:
    """
    Convert a key name from JSON into a pygame key code.

    Accepts an integer code, a single character ("e") or a pygame
    constant suffix ("space", "RETURN").
    """
    if isinstance(value, int):
        return value
    if len(value) == 1:
        return ord(value.lower())
    code = getattr(pygame, f"K_{value}", None) or getattr(pygame, f"K_{value.lower()}", None)
    if code is None:
        raise ValueError(f"Unknown key name: {value}")
    return code


@dataclass
class SpeakerDefinition:
    """A validated speaker, ready to be turned into an entity."""
    id: str
    name: str
    position: tuple[float, float]
    speaker: DialogueSpeaker
    trigger: InteractionTrigger
    zone: TriggerZone
    scene_transition: Optional[SceneTransition] = None
    source: Optional[Path] = None


class SpeakerDatabase:
    """
    Speaker definitions keyed by id.

    Usage:
        db = SpeakerDatabase()
        db.load_directory("data/speakers")
        npc = db.create_speaker(world, "phone")
    """

    def __init__(self):
        self._speakers: dict[str, SpeakerDefinition] = {}

    def __len__(self) -> int:
        return len(self._speakers)

    def __contains__(self, speaker_id: str) -> bool:
        return speaker_id in self._speakers

    @property
    def ids(self) -> list[str]:
        return list(self._speakers)

    def get(self, speaker_id: str) -> Optional[SpeakerDefinition]:
        return self._speakers.get(speaker_id)

    def load_directory(self, directory: Path | str) -> int:
        """
        Load every *.json file in a directory.

        Invalid files are logged and skipped.

        Returns:
            Number of speakers loaded
        """
        directory = Path(directory)
        if not directory.exists():
            logger.warning(f"Speaker directory not found: {directory}")
            return 0

        loaded = 0
        for file_path in sorted(directory.glob("*.json")):
            try:
                loaded += len(self.load_file(file_path))
            except SpeakerConfigError as e:
                logger.error(f"Skipping speaker file: {e}")

        logger.info(f"Loaded {loaded} speakers from {directory}")
        return loaded

    def load_file(self, file_path: Path | str) -> list[SpeakerDefinition]:
        """
        Load one definition file.

        Raises:
            SpeakerConfigError: If the file cannot be read or is invalid
        """
        file_path = Path(file_path)
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SpeakerConfigError(str(file_path), str(e)) from e

        entries = data if isinstance(data, list) else [data]
        definitions = [self.load_data(entry, file_path) for entry in entries]
        return definitions

    def load_data(self, data: dict[str, Any], source: Optional[Path] = None) -> SpeakerDefinition:
        """
        Validate and register one definition.

        Raises:
            SpeakerConfigError: If the definition is invalid
        """
        where = str(source) if source else "<data>"
        try:
            jsonschema.validate(instance=data, schema=SPEAKER_SCHEMA)
        except jsonschema.ValidationError as e:
            raise SpeakerConfigError(where, e.message) from e

        try:
            definition = self._build(data, source)
        except (ValidationError, ValueError, OSError) as e:
            raise SpeakerConfigError(where, str(e)) from e

        if definition.id in self._speakers:
            logger.warning(f"Speaker {definition.id} redefined by {where}")
        self._speakers[definition.id] = definition
        return definition

    def create_speaker(
        self,
        world: World,
        speaker_id: str,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> Entity:
        """
        Build an entity for a loaded speaker.

        Args:
            world: World to create the entity in
            speaker_id: Definition id
            x, y: Position, defaulting to the definition's position

        Raises:
            KeyError: If speaker_id is not loaded
        """
        definition = self._speakers.get(speaker_id)
        if definition is None:
            raise KeyError(f"Unknown speaker: {speaker_id}")

        px = definition.position[0] if x is None else x
        py = definition.position[1] if y is None else y

        entity = world.create_entity(definition.name)
        entity.add_tag("speaker")
        entity.add(Transform(x=px, y=py))
        entity.add(definition.speaker.clone())
        entity.add(definition.trigger.clone())
        entity.add(definition.zone.clone())
        if definition.scene_transition:
            entity.add(definition.scene_transition.clone())
        return entity

    def _build(self, data: dict[str, Any], source: Optional[Path]) -> SpeakerDefinition:
        script = data.get("script")
        if "script_file" in data:
            base = source.parent if source else Path.cwd()
            script = (base / data["script_file"]).read_text(encoding="utf-8")

        speaker_data = dict(data.get("speaker", {}))
        if "terminal_state" in speaker_data:
            speaker_data["terminal_state"] = SessionState[speaker_data["terminal_state"].upper()]
        speaker = DialogueSpeaker(script=script, **speaker_data)

        trigger_data = dict(data.get("trigger", {}))
        if "mode" in trigger_data:
            trigger_data["mode"] = TriggerMode[trigger_data["mode"].upper()]
        if "interact_key" in trigger_data:
            trigger_data["interact_key"] = parse_key(trigger_data["interact_key"])
        if trigger_data.get("skip_key") is not None:
            trigger_data["skip_key"] = parse_key(trigger_data["skip_key"])
        trigger = InteractionTrigger(**trigger_data)

        zone_data = dict(data.get("zone", {}))
        if "filter_tags" in zone_data:
            zone_data["filter_tags"] = set(zone_data["filter_tags"])
        zone = TriggerZone(**zone_data)

        transition = None
        if "scene_transition" in data:
            transition = SceneTransition(**data["scene_transition"])

        position = tuple(data.get("position", (0.0, 0.0)))
        return SpeakerDefinition(
            id=data["id"],
            name=data.get("name") or data["id"],
            position=(float(position[0]), float(position[1])),
            speaker=speaker,
            trigger=trigger,
            zone=zone,
            scene_transition=transition,
            source=source,
        )
