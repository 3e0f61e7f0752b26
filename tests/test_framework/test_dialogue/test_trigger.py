import pytest
from roots_framework.components import DialogueSpeaker, InteractionTrigger, SessionState, TriggerMode
from roots_framework.dialogue.session import DialogueEvent, DialogueSession
from roots_framework.dialogue.trigger import TriggerController
from roots_framework.world.player import PlayerLock

KENOBI = "Hello there\nGeneral Kenobi\n"

def make_controller(presenter, mode, event_bus=None, script=KENOBI, speaker=None, lock=None, audio=None, **trigger_fields):
    speaker = speaker or DialogueSpeaker(script=script, max_chars_per_row=40, seconds_per_line=3.0)
    session = DialogueSession(
        speaker,
        presenter,
        audio=audio,
        player_lock=lock,
        event_bus=event_bus,
        name="npc",
    )
    return TriggerController(session, InteractionTrigger(mode=mode, **trigger_fields))

def finished_count(recorder):
    return sum(1 for e in recorder if e.type == DialogueEvent.FINISHED)

def test_auto_play_end_to_end(presenter, event_bus, recorder):
    controller = make_controller(presenter, TriggerMode.AUTO_PLAY, event_bus)

    controller.on_zone_enter()
    presenter.show_bubble.assert_called_once_with("Hello there", controller.session.speaker.bubble)

    for _ in range(3):
        controller.update(1.0, key_pressed=False)
    presenter.update_text.assert_called_once_with(1, "General Kenobi")
    assert finished_count(recorder) == 0

    for _ in range(3):
        controller.update(1.0, key_pressed=False)
    presenter.hide.assert_called_once_with(1)
    assert controller.session.state == SessionState.IDLE
    assert finished_count(recorder) == 1

    # Staying in the zone does not replay or re-fire
    for _ in range(10):
        controller.update(1.0, key_pressed=False)
    assert finished_count(recorder) == 1

def test_key_gated_flow(presenter, event_bus, recorder):
    speaker = DialogueSpeaker(script=KENOBI, auto_advance=False)
    controller = make_controller(presenter, TriggerMode.KEY_GATED, event_bus, speaker=speaker)
    session = controller.session

    controller.on_zone_enter()
    assert session.state == SessionState.PROMPTING

    controller.update(0.1, key_pressed=True)
    assert session.current_line == "Hello there"

    controller.update(0.1, key_pressed=True)
    assert session.current_line == "General Kenobi"

    controller.update(0.1, key_pressed=True)
    assert session.state == SessionState.IDLE
    assert finished_count(recorder) == 1

def test_key_gated_requires_zone(presenter):
    controller = make_controller(presenter, TriggerMode.KEY_GATED)

    controller.update(0.1, key_pressed=True)
    assert controller.session.state == SessionState.IDLE
    presenter.show_bubble.assert_not_called()

def test_key_gated_exit_cancels(presenter):
    controller = make_controller(presenter, TriggerMode.KEY_GATED)
    controller.on_zone_enter()
    controller.update(0.1, key_pressed=True)

    controller.on_zone_exit()
    assert controller.session.state == SessionState.IDLE
    assert not controller.in_zone

    # Re-entry prompts again and restarts from the first line
    controller.on_zone_enter()
    controller.update(0.1, key_pressed=True)
    assert controller.session.current_line == "Hello there"

def test_key_and_timer_same_tick_advance_once(presenter):
    speaker = DialogueSpeaker(script="a\nb\nc", seconds_per_line=1.0)
    controller = make_controller(presenter, TriggerMode.AUTO_PLAY, speaker=speaker)
    controller.on_zone_enter()

    controller.update(0.5, key_pressed=False)
    # Timer would fire this tick too
    controller.update(0.6, key_pressed=True)

    assert controller.session.current_index == 1

def test_auto_play_key_advance_disabled(presenter):
    controller = make_controller(presenter, TriggerMode.AUTO_PLAY, allow_key_advance=False)
    controller.on_zone_enter()

    controller.update(0.1, key_pressed=True)
    assert controller.session.current_index == 0

def test_auto_play_replays_from_prompt(presenter):
    speaker = DialogueSpeaker(script="only", seconds_per_line=1.0, terminal_state=SessionState.PROMPTING)
    controller = make_controller(presenter, TriggerMode.AUTO_PLAY, speaker=speaker)
    controller.on_zone_enter()

    controller.update(1.0, key_pressed=False)
    assert controller.session.state == SessionState.PROMPTING

    controller.update(0.1, key_pressed=True)
    assert controller.session.current_line == "only"

def test_auto_play_empty_script_stays_idle(presenter):
    controller = make_controller(presenter, TriggerMode.AUTO_PLAY, script="")
    controller.on_zone_enter()
    controller.update(5.0, key_pressed=True)

    assert controller.session.state == SessionState.IDLE

def test_delay_locking_waits_for_entry_delay(presenter, audio):
    lock = PlayerLock()
    controller = make_controller(
        presenter,
        TriggerMode.DELAY_LOCKING,
        lock=lock,
        audio=audio,
        entry_delay=3.0,
        intro_sound="ring.wav",
        intro_duration=2.0,
    )
    session = controller.session
    controller.on_zone_enter()

    controller.update(1.0)
    controller.update(1.0)
    assert session.state == SessionState.IDLE
    assert controller.delay_elapsed == pytest.approx(2.0)

    controller.update(1.0)
    assert session.state == SessionState.LOCKED
    assert lock.held
    assert controller.fired
    audio.play.assert_called_once_with("ring.wav", 1.0, False)

    controller.update(1.0)
    assert session.state == SessionState.LOCKED
    controller.update(1.0)
    assert session.current_line == "Hello there"

    controller.update(3.0)
    controller.update(3.0)
    assert session.state == SessionState.IDLE
    assert not lock.held

def test_delay_locking_exit_resets_accumulator(presenter):
    controller = make_controller(presenter, TriggerMode.DELAY_LOCKING, entry_delay=3.0)
    controller.on_zone_enter()
    controller.update(2.5)

    controller.on_zone_exit()
    assert controller.delay_elapsed == 0.0

    controller.on_zone_enter()
    controller.update(1.0)
    assert controller.session.state == SessionState.IDLE
    assert controller.delay_elapsed == pytest.approx(1.0)

    controller.update(2.0)
    assert controller.session.state == SessionState.LOCKED

def test_delay_locking_exit_while_locked_releases(presenter):
    lock = PlayerLock()
    controller = make_controller(presenter, TriggerMode.DELAY_LOCKING, lock=lock, entry_delay=1.0)
    controller.on_zone_enter()
    controller.update(1.0)
    assert lock.held

    controller.on_zone_exit()
    assert controller.session.state == SessionState.IDLE
    assert not lock.held

def test_delay_locking_once_only(presenter):
    controller = make_controller(presenter, TriggerMode.DELAY_LOCKING, entry_delay=1.0, intro_duration=0.0)
    controller.on_zone_enter()
    controller.update(1.0)
    controller.update(0.1)
    assert controller.session.current_line == "Hello there"
    controller.on_zone_exit()

    controller.on_zone_enter()
    controller.update(5.0)
    assert controller.session.state == SessionState.IDLE
    assert presenter.show_bubble.call_count == 1

def test_delay_locking_exit_during_intro_restarts_delay(presenter):
    controller = make_controller(presenter, TriggerMode.DELAY_LOCKING, entry_delay=1.0, intro_duration=2.0)
    controller.on_zone_enter()
    controller.update(1.0)
    assert controller.session.state == SessionState.LOCKED

    controller.on_zone_exit()
    assert not controller.fired

    controller.on_zone_enter()
    controller.update(0.5)
    assert controller.session.state == SessionState.IDLE
    assert controller.delay_elapsed == pytest.approx(0.5)

    controller.update(0.5)
    assert controller.session.state == SessionState.LOCKED
    controller.update(2.0)
    assert controller.session.current_line == "Hello there"
    assert presenter.show_bubble.call_count == 1

def test_delay_locking_rearms_on_exit(presenter):
    controller = make_controller(
        presenter,
        TriggerMode.DELAY_LOCKING,
        entry_delay=1.0,
        intro_duration=0.0,
        once_only=False,
    )
    speaker = controller.session.speaker
    speaker.auto_advance = False

    controller.on_zone_enter()
    controller.update(1.0)
    controller.update(0.1)
    controller.update(0.1, key_pressed=True)
    controller.update(0.1, key_pressed=True)
    assert controller.session.state == SessionState.IDLE

    # Still inside: does not fire again
    controller.update(5.0)
    assert controller.session.state == SessionState.IDLE

    controller.on_zone_exit()
    controller.on_zone_enter()
    controller.update(1.0)
    assert controller.session.state == SessionState.LOCKED

def test_only_one_lock_across_sessions(presenter, caplog):
    lock = PlayerLock()
    first = make_controller(presenter, TriggerMode.DELAY_LOCKING, lock=lock, entry_delay=0.5)
    second = make_controller(presenter, TriggerMode.DELAY_LOCKING, lock=lock, entry_delay=0.5)

    first.on_zone_enter()
    second.on_zone_enter()
    with caplog.at_level("ERROR"):
        first.update(0.5)
        second.update(0.5)

    assert first.session.holds_lock
    assert not second.session.holds_lock
    assert "already held" in caplog.text

def test_skip_key_advances_presented_line(presenter):
    speaker = DialogueSpeaker(script="a\nb\nc", auto_advance=False)
    controller = make_controller(presenter, TriggerMode.KEY_GATED, speaker=speaker, skip_key=32)
    session = controller.session
    controller.on_zone_enter()

    # Skip does not open the dialogue
    controller.update(0.1, skip_pressed=True)
    assert session.state == SessionState.PROMPTING

    # Opening and skipping in one tick still shows the first line
    controller.update(0.1, key_pressed=True, skip_pressed=True)
    assert session.current_line == "a"

    controller.update(0.1, skip_pressed=True)
    assert session.current_line == "b"

    # Both keys together advance once
    controller.update(0.1, key_pressed=True, skip_pressed=True)
    assert session.current_line == "c"

def test_skip_key_ignored_outside_zone(presenter):
    controller = make_controller(presenter, TriggerMode.KEY_GATED, skip_key=32)
    controller.session.start()

    controller.update(0.1, skip_pressed=True)
    assert controller.session.current_index == 0

def test_skip_key_works_without_key_advance(presenter):
    controller = make_controller(presenter, TriggerMode.AUTO_PLAY, allow_key_advance=False, skip_key=32)
    controller.on_zone_enter()

    controller.update(0.1, key_pressed=True)
    assert controller.session.current_index == 0

    controller.update(0.1, skip_pressed=True)
    assert controller.session.current_line == "General Kenobi"
