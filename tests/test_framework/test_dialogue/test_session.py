import pytest
from roots_engine.core.scheduler import Scheduler
from roots_framework.components import DialogueSpeaker, SessionState
from roots_framework.dialogue.errors import InvalidTransition
from roots_framework.dialogue.session import DialogueEvent, DialogueSession
from roots_framework.world.player import PlayerLock

KENOBI = "Hello there\nGeneral Kenobi\n"

def make_session(presenter, event_bus=None, script=KENOBI, **kwargs):
    speaker_fields = {
        k: kwargs.pop(k) for k in list(kwargs)
        if k in DialogueSpeaker.model_fields
    }
    speaker = DialogueSpeaker(script=script, **speaker_fields)
    return DialogueSession(speaker, presenter, event_bus=event_bus, name="npc", **kwargs)

def event_types(recorder):
    return [e.type for e in recorder]

def test_start_shows_first_line(presenter):
    session = make_session(presenter)

    assert session.start()
    assert session.state == SessionState.PRESENTING
    assert session.current_index == 0
    assert session.current_line == "Hello there"
    assert session.lines == ("Hello there", "General Kenobi")
    presenter.show_bubble.assert_called_once_with("Hello there", session.speaker.bubble)

def test_empty_script_never_leaves_idle(presenter):
    for script in (None, "", "\n\n"):
        session = make_session(presenter, script=script)
        assert not session.show_prompt()
        assert not session.start()
        assert not session.begin_lock()
        session.tick(10.0)
        assert session.state == SessionState.IDLE
    presenter.show_bubble.assert_not_called()
    presenter.show_prompt.assert_not_called()

def test_prompt_then_start_hides_prompt(presenter):
    session = make_session(presenter)

    assert session.show_prompt()
    assert session.state == SessionState.PROMPTING
    presenter.show_prompt.assert_called_once_with("Press E to talk", session.speaker.prompt)

    assert session.start()
    presenter.hide.assert_called_once_with(1)
    assert session.state == SessionState.PRESENTING

def test_start_while_active_is_noop(presenter):
    session = make_session(presenter)
    session.start()

    assert not session.start()
    assert not session.show_prompt()
    assert not session.begin_lock()
    assert presenter.show_bubble.call_count == 1

def test_advance_while_idle_is_noop(presenter):
    session = make_session(presenter)
    assert not session.advance()
    assert session.state == SessionState.IDLE

@pytest.mark.parametrize("count", [1, 2, 3, 5])
def test_exactly_n_advances_finish(presenter, event_bus, recorder, count):
    script = "\n".join(f"line {i}" for i in range(count))
    session = make_session(presenter, event_bus, script=script, seconds_per_line=1.0)
    session.start()

    for k in range(1, count):
        # Alternate key and timer driven advances
        if k % 2:
            assert session.advance()
        else:
            session.tick(1.0)
        assert session.current_index == min(k, count - 1)
        assert session.state == SessionState.PRESENTING

    session.advance()
    assert session.state == SessionState.IDLE
    assert session.current_index == 0
    assert session.lines == ()
    assert event_types(recorder).count(DialogueEvent.FINISHED) == 1

def test_advance_updates_bubble_text(presenter):
    session = make_session(presenter)
    session.start()
    session.advance()

    presenter.update_text.assert_called_once_with(1, "General Kenobi")

def test_finish_hides_bubble_and_emits_once(presenter, event_bus, recorder):
    session = make_session(presenter, event_bus)
    session.start()
    session.advance()
    session.advance()

    presenter.hide.assert_called_once_with(1)
    assert event_types(recorder) == [
        DialogueEvent.STARTED,
        DialogueEvent.LINE_SHOWN,
        DialogueEvent.LINE_SHOWN,
        DialogueEvent.FINISHED,
    ]
    finished = recorder[-1]
    assert finished["session"] is session
    assert finished["line_count"] == 2

    # Nothing further happens after the run is over
    assert not session.advance()
    session.tick(10.0)
    assert event_types(recorder).count(DialogueEvent.FINISHED) == 1

def test_timer_advances_after_interval(presenter):
    session = make_session(presenter, seconds_per_line=3.0)
    session.start()

    session.tick(1.0)
    session.tick(1.0)
    assert session.current_index == 0
    assert session.elapsed_since_advance == pytest.approx(2.0)

    session.tick(1.0)
    assert session.current_line == "General Kenobi"
    assert session.elapsed_since_advance == 0.0

def test_at_most_one_advance_per_tick(presenter):
    session = make_session(presenter, script="a\nb\nc", seconds_per_line=1.0)
    session.start()

    session.tick(10.0)
    assert session.current_index == 1

def test_disallowed_auto_advance_keeps_counting(presenter):
    session = make_session(presenter, seconds_per_line=1.0)
    session.start()

    session.tick(2.0, allow_auto_advance=False)
    assert session.current_index == 0
    assert session.elapsed_since_advance == pytest.approx(2.0)

    session.tick(0.0)
    assert session.current_index == 1

@pytest.mark.parametrize("fields", [{"auto_advance": False}, {"seconds_per_line": 0}])
def test_timer_disabled(presenter, fields):
    session = make_session(presenter, **fields)
    session.start()

    session.tick(100.0)
    assert session.current_index == 0
    assert session.elapsed_since_advance == 0.0

def test_terminal_state_prompting(presenter, event_bus, recorder):
    session = make_session(presenter, event_bus, terminal_state=SessionState.PROMPTING)
    session.start()
    session.advance()
    session.advance()

    assert session.state == SessionState.PROMPTING
    assert session.lines == ()
    assert presenter.show_prompt.call_count == 1
    assert DialogueEvent.FINISHED in event_types(recorder)

    # The prompt can start a fresh run
    assert session.start()
    assert session.current_line == "Hello there"

def test_cancel_from_presenting(presenter, event_bus, recorder):
    session = make_session(presenter, event_bus)
    session.start()
    session.tick(1.0)
    session.advance()

    session.cancel()

    assert session.state == SessionState.IDLE
    assert session.current_index == 0
    assert session.elapsed_since_advance == 0.0
    presenter.hide.assert_called_once_with(1)
    assert event_types(recorder)[-1] == DialogueEvent.CANCELLED
    assert DialogueEvent.FINISHED not in event_types(recorder)

def test_cancel_from_prompting_hides_prompt(presenter):
    session = make_session(presenter)
    session.show_prompt()

    session.cancel()
    presenter.hide.assert_called_once_with(1)
    assert not session.is_active

def test_cancel_while_idle_is_silent(presenter, event_bus, recorder):
    session = make_session(presenter, event_bus)
    session.cancel()
    assert recorder == []

def test_reentry_restarts_from_first_line(presenter):
    session = make_session(presenter, script="a\nb\nc")
    session.start()
    session.advance()
    session.cancel()

    session.start()
    assert session.current_line == "a"

def test_script_edits_apply_on_next_start(presenter):
    session = make_session(presenter, script="old line")
    session.start()
    session.speaker.script = "new line\nsecond"

    # The running session keeps its lines
    assert session.lines == ("old line",)

    session.cancel()
    session.start()
    assert session.lines == ("new line", "second")

def test_wrapped_bubble_text(presenter):
    line = "It was a bright cold day in April and the clocks were striking thirteen"
    session = make_session(presenter, script=line, max_chars_per_row=20)
    session.start()

    shown = presenter.show_bubble.call_args[0][0]
    assert shown == "It was a bright cold\nday in April and the\nclocks were striking\nthirteen"
    assert session.current_line == line

def test_set_max_chars_per_row_rewraps(presenter):
    line = "the quick brown fox jumps over the lazy dog"
    session = make_session(presenter, script=line, max_chars_per_row=40)
    session.start()

    session.set_max_chars_per_row(10)

    presenter.update_text.assert_called_once_with(1, session.current_text)
    assert session.current_text.startswith("the quick\nbrown fox")

def test_begin_lock_then_intro_presents(presenter, audio, event_bus, recorder):
    lock = PlayerLock()
    session = make_session(presenter, event_bus, audio=audio, player_lock=lock)

    assert session.begin_lock(intro_sound="ring.wav", intro_volume=0.8, intro_duration=2.0)
    assert session.state == SessionState.LOCKED
    assert lock.held
    assert lock.holder == "npc"
    audio.play.assert_called_once_with("ring.wav", 0.8, False)
    presenter.show_bubble.assert_not_called()

    session.tick(1.0)
    assert session.state == SessionState.LOCKED

    session.tick(1.0)
    assert session.state == SessionState.PRESENTING
    assert session.current_line == "Hello there"
    audio.stop.assert_called_once()

    session.advance()
    session.advance()
    assert session.state == SessionState.IDLE
    assert not lock.held
    assert event_types(recorder)[0] == DialogueEvent.LOCKED
    assert event_types(recorder).count(DialogueEvent.FINISHED) == 1

def test_locking_run_finishes_idle_even_with_prompting_terminal(presenter):
    lock = PlayerLock()
    session = make_session(
        presenter,
        script="only line",
        player_lock=lock,
        terminal_state=SessionState.PROMPTING,
    )
    session.begin_lock(intro_duration=0.0)
    session.tick(0.0)
    session.advance()

    assert session.state == SessionState.IDLE
    presenter.show_prompt.assert_not_called()
    assert not lock.held

def test_cancel_while_locked_releases_everything(presenter, audio):
    lock = PlayerLock()
    session = make_session(presenter, audio=audio, player_lock=lock)
    session.begin_lock(intro_sound="ring.wav", intro_duration=2.0)

    session.cancel()

    assert session.state == SessionState.IDLE
    assert not lock.held
    audio.stop.assert_called_once()
    assert session.intro_elapsed == 0.0

def test_lock_conflict_is_logged_and_session_continues(presenter, caplog):
    lock = PlayerLock()
    other = lock.acquire("someone else")
    session = make_session(presenter, player_lock=lock)

    with caplog.at_level("ERROR"):
        assert session.begin_lock(intro_duration=0.0)

    assert "player lock already held by someone else" in caplog.text
    assert not session.holds_lock
    session.tick(0.0)
    session.advance()
    session.advance()

    # The other holder keeps its token
    assert lock.held
    assert lock.holder == "someone else"
    lock.release(other)

def test_dialogue_sound_stopped_after_duration(presenter, audio):
    scheduler = Scheduler()
    session = make_session(
        presenter,
        audio=audio,
        scheduler=scheduler,
        dialogue_sound="talk.wav",
        dialogue_sound_volume=0.5,
        dialogue_sound_duration=2.0,
    )
    session.start()

    audio.play.assert_called_once_with("talk.wav", 0.5, False)
    assert len(scheduler.pending) == 1

    scheduler.update(1.0)
    audio.stop.assert_not_called()
    scheduler.update(1.0)
    audio.stop.assert_called_once()
    assert scheduler.pending == []

def test_cancel_stops_sound_and_disarms_callback(presenter, audio):
    scheduler = Scheduler()
    session = make_session(presenter, audio=audio, scheduler=scheduler, dialogue_sound="talk.wav")
    session.start()
    pending = scheduler.pending[0]

    session.cancel()

    assert pending.cancelled
    audio.stop.assert_called_once()
    scheduler.update(5.0)
    audio.stop.assert_called_once()

def test_internal_transition_table_rejects_illegal_moves(presenter):
    session = make_session(presenter)
    session.show_prompt()

    with pytest.raises(InvalidTransition):
        session._transition(SessionState.LOCKED)
