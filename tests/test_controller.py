from signtext.realtime.controller import CameraFacing, RecognitionController
from signtext.realtime.stabilizer import Event, Prediction, RecognitionMode, StabilizerConfig


def hold(ctrl, symbol, start, end, step=100, conf=0.9):
    return [e for e in (ctrl.process_frame(Prediction(symbol, conf), t) for t in range(start, end + 1, step)) if e]


def test_confirmed_letters_reach_text():
    ctrl = RecognitionController()
    assert hold(ctrl, "A", 0, 500) == [Event.symbol("A")]
    assert hold(ctrl, "B", 600, 1100) == [Event.symbol("B")]
    assert ctrl.snapshot().text == "AB"


def test_delete_last_allows_immediate_reconfirmation():
    letter = StabilizerConfig(stability_time_ms=500, same_symbol_cooldown_ms=5000)
    ctrl = RecognitionController(configs={RecognitionMode.LETTER: letter})
    hold(ctrl, "A", 0, 500)
    hold(ctrl, "B", 600, 1100)
    assert ctrl.snapshot().text == "AB"

    assert ctrl.delete_last() == "B"
    assert ctrl.snapshot().text == "A"
    assert ctrl.stabilizer.state.last_confirmed_symbol is None

    hold(ctrl, "A", 1200, 1700)
    assert ctrl.snapshot().text == "AA"


def test_word_break_commits_word():
    ctrl = RecognitionController()
    hold(ctrl, "A", -500, 0, step=500)
    assert ctrl.process_frame(None, 3000) is None
    assert ctrl.process_frame(None, 3001) == Event.word_break()
    snap = ctrl.snapshot()
    assert snap.committed == "A"
    assert snap.current_word == ""
    assert ctrl.process_frame(None, 9000) is None


def test_toggle_mode_isolates_state():
    ctrl = RecognitionController()
    hold(ctrl, "A", 0, 500)
    ctrl.process_frame(Prediction("B", 0.9), 600)

    assert ctrl.toggle_mode() is RecognitionMode.PHRASE
    snap = ctrl.snapshot()
    assert snap.text == ""
    assert snap.mode is RecognitionMode.PHRASE
    assert ctrl.stabilizer.mode is RecognitionMode.PHRASE
    assert ctrl.stabilizer.state.is_empty()

    events = hold(ctrl, "hello", 700, 1400)
    assert events == [Event.phrase("hello")]
    assert ctrl.snapshot().text == "hello"


def test_clear_is_idempotent_and_silent():
    ctrl = RecognitionController()
    seen = []
    ctrl.add_listener(lambda ev, snap: seen.append(ev))
    hold(ctrl, "A", 0, 500)
    assert len(seen) == 1

    for _ in range(2):
        ctrl.clear()
        assert ctrl.snapshot().text == ""
        assert ctrl.stabilizer.state.is_empty()
        assert ctrl.mode is RecognitionMode.LETTER
    assert len(seen) == 1


def test_stale_generation_results_are_dropped():
    ctrl = RecognitionController()
    gen = ctrl.generation
    hold(ctrl, "A", 0, 400)
    ctrl.clear()
    assert ctrl.process_frame(Prediction("A", 0.9), 500, generation=gen) is None
    assert ctrl.stabilizer.state.is_empty()
    assert ctrl.process_frame(Prediction("A", 0.9), 600, generation=ctrl.generation) is None
    assert ctrl.stabilizer.state.current_stable_symbol == "A"


def test_toggle_facing_keeps_recognition_state():
    ctrl = RecognitionController()
    hold(ctrl, "A", 0, 300)
    gen = ctrl.generation
    assert ctrl.toggle_facing() is CameraFacing.BACK
    assert ctrl.generation == gen
    assert hold(ctrl, "A", 400, 500) == [Event.symbol("A")]
    assert ctrl.snapshot().facing is CameraFacing.BACK


def test_listener_gets_fresh_snapshot():
    ctrl = RecognitionController()
    texts = []
    ctrl.add_listener(lambda ev, snap: texts.append(snap.text))
    hold(ctrl, "H", 0, 500)
    hold(ctrl, "I", 600, 1100)
    assert texts == ["H", "HI"]


def test_current_prediction_and_degraded_signal():
    ctrl = RecognitionController()
    ctrl.process_frame(Prediction("A", 0.4, bbox=(1, 2, 3, 4)), 0)
    assert ctrl.snapshot().current_prediction.bbox == (1, 2, 3, 4)
    ctrl.process_frame(Prediction("", 0.9), 10)
    assert ctrl.snapshot().current_prediction is None

    ctrl.mark_degraded("no model")
    ctrl.mark_degraded("no model")
    assert ctrl.snapshot().degraded_reason == "no model"
    assert ctrl.process_frame(None, 20) is None
