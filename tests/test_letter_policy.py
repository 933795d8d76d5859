import math

from signtext.realtime.stabilizer import Event, Prediction, RecognitionMode, Stabilizer, StabilizerConfig

L = RecognitionMode.LETTER


def feed(stab, symbol, times, conf=0.9, word_open=False):
    return [stab.process(Prediction(symbol, conf), t, L, word_open=word_open) for t in times]


def test_confirms_once_after_stability_time():
    stab = Stabilizer()
    events = feed(stab, "A", range(0, 501, 100))
    assert events[:-1] == [None] * 5
    assert events[-1] == Event.symbol("A")


def test_threshold_is_strict():
    stab = Stabilizer()
    assert [e for e in feed(stab, "A", range(0, 1001, 100), conf=0.55) if e] == []

    stab = Stabilizer()
    events = feed(stab, "A", range(0, 501, 100), conf=0.5501)
    assert events[-1] == Event.symbol("A")


def test_same_symbol_suppressed_during_cooldown():
    cfg = StabilizerConfig(stability_time_ms=100, same_symbol_cooldown_ms=800)
    stab = Stabilizer(letter_config=cfg)
    assert feed(stab, "A", [-100, 0]) == [None, Event.symbol("A")]

    events = feed(stab, "A", range(200, 901, 100))
    times = list(range(200, 901, 100))
    confirmed_at = [t for t, e in zip(times, events) if e is not None]
    assert confirmed_at == [900]


def test_different_symbol_not_subject_to_cooldown():
    cfg = StabilizerConfig(stability_time_ms=100, same_symbol_cooldown_ms=800)
    stab = Stabilizer(letter_config=cfg)
    feed(stab, "A", [-100, 0])
    assert feed(stab, "B", [100, 200]) == [None, Event.symbol("B")]


def test_low_confidence_aborts_tracking():
    stab = Stabilizer()
    stab.process(Prediction("A", 0.9), 0, L)
    stab.process(Prediction("A", 0.2), 300, L)
    assert stab.state.current_stable_symbol is None
    assert stab.state.stable_since is None

    events = feed(stab, "A", range(400, 901, 100))
    assert events[:-1] == [None] * 5
    assert events[-1] == Event.symbol("A")


def test_symbol_change_restarts_run():
    stab = Stabilizer()
    feed(stab, "A", [0, 300])
    assert feed(stab, "B", [400, 600, 899]) == [None, None, None]
    assert stab.process(Prediction("B", 0.9), 900, L) == Event.symbol("B")


def test_word_break_fires_once_after_absence():
    stab = Stabilizer()
    assert feed(stab, "A", [-500, 0])[-1] == Event.symbol("A")

    assert stab.process(None, 1000, L, word_open=True) is None
    assert stab.process(None, 3000, L, word_open=True) is None
    assert stab.process(None, 3001, L, word_open=True) == Event.word_break()
    assert stab.process(None, 3500, L, word_open=True) is None
    assert stab.process(None, 10000, L, word_open=True) is None


def test_word_break_needs_open_word():
    stab = Stabilizer()
    feed(stab, "A", [-500, 0])
    assert stab.process(None, 5000, L, word_open=False) is None


def test_low_confidence_frames_count_as_subject_seen():
    stab = Stabilizer()
    feed(stab, "A", [-500, 0])
    stab.process(Prediction("Q", 0.1), 2000, L, word_open=True)
    assert stab.process(None, 4000, L, word_open=True) is None
    assert stab.process(None, 5001, L, word_open=True) == Event.word_break()


def test_malformed_predictions_are_ignored():
    stab = Stabilizer()
    bad = [
        Prediction("", 0.9),
        Prediction("   ", 0.9),
        Prediction("A", -0.1),
        Prediction("A", 1.5),
        Prediction("A", math.nan),
        Prediction("A", "high"),
        Prediction("A", "0.9"),
        Prediction("A", True),
        "A",
    ]
    for i, p in enumerate(bad):
        assert stab.process(p, i * 100, L, word_open=True) is None
    assert stab.state.last_subject_seen_at is None
    assert stab.state.current_stable_symbol is None


def test_out_of_order_frame_is_dropped():
    stab = Stabilizer()
    feed(stab, "A", [0, 400])
    assert stab.process(Prediction("B", 0.9), 300, L) is None
    assert stab.state.current_stable_symbol == "A"
    assert stab.process(Prediction("A", 0.9), 500, L) == Event.symbol("A")


def test_reset_returns_to_empty_state():
    stab = Stabilizer()
    feed(stab, "A", [-500, 0, 100])
    stab.reset()
    assert stab.state.is_empty()
    assert stab.process(Prediction("A", 0.9), 50, L) is None


def test_replay_is_deterministic():
    seq = [(Prediction("H", 0.9), t) for t in range(0, 700, 50)]
    seq += [(None, t) for t in range(700, 4000, 250)]
    seq += [(Prediction("I", 0.8), t) for t in range(4000, 4600, 100)]
    seq += [(Prediction("I", 0.3), 4600), (Prediction("", 0.9), 4700)]

    def run(stab):
        word_open = False
        out = []
        for p, t in seq:
            e = stab.process(p, t, L, word_open=word_open)
            if e is not None:
                word_open = e.kind.value == "symbol"
            out.append(e)
        return out

    stab = Stabilizer()
    first = run(stab)
    stab.reset()
    assert run(stab) == first
    assert run(Stabilizer()) == first
    assert [e for e in first if e] == [Event.symbol("H"), Event.word_break(), Event.symbol("I")]
