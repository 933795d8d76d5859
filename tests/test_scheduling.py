import threading

from signtext.realtime.scheduling import LatestFrameSlot, ResultSequencer


def test_slot_keeps_latest_and_counts_drops():
    slot = LatestFrameSlot()
    assert slot.offer(1) is False
    assert slot.offer(2) is True
    assert slot.offer(3) is True
    assert slot.dropped == 2
    assert slot.take(timeout=0) == 3
    assert slot.take(timeout=0.01) is None


def test_close_wakes_waiting_consumer():
    slot = LatestFrameSlot()
    got = []
    t = threading.Thread(target=lambda: got.append(slot.take(timeout=5)))
    t.start()
    slot.close()
    t.join(timeout=5)
    assert not t.is_alive()
    assert got == [None]
    assert slot.closed


def test_consumer_receives_offered_item():
    slot = LatestFrameSlot()
    got = []
    t = threading.Thread(target=lambda: got.append(slot.take(timeout=5)))
    t.start()
    slot.offer("frame")
    t.join(timeout=5)
    assert got == ["frame"]


def test_sequencer_drops_late_results():
    seq = ResultSequencer()
    assert seq.accept(10.0, "a") == (10.0, "a")
    assert seq.accept(5.0, "late") is None
    assert seq.accept(10.0, "dup") is None
    assert seq.accept(11.0, "b") == (11.0, "b")
    assert seq.dropped == 2
