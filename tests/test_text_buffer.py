from signtext.realtime.stabilizer import Event
from signtext.realtime.text_buffer import TextAccumulator


def test_letters_collect_into_word_until_break():
    buf = TextAccumulator()
    for s in "AB":
        buf.append_symbol(s)
    assert buf.current_word == "AB"
    assert buf.committed == ""
    assert buf.text == "AB"
    assert buf.accepts_word_break()

    buf.commit_word_break()
    buf.append_symbol("C")
    assert buf.committed == "AB"
    assert buf.text == "AB C"

    buf.commit_word_break()
    assert buf.text == "AB C"
    assert not buf.accepts_word_break()


def test_word_break_without_pending_word_is_noop():
    buf = TextAccumulator()
    buf.commit_word_break()
    assert buf.text == ""


def test_phrase_spacing():
    buf = TextAccumulator()
    buf.append_phrase("hello")
    assert buf.text == "hello"
    buf.append_phrase("world")
    assert buf.text == "hello world"


def test_phrase_after_trailing_space_adds_no_extra_space():
    buf = TextAccumulator()
    buf.append_phrase("hello")
    buf.append_phrase("you")
    for _ in "you":
        buf.delete_last()
    assert buf.text == "hello "
    buf.append_phrase("there")
    assert buf.text == "hello there"


def test_phrase_flushes_pending_word():
    buf = TextAccumulator()
    buf.append_symbol("O")
    buf.append_symbol("K")
    buf.append_phrase("thanks")
    assert buf.text == "OK thanks"
    assert buf.current_word == ""


def test_delete_last_prefers_pending_word():
    buf = TextAccumulator()
    buf.append_phrase("hi")
    buf.append_symbol("A")
    assert buf.delete_last() == "A"
    assert buf.text == "hi"
    assert buf.delete_last() == "i"
    assert buf.delete_last() == "h"
    assert buf.delete_last() is None
    assert buf.text == ""


def test_apply_dispatches_events():
    buf = TextAccumulator()
    for ev in [Event.symbol("H"), Event.symbol("I"), Event.word_break(), Event.phrase("friend")]:
        buf.apply(ev)
    assert buf.text == "HI friend"


def test_clear():
    buf = TextAccumulator()
    buf.append_phrase("hello")
    buf.append_symbol("X")
    buf.clear()
    assert buf.text == ""
    assert len(buf) == 0
