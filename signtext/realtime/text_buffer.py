from __future__ import annotations

import logging
from typing import List, Optional

from .stabilizer import Event, EventKind

LOGGER = logging.getLogger(__name__)

SEPARATOR = " "


class TextAccumulator:
    """
    Append-only text buffer driven by stabilizer events.

    Letters collect in a pending word (`current_word`) and are merged into
    the committed text on a word break. Phrases go straight into the
    committed text. `text` is the display snapshot of both.
    """

    def __init__(self) -> None:
        self._committed: List[str] = []
        self._word: List[str] = []

    # ---------- views ----------
    @property
    def committed(self) -> str:
        return "".join(self._committed)

    @property
    def current_word(self) -> str:
        return "".join(self._word)

    @property
    def text(self) -> str:
        committed = self.committed
        word = self.current_word
        if not word:
            return committed
        if committed and not committed.endswith(SEPARATOR):
            return committed + SEPARATOR + word
        return committed + word

    def accepts_word_break(self) -> bool:
        return bool(self._word)

    def __len__(self) -> int:
        return len(self.text)

    # ---------- edits ----------
    def append_symbol(self, s: str) -> None:
        self._word.extend(s)

    def _append_with_separator(self, s: str) -> None:
        if self._committed and self._committed[-1] != SEPARATOR:
            self._committed.append(SEPARATOR)
        self._committed.extend(s)

    def append_phrase(self, s: str) -> None:
        if self._word:
            self.commit_word_break()
        self._append_with_separator(s)

    def commit_word_break(self) -> None:
        if not self._word:
            return
        self._append_with_separator(self._word)
        self._word.clear()

    def delete_last(self) -> Optional[str]:
        """Remove and return the last character, pending word first."""
        if self._word:
            return self._word.pop()
        if self._committed:
            return self._committed.pop()
        return None

    def clear(self) -> None:
        self._committed.clear()
        self._word.clear()

    def apply(self, event: Event) -> None:
        if event.kind is EventKind.SYMBOL:
            self.append_symbol(event.text)
        elif event.kind is EventKind.PHRASE:
            self.append_phrase(event.text)
        elif event.kind is EventKind.WORD_BREAK:
            self.commit_word_break()
        LOGGER.debug("Text now '%s'", self.text)
