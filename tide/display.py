"""Display surface: the one place the statistics text is written to."""

from __future__ import annotations
from collections import deque
from typing import Deque

HISTORY_SIZE = 20


class DisplaySurface:
    """Holds the current panel text. Each write replaces it wholesale.

    `history` keeps only the last few writes, for inspection.
    """

    def __init__(self, text: str = "", history_size: int = HISTORY_SIZE) -> None:
        self.text = text
        self.history: Deque[str] = deque(maxlen=history_size)

    def write(self, text: str) -> None:
        self.text = text
        self.history.append(text)

    def __str__(self) -> str:
        return self.text
