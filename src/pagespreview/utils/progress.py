"""Simple terminal progress bar for downloads."""

import sys
from typing import TextIO

BAR_WIDTH = 50


class ProgressBar:
    """Percentage bar redrawn in place on a terminal stream."""

    def __init__(self, message: str, total: int, stream: TextIO | None = None):
        self.message = message
        self.total = total
        self.value = 0
        self.percent = -1
        self.stream = stream if stream is not None else sys.stderr

    @property
    def enabled(self) -> bool:
        return self.total > 0

    def proceed(self, delta: int) -> bool:
        """Advance by ``delta`` units and redraw if the percentage changed.

        Returns:
            True once the total has been reached
        """
        if not self.enabled:
            return False

        self.value = min(self.value + delta, self.total)
        percent = self.value * 100 // self.total
        if percent != self.percent:
            self.percent = percent
            self._draw()
        return self.value >= self.total

    def _draw(self) -> None:
        count = min(max(self.percent, 0), 100) * BAR_WIDTH // 100
        bar = "=" * count + ">" + " " * (BAR_WIDTH - count)
        self.stream.write(f"\r{self.message} {self.percent:3d}% |{bar}|")
        if self.percent >= 100:
            self.stream.write("\n")
        self.stream.flush()
