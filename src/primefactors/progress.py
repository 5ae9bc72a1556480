# src/primefactors/progress.py
from __future__ import annotations

import sys
import time


class Progress:
    """
    Text progress bar usable as a calculator progress callback:
    called with a fraction in [0, 1], it only draws and never asks to abort.
    """

    def __init__(self, label: str = "", *, enabled: bool = True):
        self.label = label
        self.enabled = enabled
        self.start = time.perf_counter()
        self.last_draw = 0.0
        self.spin = "|/-\\"
        self.i = 0
        self.drawn = False

    def __call__(self, fraction: float) -> None:
        self.update(fraction)

    def update(self, fraction: float) -> None:
        THROTTLE = 0.05
        if not self.enabled:
            return
        now = time.perf_counter()
        if now - self.last_draw < THROTTLE:  # throttle to avoid flicker
            return
        self.last_draw = now
        self.i = (self.i + 1) % len(self.spin)
        frac = min(max(fraction, 0.0), 1.0)
        pct = int(frac * 100)
        bar_len = 24
        fill = int(frac * bar_len)
        bar = "#" * fill + "-" * (bar_len - fill)
        sys.stdout.write(f"\r[{self.spin[self.i]}] [{bar}] {pct:3d}%  {self.label[:50]}")
        sys.stdout.flush()
        self.drawn = True

    def done(self) -> None:
        if not (self.enabled and self.drawn):
            return
        sys.stdout.write("\r" + " " * 80 + "\r")
        sys.stdout.flush()
