"""L1 entity: one loudness measurement derived from a chunk."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Measurement:
    rms: float
    decibel: float  # already clamped to the display range
    sequence: int
    timestamp: float

    def exceeds(self, threshold: float) -> bool:
        """Alert state: True when the level is strictly above *threshold*."""
        return self.decibel > threshold
