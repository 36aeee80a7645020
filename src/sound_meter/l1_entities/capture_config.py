"""L1 entity: immutable capture stream configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from sound_meter.l1_entities.audio_constants import BIT_DEPTH, CHANNELS, SAMPLE_RATE


class CaptureConfig(BaseModel):
    """Mono, 16-bit signed capture at a fixed rate and block size."""

    model_config = ConfigDict(frozen=True)

    sample_rate: int = Field(default=SAMPLE_RATE, gt=0)
    chunk_size: int = Field(gt=0)
    channels: Literal[1] = CHANNELS
    bit_depth: Literal[16] = BIT_DEPTH

    @property
    def chunk_duration(self) -> float:
        """Seconds of audio covered by one full chunk."""
        return self.chunk_size / self.sample_rate
