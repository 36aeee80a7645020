"""Port: audio capture source."""

from __future__ import annotations

from typing import Protocol

import numpy as np

from sound_meter.l1_entities.capture_config import CaptureConfig


class AudioSource(Protocol):
    """Abstract single-device microphone stream delivering int16 mono samples."""

    def min_chunk_size(self, sample_rate: int) -> int:
        """Smallest block size (in samples) the device supports at *sample_rate*."""
        ...

    def open(self, config: CaptureConfig) -> None:
        """Open and configure the stream.

        Raises UnsupportedConfigError or PermissionDeniedError.
        """
        ...

    def start(self) -> None:
        """Begin active capture. Raises DeviceBusyError or NotInitializedError."""
        ...

    def read_chunk(self, out: np.ndarray) -> int:
        """Blocking read into *out*; returns samples written (0 <= n <= len(out)).

        Raises TransientReadError (retry) or FatalReadError (handle invalid).
        """
        ...

    def stop(self) -> None:
        """Stop capturing. Idempotent."""
        ...

    def release(self) -> None:
        """Release the native handle. Idempotent."""
        ...
