"""Gateway: ToneAudioSource — synthetic sine input for machines without a microphone."""

from __future__ import annotations

import math
import time
from collections.abc import Callable

import numpy as np

from sound_meter.l1_entities.audio_constants import SAMPLE_MAX, SAMPLE_MIN
from sound_meter.l1_entities.capture_config import CaptureConfig
from sound_meter.l1_entities.errors import FatalReadError, NotInitializedError

_MIN_BLOCK = 1024


class ToneAudioSource:
    """Implements AudioSource with a continuous int16 sine wave paced to real time."""

    def __init__(
        self,
        amplitude: int = 3000,
        frequency: float = 440.0,
        realtime: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.amplitude = min(abs(amplitude), SAMPLE_MAX)
        self._frequency = frequency
        self._realtime = realtime
        self._sleep = sleep
        self._config: CaptureConfig | None = None
        self._started = False
        self._phase = 0  # samples emitted so far

    def min_chunk_size(self, sample_rate: int) -> int:
        return _MIN_BLOCK

    def open(self, config: CaptureConfig) -> None:
        self._config = config
        self._phase = 0

    def start(self) -> None:
        if self._config is None:
            raise NotInitializedError('start() called before open()')
        self._started = True

    def read_chunk(self, out: np.ndarray) -> int:
        if self._config is None or not self._started:
            raise FatalReadError('tone source is not running')
        n = len(out)
        rate = self._config.sample_rate
        t = (np.arange(n) + self._phase) / rate
        wave = np.round(self.amplitude * np.sin(2 * math.pi * self._frequency * t))
        out[:] = np.clip(wave, SAMPLE_MIN, SAMPLE_MAX).astype(np.int16)
        self._phase += n
        if self._realtime:
            self._sleep(n / rate)
        return n

    def stop(self) -> None:
        self._started = False

    def release(self) -> None:
        self._started = False
        self._config = None
