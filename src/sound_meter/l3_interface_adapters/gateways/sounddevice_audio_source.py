"""Gateway: sounddevice audio source — implements AudioSource port."""

from __future__ import annotations

import logging
import math
import threading

import numpy as np
import sounddevice as sd

from sound_meter.l1_entities.capture_config import CaptureConfig
from sound_meter.l1_entities.errors import (
    DeviceBusyError,
    FatalReadError,
    NotInitializedError,
    PermissionDeniedError,
    TransientReadError,
    UnsupportedConfigError,
)

log = logging.getLogger('sm.audio')

_DTYPE = 'int16'
_FALLBACK_LATENCY = 0.04  # seconds, used when the device cannot be queried
_MIN_BLOCK = 256

# PortAudio error codes (portaudio.h)
_PA_DEVICE_UNAVAILABLE = -9985
_PA_TIMED_OUT = -9987
_PA_INPUT_OVERFLOWED = -9981

_PERMISSION_HINTS = ('permission', 'not permitted', 'access denied', 'not authorized')

# Only one stream may hold the microphone at a time.
_DEVICE_LOCK = threading.Lock()


def _is_permission_error(exc: BaseException) -> bool:
    if isinstance(exc, PermissionError):
        return True
    text = str(exc).lower()
    return any(hint in text for hint in _PERMISSION_HINTS)


def _pa_code(exc: sd.PortAudioError) -> int | None:
    if len(exc.args) > 1 and isinstance(exc.args[1], int):
        return exc.args[1]
    return None


class SounddeviceAudioSource:
    """Wraps a blocking sounddevice.InputStream delivering int16 mono chunks."""

    def __init__(self, device: int | str | None = None) -> None:
        self._device = device
        self._stream: sd.InputStream | None = None
        self._holds_device = False

    def min_chunk_size(self, sample_rate: int) -> int:
        try:
            info = sd.query_devices(self._device, kind='input')
            latency = float(info['default_low_input_latency'])
        except Exception as e:
            log.warning('Cannot query input device latency (%s); using %.0f ms', e, _FALLBACK_LATENCY * 1000)
            latency = _FALLBACK_LATENCY
        return max(math.ceil(latency * sample_rate), _MIN_BLOCK)

    def open(self, config: CaptureConfig) -> None:
        if self._stream is not None:
            return
        blocksize = max(config.chunk_size, self.min_chunk_size(config.sample_rate))
        try:
            sd.check_input_settings(
                device=self._device,
                channels=config.channels,
                dtype=_DTYPE,
                samplerate=config.sample_rate,
            )
            self._stream = sd.InputStream(
                device=self._device,
                samplerate=config.sample_rate,
                channels=config.channels,
                dtype=_DTYPE,
                blocksize=blocksize,
            )
        except (sd.PortAudioError, ValueError, OSError) as e:
            self._stream = None
            if _is_permission_error(e):
                raise PermissionDeniedError(str(e)) from e
            raise UnsupportedConfigError(str(e)) from e
        log.info('Input stream opened (%d Hz, blocksize=%d)', config.sample_rate, blocksize)

    def start(self) -> None:
        if self._stream is None:
            raise NotInitializedError('start() called before open()')
        if self._stream.active:
            return
        if not self._holds_device:
            if not _DEVICE_LOCK.acquire(blocking=False):
                raise DeviceBusyError('microphone is already in use by another stream')
            self._holds_device = True
        try:
            self._stream.start()
        except sd.PortAudioError as e:
            self._release_device()
            if _is_permission_error(e):
                raise PermissionDeniedError(str(e)) from e
            if _pa_code(e) == _PA_DEVICE_UNAVAILABLE:
                raise DeviceBusyError(str(e)) from e
            raise NotInitializedError(str(e)) from e

    def read_chunk(self, out: np.ndarray) -> int:
        stream = self._stream
        if stream is None or stream.closed:
            raise FatalReadError('stream is not open')
        if not stream.active:
            raise FatalReadError('stream is not started')
        try:
            data, overflowed = stream.read(len(out))
        except sd.PortAudioError as e:
            if _pa_code(e) in (_PA_TIMED_OUT, _PA_INPUT_OVERFLOWED):
                raise TransientReadError(str(e)) from e
            if _is_permission_error(e):
                raise PermissionDeniedError(str(e)) from e
            raise FatalReadError(str(e)) from e
        if overflowed:
            log.debug('Input overflow: samples were dropped before this read')
        samples = np.asarray(data).reshape(-1)
        n = min(len(samples), len(out))
        out[:n] = samples[:n]
        return n

    def stop(self) -> None:
        if self._stream is not None and self._stream.active:
            self._stream.stop()

    def release(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
            log.info('Input stream released')
        self._release_device()

    def _release_device(self) -> None:
        if self._holds_device:
            self._holds_device = False
            _DEVICE_LOCK.release()
