"""Use case: microphone level metering — acquisition loop, RMS/dB mapping, lifecycle events."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import numpy as np

from sound_meter.l1_entities.capture_config import CaptureConfig
from sound_meter.l1_entities.errors import (
    FatalReadError,
    OpenError,
    PermissionDeniedError,
    StartError,
    TransientReadError,
)
from sound_meter.l1_entities.measurement import Measurement
from sound_meter.l1_entities.meter_event import LevelEvent, MeterEvent, StatusEvent
from sound_meter.l1_entities.recording_status import (
    INITIALIZING,
    RECORDING,
    STOPPED,
    STREAM_READY,
    RecordingStatus,
)
from sound_meter.l2_use_cases.ports.audio_source import AudioSource
from sound_meter.l2_use_cases.utils.level_math import (
    DEFAULT_OFFSET,
    DEFAULT_REFERENCE,
    clamp,
    compute_rms,
    rms_to_decibel,
)

log = logging.getLogger('sm.meter')

_WAIT_SLICE = 0.02  # seconds between cancellation checks during the inter-cycle wait


class LevelMeter:
    """Owns the capture session: pulls chunks, measures them, publishes events.

    Events go to *post_event* in the order they happen on the worker:
    Initializing, StreamReady, Recording, then one LevelEvent per non-empty
    chunk, then a single terminal Stopped or Error(reason).

    ``run()`` blocks until cancelled or failed, so call it from a dedicated
    worker thread. ``stop()`` and ``release()`` on the source run exactly once
    per successful ``open()`` whatever the exit path.
    """

    def __init__(
        self,
        audio_source: AudioSource,
        config: CaptureConfig,
        post_event: Callable[[MeterEvent], None],
        interval: float = 0.1,
        reference: float = DEFAULT_REFERENCE,
        offset: float = DEFAULT_OFFSET,
        log_every: int = 10,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._source = audio_source
        self._config = config
        self._post_event = post_event
        self._interval = interval
        self._reference = reference
        self._offset = offset
        self._log_every = log_every
        self._clock = clock
        self._sleep = sleep

        self._status: RecordingStatus = INITIALIZING
        self._sequence = 0

    @property
    def status(self) -> RecordingStatus:
        return self._status

    @property
    def measurement_count(self) -> int:
        return self._sequence

    def measure(self, samples: np.ndarray, n: int) -> Measurement:
        """Turn the first *n* samples into the next Measurement in sequence."""
        rms = compute_rms(samples, n)
        decibel = rms_to_decibel(rms, self._reference, self._offset)
        self._sequence += 1
        return Measurement(
            rms=rms,
            decibel=clamp(decibel),
            sequence=self._sequence,
            timestamp=self._clock(),
        )

    def run(self, is_cancelled: Callable[[], bool]) -> RecordingStatus:
        """Run the session until *is_cancelled* returns True or a fatal error occurs.

        Returns the terminal status (Stopped or Error).
        """
        self._publish_status(INITIALIZING)

        try:
            self._source.open(self._config)
        except PermissionDeniedError as e:
            log.error('Microphone permission not granted: %s', e)
            return self._publish_status(RecordingStatus.error('Permission denied'))
        except OpenError as e:
            log.error('Capture stream could not be opened: %s', e)
            return self._publish_status(RecordingStatus.error(f'Device unavailable: {e}'))
        except Exception as e:
            log.error('Unexpected error opening capture stream: %s', e, exc_info=True)
            return self._publish_status(RecordingStatus.error(_describe(e)))

        log.debug(
            'Stream ready: %d Hz, chunk=%d samples (%.1f ms)',
            self._config.sample_rate,
            self._config.chunk_size,
            self._config.chunk_duration * 1000,
        )
        self._publish_status(STREAM_READY)

        final = STOPPED
        try:
            self._source.start()
            log.debug('Recording started')
            self._publish_status(RECORDING)
            self._loop(is_cancelled)
        except StartError as e:
            log.error('Capture stream could not be started: %s', e)
            final = RecordingStatus.error(_describe(e))
        except (PermissionDeniedError, PermissionError) as e:
            log.error('Microphone permission revoked: %s', e)
            final = RecordingStatus.error('Permission denied')
        except FatalReadError as e:
            log.error('Capture device failed mid-stream: %s', e)
            final = RecordingStatus.error(f'Read failed: {e}')
        except Exception as e:
            log.error('Error during recording: %s', e, exc_info=True)
            final = RecordingStatus.error(_describe(e))
        finally:
            self._shutdown()

        if final is STOPPED:
            log.debug('Recording stopped and released after %d measurements', self._sequence)
        return self._publish_status(final)

    def _loop(self, is_cancelled: Callable[[], bool]) -> None:
        buffer = np.zeros(self._config.chunk_size, dtype=np.int16)
        read_count = 0

        while not is_cancelled():
            read_count += 1
            try:
                n = self._source.read_chunk(buffer)
            except TransientReadError as e:
                log.debug('Transient read error (read #%d): %s', read_count, e)
                n = 0

            if n > 0:
                measurement = self.measure(buffer, min(n, len(buffer)))
                if read_count % self._log_every == 0:
                    log.debug('Read #%d: RMS=%.2f, dB=%.2f', read_count, measurement.rms, measurement.decibel)
                self._post_event(LevelEvent(measurement))
            else:
                log.debug('Read size <= 0: %d', n)

            self._wait(is_cancelled)

    def _wait(self, is_cancelled: Callable[[], bool]) -> None:
        """Sleep one interval from now, waking early on cancellation."""
        deadline = self._clock() + self._interval
        while not is_cancelled():
            remaining = deadline - self._clock()
            if remaining <= 0:
                return
            self._sleep(min(remaining, _WAIT_SLICE))

    def _shutdown(self) -> None:
        try:
            self._source.stop()
        except Exception as e:
            log.warning('stop() failed during shutdown: %s', e)
        try:
            self._source.release()
        except Exception as e:
            log.warning('release() failed during shutdown: %s', e)

    def _publish_status(self, status: RecordingStatus) -> RecordingStatus:
        self._status = status
        self._post_event(StatusEvent(status))
        return status


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
