"""MeterController — runs a LevelMeter on a background thread for non-Textual consumers."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from sound_meter.l1_entities.capture_config import CaptureConfig
from sound_meter.l1_entities.config import MeterSettings
from sound_meter.l1_entities.measurement import Measurement
from sound_meter.l1_entities.meter_event import LevelEvent, MeterEvent, StatusEvent
from sound_meter.l1_entities.recording_status import INITIALIZING, RecordingStatus
from sound_meter.l2_use_cases.level_meter_use_case import LevelMeter
from sound_meter.l2_use_cases.ports.audio_source import AudioSource
from sound_meter.l2_use_cases.utils.latest_slot import LatestSlot

log = logging.getLogger('sm.controller')


class MeterController:
    """Owns the worker thread and the cancellation flag of one capture session.

    Status events are forwarded to *on_status* in order; measurements land in
    ``level_slot`` where a consumer reads only the newest one.
    """

    def __init__(
        self,
        audio_source: AudioSource,
        capture: CaptureConfig,
        settings: MeterSettings,
        on_status: Callable[[RecordingStatus], None] | None = None,
    ) -> None:
        self._audio_source = audio_source
        self._capture = capture
        self._settings = settings
        self._on_status = on_status
        self._cancel = threading.Event()
        self._thread: threading.Thread | None = None
        self._status_lock = threading.Lock()
        self._status: RecordingStatus = INITIALIZING
        self.level_slot: LatestSlot[Measurement] = LatestSlot()

    @property
    def status(self) -> RecordingStatus:
        with self._status_lock:
            return self._status

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError('MeterController sessions cannot be restarted')
        self._thread = threading.Thread(target=self._run, name='sound-meter', daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> RecordingStatus:
        """Signal cancellation and wait for the worker to finish cleanup."""
        self._cancel.set()
        self.wait(timeout)
        return self.status

    def wait(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        meter = LevelMeter(
            self._audio_source,
            self._capture,
            self._dispatch,
            interval=self._settings.interval,
            reference=self._settings.reference,
            offset=self._settings.offset,
            log_every=self._settings.log_every,
        )
        final = meter.run(self._cancel.is_set)
        log.debug('Session ended (%s); %d readings superseded', final.label(), self.level_slot.dropped)

    def _dispatch(self, event: MeterEvent) -> None:
        if isinstance(event, LevelEvent):
            self.level_slot.put(event.measurement)
        elif isinstance(event, StatusEvent):
            with self._status_lock:
                self._status = event.status
            log.debug('Status: %s', event.status.label())
            if self._on_status is not None:
                self._on_status(event.status)
