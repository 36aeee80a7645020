"""MeterApp — live sound level TUI."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from textual.app import App as TextualApp
from textual.app import ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from sound_meter.l1_entities.config import AppConfig
from sound_meter.l1_entities.measurement import Measurement
from sound_meter.l1_entities.recording_status import RecordingState
from sound_meter.l2_use_cases.ports.audio_source import AudioSource
from sound_meter.l2_use_cases.utils.latest_slot import LatestSlot
from sound_meter.l4_frameworks_and_drivers.logging_setup import setup_file_logging
from sound_meter.l4_frameworks_and_drivers.messages import MeterLevel, MeterStatus
from sound_meter.l4_frameworks_and_drivers.widgets.level_panel import LevelPanel
from sound_meter.l4_frameworks_and_drivers.widgets.status_bar import StatusBar

log = logging.getLogger('sm.app')


class MeterApp(TextualApp):
    """Microphone level meter — one worker thread feeding a polled latest-wins slot."""

    CSS = """
    #header {
        dock: top;
        height: 1;
        background: $primary;
        color: $text;
        text-style: bold;
    }
    """

    BINDINGS = [
        Binding('q', 'quit_app', 'Quit', priority=True),
        Binding('s', 'stop_recording', 'Stop', priority=True),
    ]

    def __init__(
        self,
        config: AppConfig,
        audio_source: AudioSource | None = None,
        output_dir: Path | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._config = config
        self._audio_source = audio_source
        self._output_dir = output_dir

        if output_dir is not None and config.output.debug_log:
            setup_file_logging(output_dir)

        self._level_slot: LatestSlot[Measurement] = LatestSlot()
        self._meter_shutdown = threading.Event()
        self._meter_finished = False
        self._pending_quit = False
        self.alerting = False

    def compose(self) -> ComposeResult:
        yield Static('  Sound Meter', id='header')
        yield LevelPanel(id='level-panel')
        yield StatusBar(id='status-bar')

    def on_mount(self) -> None:
        panel = self.query_one('#level-panel', LevelPanel)
        panel.threshold = self._config.alert.threshold
        panel.warn_level = self._config.alert.warn_level
        self._update_hints('idle')
        self.set_interval(self._config.meter.interval, self._poll_level)
        self._start_meter_worker()

    def on_unmount(self) -> None:
        self._meter_shutdown.set()

    def _start_meter_worker(self) -> None:  # pragma: no cover -- thin thread launcher; patched out in tests
        self.run_worker(self._meter_worker_thread, thread=True, group='meter')

    def _meter_worker_thread(self):  # pragma: no cover -- thread body; tested independently
        from sound_meter.l4_frameworks_and_drivers.workers.meter_worker import (  # noqa: PLC0415 -- deferred: audio stack loaded only when the session starts
            run_meter_worker,
        )

        return run_meter_worker(
            post_message=self.post_message,
            is_cancelled=self._meter_shutdown.is_set,
            config=self._config,
            audio_source=self._audio_source,
            level_slot=self._level_slot,
        )

    def _hints_for_state(self, state: str) -> str:
        if state == 'recording':
            return r'\[s] stop  \[q] quit'
        return r'\[q] quit'

    def _update_hints(self, state: str) -> None:
        try:
            self.query_one('#status-bar', StatusBar).keybinding_hints = self._hints_for_state(state)
        except Exception:  # noqa: S110 -- TUI race guard; widget may not exist during startup  # pragma: no cover
            pass

    def _poll_level(self) -> None:
        measurement = self._level_slot.take()
        if measurement is not None:
            self._apply_measurement(measurement)

    def _apply_measurement(self, measurement: Measurement) -> None:
        threshold = self._config.alert.threshold
        self.query_one('#level-panel', LevelPanel).decibel = measurement.decibel
        self.query_one('#status-bar', StatusBar).measurement_count = measurement.sequence

        alerting = measurement.exceeds(threshold)
        if alerting and not self.alerting:
            log.info('Level %.1f dB exceeds threshold %.1f dB', measurement.decibel, threshold)
        self.alerting = alerting

    # --- Message Handlers ---

    def on_meter_level(self, message: MeterLevel) -> None:
        self._apply_measurement(message.measurement)

    def on_meter_status(self, message: MeterStatus) -> None:
        status = message.status
        log.debug('Status: %s', status.label())
        self.query_one('#status-bar', StatusBar).status = status

        if status.state == RecordingState.RECORDING:
            self._update_hints('recording')
        elif status.is_terminal:
            self._meter_finished = True
            self._update_hints('stopped')
            if status.state == RecordingState.ERROR:
                self.notify(
                    f'Audio error: {status.reason}\n(see sm_debug.log)',
                    severity='error',
                    timeout=12,
                )
            if self._pending_quit:
                self.exit()

    # --- Actions ---

    def action_stop_recording(self) -> None:
        if self._meter_finished or self._meter_shutdown.is_set():
            return
        self._meter_shutdown.set()
        self.notify('Stopping recording…', timeout=2)

    def action_quit_app(self) -> None:
        if self._meter_finished:
            self.exit()
            return
        # Worker still owns the device; exit once it reports Stopped.
        self._meter_shutdown.set()
        self._pending_quit = True
