"""Plain runner — headless metering that prints one line per measurement."""

from __future__ import annotations

import sys

from sound_meter.l1_entities.config import AppConfig
from sound_meter.l1_entities.measurement import Measurement
from sound_meter.l1_entities.recording_status import RecordingState, RecordingStatus
from sound_meter.l2_use_cases.ports.audio_source import AudioSource
from sound_meter.l3_interface_adapters.controllers.meter_controller import MeterController
from sound_meter.l4_frameworks_and_drivers.infra_config import build_capture_config


def _err(msg: str) -> None:
    print(msg, file=sys.stderr, flush=True)


def format_reading(measurement: Measurement, threshold: float) -> str:
    line = f'#{measurement.sequence:<6} {measurement.decibel:5.1f} dB  rms={measurement.rms:8.1f}'
    if measurement.exceeds(threshold):
        line += '  ALERT'
    return line


def run_plain(
    config: AppConfig,
    audio_source: AudioSource,
    count: int | None = None,
) -> RecordingStatus:
    """Meter until Ctrl-C, a fatal error, or *count* measurements. Blocks until done."""
    capture = build_capture_config(config, audio_source)
    _err(f'Capture: {capture.sample_rate} Hz, {capture.chunk_size} samples/chunk')

    controller = MeterController(
        audio_source,
        capture,
        config.meter,
        on_status=lambda status: _err(f'Status: {status.label()}'),
    )
    threshold = config.alert.threshold
    printed = 0

    controller.start()
    try:
        while controller.is_running:
            controller.wait(config.meter.interval)
            measurement = controller.level_slot.take()
            if measurement is None:
                continue
            print(format_reading(measurement, threshold), flush=True)
            printed += 1
            if count is not None and printed >= count:
                break
    except KeyboardInterrupt:
        _err('Interrupted, stopping…')
    finally:
        status = controller.stop()

    if status.state == RecordingState.ERROR:
        _err(f'Error: {status.reason}')
    return status
