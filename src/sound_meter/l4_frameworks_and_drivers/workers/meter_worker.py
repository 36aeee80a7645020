"""Thin thread worker shell for level metering — connects AudioSource to LevelMeter."""

from __future__ import annotations

import logging

from sound_meter.l1_entities.config import AppConfig
from sound_meter.l1_entities.measurement import Measurement
from sound_meter.l1_entities.meter_event import LevelEvent, MeterEvent, StatusEvent
from sound_meter.l1_entities.recording_status import RecordingStatus
from sound_meter.l2_use_cases.level_meter_use_case import LevelMeter
from sound_meter.l2_use_cases.ports.audio_source import AudioSource
from sound_meter.l2_use_cases.utils.latest_slot import LatestSlot
from sound_meter.l4_frameworks_and_drivers.infra_config import build_capture_config
from sound_meter.l4_frameworks_and_drivers.messages import MeterLevel, MeterStatus

log = logging.getLogger('sm.audio')


def run_meter_worker(
    post_message,
    is_cancelled,
    config: AppConfig,
    audio_source: AudioSource | None = None,
    level_slot: LatestSlot[Measurement] | None = None,
) -> RecordingStatus:
    """Acquisition loop wrapper.

    Designed to run inside a Textual @work(thread=True) worker. Status changes
    are always posted as MeterStatus messages; measurements are posted as
    MeterLevel messages, or parked in *level_slot* when the caller polls.
    """
    if audio_source is None:  # pragma: no cover -- default wiring; audio_source always injected in tests
        from sound_meter.l3_interface_adapters.gateways.sounddevice_audio_source import (  # noqa: PLC0415 -- deferred: sounddevice loaded only when worker starts
            SounddeviceAudioSource,
        )

        audio_source = SounddeviceAudioSource()

    capture = build_capture_config(config, audio_source)
    log.debug('Capture config: %s', capture)

    def _forward(event: MeterEvent) -> None:
        if isinstance(event, StatusEvent):
            post_message(MeterStatus(status=event.status))
        elif isinstance(event, LevelEvent):
            if level_slot is not None:
                level_slot.put(event.measurement)
            else:
                post_message(MeterLevel(measurement=event.measurement))

    mc = config.meter
    meter = LevelMeter(
        audio_source,
        capture,
        _forward,
        interval=mc.interval,
        reference=mc.reference,
        offset=mc.offset,
        log_every=mc.log_every,
    )
    final = meter.run(is_cancelled)
    if level_slot is not None:
        log.debug('Session ended (%s); %d readings superseded before display', final.label(), level_slot.dropped)
    return final
