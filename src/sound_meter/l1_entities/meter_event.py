"""L1 entity: tagged events published by the level meter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from sound_meter.l1_entities.measurement import Measurement
from sound_meter.l1_entities.recording_status import RecordingStatus


@dataclass(frozen=True)
class StatusEvent:
    status: RecordingStatus


@dataclass(frozen=True)
class LevelEvent:
    measurement: Measurement


MeterEvent = Union[StatusEvent, LevelEvent]
