"""Textual Message subclasses — contracts between the meter worker and the App."""

from __future__ import annotations

from textual.message import Message

from sound_meter.l1_entities.measurement import Measurement
from sound_meter.l1_entities.recording_status import RecordingStatus


class MeterStatus(Message):
    """Posted by the meter worker on every lifecycle transition."""

    def __init__(self, status: RecordingStatus) -> None:
        super().__init__()
        self.status = status


class MeterLevel(Message):
    """Posted by the meter worker with a new measurement (~10 Hz while recording)."""

    def __init__(self, measurement: Measurement) -> None:
        super().__init__()
        self.measurement = measurement
