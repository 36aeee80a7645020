"""L1 entity: capture session lifecycle."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class RecordingState(enum.Enum):
    INITIALIZING = 'initializing'
    STREAM_READY = 'stream_ready'
    RECORDING = 'recording'
    STOPPED = 'stopped'
    ERROR = 'error'


@dataclass(frozen=True)
class RecordingStatus:
    state: RecordingState
    reason: str = ''

    @classmethod
    def error(cls, reason: str) -> RecordingStatus:
        return cls(RecordingState.ERROR, reason)

    @property
    def is_terminal(self) -> bool:
        return self.state in (RecordingState.STOPPED, RecordingState.ERROR)

    def label(self) -> str:
        """Human-readable label, e.g. ``Recording`` or ``Error: Permission denied``."""
        if self.state == RecordingState.ERROR:
            return f'Error: {self.reason}' if self.reason else 'Error'
        return self.state.value.replace('_', ' ').capitalize()


INITIALIZING = RecordingStatus(RecordingState.INITIALIZING)
STREAM_READY = RecordingStatus(RecordingState.STREAM_READY)
RECORDING = RecordingStatus(RecordingState.RECORDING)
STOPPED = RecordingStatus(RecordingState.STOPPED)
