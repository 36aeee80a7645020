"""Status bar — bottom bar showing recording state, elapsed time, and keybinding hints."""

from __future__ import annotations

import time

from rich.cells import cell_len
from textual.reactive import reactive
from textual.widgets import Static

from sound_meter.l1_entities.recording_status import INITIALIZING, RecordingState, RecordingStatus

_ICONS = {
    RecordingState.INITIALIZING: '⟳',
    RecordingState.STREAM_READY: '○',
    RecordingState.RECORDING: '●',
    RecordingState.STOPPED: '■',
    RecordingState.ERROR: '✗',
}


class StatusBar(Static):
    """Bottom status bar with recording state, elapsed time, and keybinding hints."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: auto;
        background: $surface;
        color: $text;
        padding: 0 1;
        overflow: hidden hidden;
    }
    """

    status: reactive[RecordingStatus] = reactive(INITIALIZING)
    measurement_count: reactive[int] = reactive(0)
    keybinding_hints: reactive[str] = reactive('')

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._start_time: float | None = None
        self._frozen_elapsed: float | None = None

    @property
    def recording(self) -> bool:
        return self.status.state == RecordingState.RECORDING

    def watch_status(self, value: RecordingStatus) -> None:
        """Start the elapsed timer on Recording; freeze it on a terminal status."""
        now = time.monotonic()
        if value.state == RecordingState.RECORDING and self._start_time is None:
            self._start_time = now
        elif value.is_terminal and self._frozen_elapsed is None:
            self._frozen_elapsed = 0.0 if self._start_time is None else now - self._start_time

    def _format_elapsed(self, now: float) -> str:
        if self._frozen_elapsed is not None:
            elapsed = self._frozen_elapsed
        elif self._start_time is not None:
            elapsed = now - self._start_time
        else:
            return '00:00:00'
        hours = int(elapsed // 3600)
        minutes = int((elapsed % 3600) // 60)
        secs = int(elapsed % 60)
        return f'{hours:02d}:{minutes:02d}:{secs:02d}'

    def render(self) -> str:
        icon = _ICONS[self.status.state]
        label = self.status.label().replace('[', r'\[')
        status_text = f'[green]{icon} {label}[/]' if self.recording else f'{icon} {label}'

        left_parts = [status_text, self._format_elapsed(time.monotonic())]
        if self.measurement_count:
            left_parts.append(f'#{self.measurement_count}')
        left = ' │ '.join(left_parts)

        hints = self.keybinding_hints
        if hints:
            content_width = (self.size.width or 80) - 2
            plain_left = ' │ '.join([f'{icon} {self.status.label()}', *left_parts[1:]])
            gap = content_width - cell_len(plain_left) - cell_len(hints.replace(r'\[', '['))
            if gap >= 2:
                left = left + ' ' * gap + hints
        return left
