"""Level panel — large dB readout, coloured level bar, threshold line and alert banner."""

from __future__ import annotations

from textual.reactive import reactive
from textual.widgets import Static

_BAR_FULL = '█'
_BAR_EMPTY = '░'

ZONE_OK = 'ok'
ZONE_WARN = 'warn'
ZONE_ALERT = 'alert'

_ZONE_COLORS = {
    ZONE_OK: 'green',
    ZONE_WARN: '#ffa500',
    ZONE_ALERT: 'red',
}

ALERT_TEXT = 'ALERT: Noise level exceeds threshold!'


def level_zone(decibel: float, warn_level: float, threshold: float) -> str:
    if decibel > threshold:
        return ZONE_ALERT
    if decibel > warn_level:
        return ZONE_WARN
    return ZONE_OK


def render_bar(decibel: float, width: int, ceiling: float = 100.0) -> str:
    """Fixed-width bar; the filled share is decibel/ceiling, clamped to [0, 1]."""
    width = max(width, 1)
    fraction = min(max(decibel / ceiling, 0.0), 1.0)
    filled = round(fraction * width)
    return _BAR_FULL * filled + _BAR_EMPTY * (width - filled)


class LevelPanel(Static):
    """Central meter display. Colours follow the warn level and the alert threshold."""

    DEFAULT_CSS = """
    LevelPanel {
        height: auto;
        padding: 1 2;
        content-align: center middle;
        text-align: center;
    }
    """

    decibel: reactive[float] = reactive(0.0)
    threshold: reactive[float] = reactive(70.0)
    warn_level: reactive[float] = reactive(50.0)

    @property
    def alert(self) -> bool:
        return self.decibel > self.threshold

    def render(self) -> str:
        color = _ZONE_COLORS[level_zone(self.decibel, self.warn_level, self.threshold)]
        readout_color = 'red' if self.alert else 'bold'
        bar_width = max((self.size.width or 60) - 4, 10)

        lines = [
            f'[{readout_color}]{int(self.decibel)} dB[/]',
            '',
            'Sound Level',
            f'[{color}]{render_bar(self.decibel, bar_width)}[/]',
            '',
            f'[dim]Threshold: {self.threshold:.1f} dB[/]',
        ]
        if self.alert:
            lines.extend(['', f'[bold red]⚠ {ALERT_TEXT}[/]'])
        return '\n'.join(lines)
