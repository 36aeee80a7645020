"""Tests for the Textual meter app using headless Pilot."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from sound_meter.l1_entities.measurement import Measurement
from sound_meter.l1_entities.recording_status import RECORDING, STOPPED, RecordingStatus
from sound_meter.l4_frameworks_and_drivers.apps.meter_app import MeterApp
from sound_meter.l4_frameworks_and_drivers.infra_config import build_app_config
from sound_meter.l4_frameworks_and_drivers.messages import MeterLevel, MeterStatus
from sound_meter.l4_frameworks_and_drivers.widgets.level_panel import ALERT_TEXT, LevelPanel
from sound_meter.l4_frameworks_and_drivers.widgets.status_bar import StatusBar
from tests.conftest import FakeAudioSource


def make_app(threshold: float = 70.0) -> MeterApp:
    config = build_app_config({'alert': {'threshold': threshold}})
    return MeterApp(config=config, audio_source=FakeAudioSource())


def _measurement(decibel: float, sequence: int = 1) -> Measurement:
    return Measurement(rms=100.0, decibel=decibel, sequence=sequence, timestamp=0.0)


class TestAppComposition:
    @pytest.mark.asyncio
    async def test_app_has_required_widgets(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test():
                assert app.query_one('#level-panel', LevelPanel)
                assert app.query_one('#status-bar', StatusBar)

    @pytest.mark.asyncio
    async def test_threshold_pushed_to_panel(self):
        app = make_app(threshold=65.0)
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test():
                panel = app.query_one('#level-panel', LevelPanel)
                assert panel.threshold == 65.0
                assert 'Threshold: 65.0 dB' in panel.render()

    @pytest.mark.asyncio
    async def test_worker_started_on_mount(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker') as mock_start:
            async with app.run_test():
                mock_start.assert_called_once()


class TestLevelHandling:
    @pytest.mark.asyncio
    async def test_level_message_updates_panel(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test() as pilot:
                app.post_message(MeterLevel(_measurement(42.0, sequence=7)))
                await pilot.pause()
                assert app.query_one('#level-panel', LevelPanel).decibel == 42.0
                assert app.query_one('#status-bar', StatusBar).measurement_count == 7
                assert app.alerting is False

    @pytest.mark.asyncio
    async def test_level_above_threshold_raises_alert(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test() as pilot:
                app.post_message(MeterLevel(_measurement(75.0)))
                await pilot.pause()
                panel = app.query_one('#level-panel', LevelPanel)
                assert app.alerting is True
                assert panel.alert
                assert ALERT_TEXT in panel.render()

    @pytest.mark.asyncio
    async def test_alert_clears_when_level_drops(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test() as pilot:
                app.post_message(MeterLevel(_measurement(75.0, 1)))
                app.post_message(MeterLevel(_measurement(30.0, 2)))
                await pilot.pause()
                assert app.alerting is False
                assert ALERT_TEXT not in app.query_one('#level-panel', LevelPanel).render()

    @pytest.mark.asyncio
    async def test_poll_takes_latest_from_slot(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test():
                app._level_slot.put(_measurement(20.0, 1))
                app._level_slot.put(_measurement(55.0, 2))
                app._poll_level()
                assert app.query_one('#level-panel', LevelPanel).decibel == 55.0
                assert app._level_slot.peek() is None


class TestStatusHandling:
    @pytest.mark.asyncio
    async def test_recording_status_updates_bar(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test() as pilot:
                app.post_message(MeterStatus(RECORDING))
                await pilot.pause()
                bar = app.query_one('#status-bar', StatusBar)
                assert bar.status == RECORDING
                assert bar.recording
                assert 'stop' in bar.keybinding_hints
                assert 'Recording' in bar.render()

    @pytest.mark.asyncio
    async def test_error_status_marks_session_finished(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test() as pilot:
                app.post_message(MeterStatus(RecordingStatus.error('Permission denied')))
                await pilot.pause()
                bar = app.query_one('#status-bar', StatusBar)
                assert 'Error: Permission denied' in bar.render()
                assert app._meter_finished


class TestActions:
    @pytest.mark.asyncio
    async def test_stop_signals_worker(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test() as pilot:
                await pilot.press('s')
                assert app._meter_shutdown.is_set()

    @pytest.mark.asyncio
    async def test_quit_while_recording_waits_for_stopped(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test() as pilot:
                with patch.object(app, 'exit') as mock_exit:
                    await pilot.press('q')
                    assert app._meter_shutdown.is_set()
                    mock_exit.assert_not_called()

                    app.post_message(MeterStatus(STOPPED))
                    await pilot.pause()
                    mock_exit.assert_called_once()

    @pytest.mark.asyncio
    async def test_quit_after_stopped_exits_immediately(self):
        app = make_app()
        with patch.object(app, '_start_meter_worker'):
            async with app.run_test() as pilot:
                app.post_message(MeterStatus(STOPPED))
                await pilot.pause()
                with patch.object(app, 'exit') as mock_exit:
                    await pilot.press('q')
                    mock_exit.assert_called_once()
