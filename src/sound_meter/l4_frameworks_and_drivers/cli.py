"""CLI entry point for sound-meter."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from sound_meter import __version__


def _build_overrides(threshold, sample_rate, interval, chunk_size, log_dir) -> dict:
    overrides: dict = {}
    if threshold is not None:
        overrides.setdefault('alert', {})['threshold'] = threshold
    if sample_rate is not None:
        overrides.setdefault('capture', {})['sample_rate'] = sample_rate
    if chunk_size is not None:
        overrides.setdefault('capture', {})['chunk_size'] = chunk_size
    if interval is not None:
        overrides.setdefault('meter', {})['interval'] = interval
    if log_dir is not None:
        overrides.setdefault('output', {})['directory'] = log_dir
    return overrides


@click.command()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True),
    help='Path to YAML config file.',
)
@click.option('-t', '--threshold', type=float, default=None, help='Alert threshold in dB (default 70).')
@click.option('-r', '--sample-rate', type=int, default=None, help='Capture sample rate in Hz (default 44100).')
@click.option('--interval', type=float, default=None, help='Seconds between measurements (default 0.1).')
@click.option('--chunk-size', type=int, default=None, help='Samples per chunk (default: device minimum).')
@click.option('-d', '--device', default=None, help='Input device index or name substring.')
@click.option('--plain', is_flag=True, help='Print readings to stdout instead of starting the TUI.')
@click.option('-n', '--count', type=int, default=None, help='With --plain: stop after N readings.')
@click.option('--simulate', is_flag=True, help='Use a synthetic 440 Hz tone instead of the microphone.')
@click.option(
    '--log-dir',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory for sm_debug.log.',
)
@click.version_option(version=__version__)
def cli(config_path, threshold, sample_rate, interval, chunk_size, device, plain, count, simulate, log_dir):
    """sound-meter -- live microphone loudness meter with a noise alert threshold."""
    if count is not None and not plain:
        raise click.UsageError('-n/--count requires --plain.')

    from sound_meter.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )
    from sound_meter.l4_frameworks_and_drivers.infra_config import (  # noqa: PLC0415 -- deferred: not needed for --help
        InfraConfig,
        build_app_config,
    )

    config_loader = YamlConfigLoader()

    try:
        overrides = _build_overrides(threshold, sample_rate, interval, chunk_size, log_dir)
        if device is not None:
            overrides['input_device'] = int(device) if device.isdigit() else device
        raw = config_loader.load_raw(config_path, overrides=overrides if overrides else None)
        config = build_app_config(raw)
        infra = InfraConfig.model_validate(raw)
    except (FileNotFoundError, ValueError) as e:  # pydantic.ValidationError is a ValueError
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)

    if not simulate:
        _preflight_microphone()

    from sound_meter.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: sounddevice not loaded for --help
        DependencyContainer,
    )

    container = DependencyContainer(config, infra=infra, simulate=simulate)
    log_path = Path(config.output.directory)

    if plain:
        from sound_meter.l1_entities.recording_status import RecordingState  # noqa: PLC0415 -- deferred: plain mode only
        from sound_meter.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: plain mode only
            setup_file_logging,
        )
        from sound_meter.l4_frameworks_and_drivers.plain_runner import run_plain  # noqa: PLC0415 -- deferred: plain mode only

        if config.output.debug_log:
            setup_file_logging(log_path)
        status = run_plain(config, container.audio_source, count=count)
        if status.state == RecordingState.ERROR:
            sys.exit(1)
        return

    from sound_meter.l4_frameworks_and_drivers.apps.meter_app import (  # noqa: PLC0415 -- deferred: Textual TUI not loaded for --help or --plain
        MeterApp,
    )

    app = MeterApp(config=config, audio_source=container.audio_source, output_dir=log_path)
    app.run()


def _preflight_microphone() -> None:
    try:
        import sounddevice as sd  # noqa: PLC0415 -- deferred: not loaded on --help

        devices = sd.query_devices()
        input_devices = [d for d in devices if d['max_input_channels'] > 0]
        if not input_devices:
            click.echo('Warning: No input audio devices found.', err=True)
    except Exception as e:
        click.echo(f'Warning: Cannot query audio devices ({e}).', err=True)
