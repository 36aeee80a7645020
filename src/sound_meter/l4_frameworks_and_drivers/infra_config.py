"""Application defaults and infrastructure settings — lives in L4, not domain."""

from __future__ import annotations

import copy

from pydantic import BaseModel

from sound_meter.l1_entities.capture_config import CaptureConfig
from sound_meter.l1_entities.config import AppConfig
from sound_meter.l2_use_cases.ports.audio_source import AudioSource
from sound_meter.l3_interface_adapters.gateways.paths import LOG_DIR
from sound_meter.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'capture': {
        'sample_rate': 44100,
        'chunk_size': None,
    },
    'meter': {
        'interval': 0.1,
        'reference': 32767.0,
        'offset': 90.0,
        'log_every': 10,
    },
    'alert': {
        'threshold': 70.0,
        'warn_level': 50.0,
    },
    'output': {
        'directory': str(LOG_DIR),
        'debug_log': True,
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)


def build_capture_config(config: AppConfig, audio_source: AudioSource) -> CaptureConfig:
    """Fix the chunk size once: the configured override, else the device minimum."""
    rate = config.capture.sample_rate
    chunk_size = config.capture.chunk_size or audio_source.min_chunk_size(rate)
    return CaptureConfig(sample_rate=rate, chunk_size=chunk_size)


class InfraConfig(BaseModel):
    """Device selection settings outside the domain layer."""

    input_device: int | str | None = None  # None = system default input
