"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest

from sound_meter.l1_entities.capture_config import CaptureConfig
from sound_meter.l1_entities.config import AppConfig
from sound_meter.l4_frameworks_and_drivers.infra_config import build_app_config

# --- Protocol-conforming Fakes ---


class FakeAudioSource:
    """Fake audio source — implements AudioSource protocol from a scripted list of reads.

    Each script entry is an int16 array (copied into the caller's buffer), an int
    (returned as the sample count as-is), or an exception instance (raised).
    Once the script is exhausted every read returns *default*.
    """

    def __init__(
        self,
        reads: list | None = None,
        default: np.ndarray | int = 0,
        min_chunk: int = 512,
        open_error: Exception | None = None,
        start_error: Exception | None = None,
        stop_error: Exception | None = None,
    ) -> None:
        self._reads = list(reads or [])
        self._default = default
        self._min_chunk = min_chunk
        self._open_error = open_error
        self._start_error = start_error
        self._stop_error = stop_error
        self._idx = 0
        self.open_calls: list[CaptureConfig] = []
        self.start_calls = 0
        self.read_calls = 0
        self.stop_calls = 0
        self.release_calls = 0

    @property
    def exhausted(self) -> bool:
        return self._idx >= len(self._reads)

    def min_chunk_size(self, sample_rate: int) -> int:
        return self._min_chunk

    def open(self, config: CaptureConfig) -> None:
        self.open_calls.append(config)
        if self._open_error is not None:
            raise self._open_error

    def start(self) -> None:
        self.start_calls += 1
        if self._start_error is not None:
            raise self._start_error

    def read_chunk(self, out: np.ndarray) -> int:
        self.read_calls += 1
        if self.exhausted:
            item = self._default
        else:
            item = self._reads[self._idx]
            self._idx += 1
        if isinstance(item, Exception):
            raise item
        if isinstance(item, np.ndarray):
            n = min(len(item), len(out))
            out[:n] = item[:n]
            return n
        return item

    def stop(self) -> None:
        self.stop_calls += 1
        if self._stop_error is not None:
            raise self._stop_error

    def release(self) -> None:
        self.release_calls += 1


def constant_chunk(value: int, n: int = 512) -> np.ndarray:
    return np.full(n, value, dtype=np.int16)


# --- Standard Fixtures ---


@pytest.fixture(autouse=True)
def _detach_file_logging():
    """Drop FileHandlers attached to the 'sm' logger by setup_file_logging."""
    yield
    root = logging.getLogger('sm')
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def default_config() -> AppConfig:
    return build_app_config({})


@pytest.fixture
def fast_config(tmp_path: Path) -> AppConfig:
    return build_app_config(
        {
            'meter': {'interval': 0.005},
            'output': {'directory': str(tmp_path / 'logs')},
        }
    )


@pytest.fixture
def capture_config() -> CaptureConfig:
    return CaptureConfig(sample_rate=44100, chunk_size=512)


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    content = """\
capture:
  sample_rate: 48000
  chunk_size: 2048
meter:
  interval: 0.25
  offset: 94.0
alert:
  threshold: 65.0
output:
  directory: "./test_logs"
  debug_log: false
"""
    p = tmp_path / 'config.yaml'
    p.write_text(content, encoding='utf-8')
    return p
