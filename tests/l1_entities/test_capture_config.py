"""Tests for CaptureConfig — immutable capture parameters."""

import pytest
from pydantic import ValidationError

from sound_meter.l1_entities.capture_config import CaptureConfig


class TestCaptureConfig:
    def test_defaults(self):
        cfg = CaptureConfig(chunk_size=1024)
        assert cfg.sample_rate == 44100
        assert cfg.channels == 1
        assert cfg.bit_depth == 16

    def test_chunk_duration(self):
        cfg = CaptureConfig(sample_rate=16000, chunk_size=1600)
        assert cfg.chunk_duration == pytest.approx(0.1)

    @pytest.mark.parametrize('chunk_size', [0, -1])
    def test_non_positive_chunk_size_raises(self, chunk_size):
        with pytest.raises(ValidationError):
            CaptureConfig(chunk_size=chunk_size)

    def test_non_positive_sample_rate_raises(self):
        with pytest.raises(ValidationError):
            CaptureConfig(sample_rate=0, chunk_size=512)

    def test_stereo_rejected(self):
        with pytest.raises(ValidationError):
            CaptureConfig(chunk_size=512, channels=2)  # type: ignore[arg-type]

    def test_other_bit_depth_rejected(self):
        with pytest.raises(ValidationError):
            CaptureConfig(chunk_size=512, bit_depth=24)  # type: ignore[arg-type]

    def test_frozen(self):
        cfg = CaptureConfig(chunk_size=512)
        with pytest.raises(ValidationError):
            cfg.chunk_size = 1024  # type: ignore[misc]
