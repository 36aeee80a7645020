"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CaptureSettings(BaseModel):
    sample_rate: int = Field(gt=0)
    chunk_size: int | None = Field(default=None, gt=0)  # None = device-reported minimum


class MeterSettings(BaseModel):
    # Display range is fixed at 0..100 dB; unknown keys are rejected.
    model_config = ConfigDict(extra='forbid')

    interval: float = Field(gt=0)
    reference: float = Field(gt=0)
    offset: float
    log_every: int = Field(default=10, gt=0)


class AlertSettings(BaseModel):
    threshold: float
    warn_level: float


class OutputConfig(BaseModel):
    directory: str
    debug_log: bool


class AppConfig(BaseModel):
    capture: CaptureSettings
    meter: MeterSettings
    alert: AlertSettings
    output: OutputConfig
