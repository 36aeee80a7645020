"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from sound_meter.l1_entities.config import AppConfig
from sound_meter.l2_use_cases.ports.audio_source import AudioSource
from sound_meter.l3_interface_adapters.gateways.tone_audio_source import ToneAudioSource
from sound_meter.l4_frameworks_and_drivers.infra_config import InfraConfig


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        infra: InfraConfig | None = None,
        simulate: bool = False,
    ) -> None:
        self.config = config

        _infra = infra or InfraConfig()
        self.audio_source: AudioSource = self._build_audio_source(_infra, simulate)

    @staticmethod
    def _build_audio_source(infra: InfraConfig, simulate: bool) -> AudioSource:
        if simulate:
            return ToneAudioSource()

        from sound_meter.l3_interface_adapters.gateways.sounddevice_audio_source import (  # noqa: PLC0415 -- deferred: PortAudio loaded only for real capture
            SounddeviceAudioSource,
        )

        return SounddeviceAudioSource(device=infra.input_device)
