"""Smoke test: verify SounddeviceAudioSource against a real input device.

Run on a machine with a microphone (or a PulseAudio null-sink monitor inside
Docker). Silence is fine; we only verify the open/start/read/stop/release
cycle returns int16 samples and a decibel value inside the display range.
"""

from __future__ import annotations

import numpy as np

from sound_meter.l1_entities.capture_config import CaptureConfig
from sound_meter.l2_use_cases.utils.level_math import clamp, compute_rms, rms_to_decibel
from sound_meter.l3_interface_adapters.gateways.sounddevice_audio_source import SounddeviceAudioSource


def main() -> None:
    print('--- SounddeviceAudioSource smoke test ---')

    src = SounddeviceAudioSource()
    chunk = src.min_chunk_size(44100)
    config = CaptureConfig(sample_rate=44100, chunk_size=chunk)

    print(f'[1/4] Opening input stream (44.1kHz, mono, int16, chunk={chunk})...')
    src.open(config)
    print('       OK — device accepted the configuration')

    print('[2/4] Starting capture...')
    src.start()
    print('       OK — stream active')

    print('[3/4] Reading one chunk...')
    buf = np.zeros(chunk, dtype=np.int16)
    n = src.read_chunk(buf)
    assert n > 0, f'FAIL: read_chunk() returned {n}'
    db = clamp(rms_to_decibel(compute_rms(buf, n)))
    assert 0.0 <= db <= 100.0, f'FAIL: decibel {db} outside display range'
    print(f'       OK — got {n} samples, level {db:.1f} dB')

    print('[4/4] Stopping and releasing...')
    src.stop()
    src.release()
    src.release()
    print('       OK — clean shutdown')

    print('\nSUCCESS: SounddeviceAudioSource works on this host')


if __name__ == '__main__':
    main()
