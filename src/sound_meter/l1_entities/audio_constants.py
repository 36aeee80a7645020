"""Shared audio format constants."""

SAMPLE_RATE = 44100
CHANNELS = 1
BIT_DEPTH = 16

SAMPLE_MIN = -32768
SAMPLE_MAX = 32767
