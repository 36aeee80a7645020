"""sound-meter -- microphone loudness meter with threshold alerts."""

__version__ = '0.1.0'
