"""Domain error types."""


class AudioSourceError(Exception):
    """Base class for failures raised by an audio capture source."""


class OpenError(AudioSourceError):
    """Raised when the capture stream cannot be opened."""


class UnsupportedConfigError(OpenError):
    """Raised when the device rejects the requested rate/format/channel count."""


class PermissionDeniedError(OpenError):
    """Raised when microphone access has not been granted by the environment."""


class StartError(AudioSourceError):
    """Raised when an opened stream cannot begin capturing."""


class DeviceBusyError(StartError):
    """Raised when another consumer already holds the capture device."""


class NotInitializedError(StartError):
    """Raised when start() is called before a successful open()."""


class ReadError(AudioSourceError):
    """Raised when reading a chunk from an active stream fails."""


class TransientReadError(ReadError):
    """Momentary underrun -- the caller should retry, not abort."""


class FatalReadError(ReadError):
    """The device handle became invalid mid-stream."""
