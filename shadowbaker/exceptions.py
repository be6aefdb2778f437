"""Exception classes for the shadow baker."""


class ShadowBakerError(Exception):
    """Base exception for shadow baker errors."""

    pass


class InvalidBufferError(ShadowBakerError, ValueError):
    """Raised when pixel data does not match its declared dimensions."""

    pass


class PresetNotFoundError(ShadowBakerError, KeyError):
    """Raised when a preset name is not registered."""

    pass


class SettingsError(ShadowBakerError):
    """Raised for malformed persisted settings or preset data."""

    pass
