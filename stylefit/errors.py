"""Error types raised by the try-on app."""


class TryOnError(Exception):
    """Base class for all try-on errors."""


class ValidationError(TryOnError):
    """Missing or unusable user input, caught before any network call."""


class TransportError(TryOnError):
    """The call to the generative model failed."""


class EmptyResultError(TryOnError):
    """The model answered but returned neither an image nor text."""


class ConfigurationError(TryOnError):
    """Required startup configuration is missing."""
