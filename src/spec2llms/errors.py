"""Exceptions raised by the loading, configuration and output layers.

The rendering core never raises; every failure a user can see comes from
one of the boundary components below and aborts the whole run.
"""


class Spec2LlmsError(Exception):
    """Base class for all spec2llms errors."""


class ConfigError(Spec2LlmsError):
    """Configuration file is unreadable, malformed or incomplete."""


class SpecLoadError(Spec2LlmsError):
    """The OpenAPI document could not be fetched, read or parsed."""


class SpecValidationError(SpecLoadError):
    """The OpenAPI document was read but is not a valid OpenAPI 3.x description."""


class OutputError(Spec2LlmsError):
    """Generated documents could not be written to disk."""
