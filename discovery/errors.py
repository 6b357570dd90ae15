from __future__ import annotations


class DiscoveryError(Exception):
    """Base class for everything raised by the auto-discovery pipeline."""


class ConfigurationError(DiscoveryError, RuntimeError):
    """Unsupported platform or a required environment variable is missing."""


class NotFoundError(DiscoveryError, FileNotFoundError):
    """A binary, directory or model could not be located."""


class ValidationError(DiscoveryError, ValueError):
    """Bad input: malformed file name, file where a directory was expected, etc."""


class FormatError(DiscoveryError, ValueError):
    """A GGUF file could not be parsed or lacks a mandatory key."""


class AggregateError(DiscoveryError):
    """Every file in a batch failed; the individual errors are kept in `errors`."""

    def __init__(self, message: str, errors: list[Exception] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


def wrap_error(err: Exception, prefix: str) -> Exception:
    """
    Build an error of the same class as `err` with `prefix` in front of its message.

    Callers are expected to `raise wrap_error(err, "...") from err` so the
    original stays on the chain.
    """
    message = f"{prefix}: {err}"
    if isinstance(err, AggregateError):
        return AggregateError(message, err.errors)
    if isinstance(err, DiscoveryError):
        return type(err)(message)
    # OS level errors from the filesystem keep their meaning as lookups
    if isinstance(err, FileNotFoundError):
        return NotFoundError(message)
    if isinstance(err, ValueError):
        return ValidationError(message)
    return DiscoveryError(message)
