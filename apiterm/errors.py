"""Exception hierarchy for apiterm."""

from __future__ import annotations


class ApitermError(Exception):
    """Base class for all apiterm errors."""


class ConfigError(ApitermError):
    """Configuration file exists but does not validate."""


class CollaboratorImportError(ApitermError):
    """A ``module:attr`` collaborator path could not be resolved."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot import {path!r}: {reason}")


class SpecLoadError(ApitermError):
    """The API description could not be acquired (missing file, network failure)."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message)


class SpecParseError(ApitermError):
    """The API description was acquired but is not a valid document."""

    def __init__(self, message: str, validation_errors: list[str] | None = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.validation_errors:
            return base
        return base + "\n" + "\n".join(f"  - {err}" for err in self.validation_errors)


class HttpRequestError(ApitermError):
    """Sending a request failed before a response was received."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)
