"""
Domain-level exceptions.

These exceptions represent business logic errors that can occur
within the domain layer. They are raised where they are detected and
mapped to protocol responses only by the presentation layer.
"""

from typing import Any, Iterable, Mapping, Optional


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


# Flugzeug exceptions

class FlugzeugException(DomainException):
    """Base exception for Flugzeug-related errors."""
    pass


class FlugzeugNotFoundError(FlugzeugException):
    """Raised when no Flugzeug matches an ID or search criteria."""

    def __init__(
        self,
        flugzeug_id: Any = None,
        suchkriterien: Optional[Mapping[str, Any]] = None,
        message: Optional[str] = None,
        code: str = "FLUGZEUG_NOT_FOUND",
    ):
        if message is None:
            if suchkriterien is not None:
                message = f"Keine Flugzeuge gefunden: {dict(suchkriterien)}"
            else:
                message = f"Es gibt kein Flugzeug mit der ID {flugzeug_id}."
        super().__init__(message, code=code)
        self.flugzeug_id = flugzeug_id
        self.suchkriterien = dict(suchkriterien) if suchkriterien is not None else None


class InvalidSearchCriteriaError(FlugzeugNotFoundError):
    """Raised when search criteria contain unknown fields or bad values.

    Treated as a not-found condition: an invalid search matches nothing.
    """

    def __init__(
        self,
        keys: Iterable[str],
        suchkriterien: Optional[Mapping[str, Any]] = None,
        reason: str = "",
    ):
        self.keys = sorted(keys)
        message = f"Ungueltige Suchkriterien: {', '.join(self.keys)}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            suchkriterien=suchkriterien or {},
            message=message,
            code="INVALID_SEARCH_CRITERIA",
        )


# Optimistic concurrency exceptions

class VersionException(DomainException):
    """Base exception for version token errors."""
    pass


class VersionInvalidError(VersionException):
    """Raised when a version token does not have the form "<digits>"."""

    def __init__(self, version: Any):
        super().__init__(
            f"Die Versionsnummer {version} ist ungueltig.",
            code="VERSION_INVALID",
        )
        self.version = version


class VersionOutdatedError(VersionException):
    """Raised when a version token is older than the stored version."""

    def __init__(self, version: Any):
        super().__init__(
            f"Die Versionsnummer {version} ist nicht aktuell.",
            code="VERSION_OUTDATED",
        )
        self.version = version
