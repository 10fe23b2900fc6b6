"""Custom exception hierarchy for assetcat."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class AssetCatalogError(Exception):
    """Base class for all custom errors raised by assetcat."""


# --- 3-layer hierarchy ---

class DomainError(AssetCatalogError):
    """Base class for domain-level errors."""


class InfrastructureError(AssetCatalogError):
    """Base class for infrastructure-level errors."""


class ApplicationError(AssetCatalogError):
    """Base class for application-level errors."""


# --- Domain errors ---

class LogicError(DomainError):
    """Raised when a request violates catalog logic (missing folder, volume or file)."""


class ConflictError(DomainError):
    """Raised when a file or folder name is already taken in the index."""


class MissingEntityError(DomainError):
    """Raised when a referenced asset or folder id can no longer be resolved."""


class AccessError(DomainError):
    """Raised when a permission check fails or its subject no longer exists."""


class ValidationError(DomainError):
    """Raised when an entity fails field validation.

    ``errors`` maps each failing field to its messages; ``model`` is the
    entity the errors were attached to.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[Mapping[str, list[str]]] = None,
        model: Any = None,
    ):
        super().__init__(message)
        self.errors: dict[str, list[str]] = {key: list(value) for key, value in (errors or {}).items()}
        self.model = model


# --- Infrastructure errors ---

class DatabaseError(InfrastructureError):
    """Raised when a database operation fails."""


class ConnectionPoolExhausted(InfrastructureError):
    """Raised when no connections are available in the pool."""


class BackendConflictError(InfrastructureError):
    """Raised when a file or folder exists on the volume but not in the index."""


class VolumeError(InfrastructureError):
    """Raised when a physical operation on a volume fails."""


class FileAccessError(InfrastructureError):
    """Raised when a source file cannot be opened for streaming."""


class PersistenceError(InfrastructureError):
    """Raised when the element store reports a failed save."""


# --- Application errors ---

class CancelledError(ApplicationError):
    """Raised when a hook handler vetoes an action."""


# --- Settings ---

class SettingsError(AssetCatalogError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
