"""Custom exception hierarchy for assetKeeper."""

from __future__ import annotations


class AssetKeeperError(Exception):
    """Base class for all custom errors raised by assetKeeper."""


# --- 3-layer hierarchy ---

class DomainError(AssetKeeperError):
    """Base class for domain-level errors."""


class InfrastructureError(AssetKeeperError):
    """Base class for infrastructure-level errors."""


class ApplicationError(AssetKeeperError):
    """Base class for application-level errors."""


# --- Domain errors ---

class AssetNotFoundError(DomainError):
    """Raised when the requested asset cannot be located."""


class AssetAlreadyExistsError(DomainError):
    """Raised by strict inserts when the asset id is already taken."""


class InvalidArgumentError(DomainError):
    """Raised for malformed ids or missing required fields."""


class IntegrityViolationError(DomainError):
    """Raised when a mutation would break the hierarchy invariants."""


# --- Infrastructure errors ---

class LibraryIOError(InfrastructureError):
    """Raised when the library document cannot be read or written."""


class LibraryDocumentInvalidError(InfrastructureError):
    """Raised when the library document cannot be parsed or fails its schema."""


# --- DI-specific errors ---

class CircularDependencyError(AssetKeeperError):
    """Raised when a circular dependency is detected during resolution."""


class ResolutionError(AssetKeeperError):
    """Raised when a dependency cannot be resolved."""


# --- Settings ---

class SettingsError(AssetKeeperError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
