"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class InvalidKeyFormatError(LicenseException):
    """Raised when a license key does not normalize to 24 characters."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="INVALID_KEY_FORMAT")


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class LicenseAlreadyClaimedError(LicenseException):
    """Raised when claiming a license that already has an owner."""

    def __init__(self, message: str = "License has already been claimed"):
        super().__init__(message, code="LICENSE_ALREADY_CLAIMED")


class LicenseValidationError(LicenseException):
    """Raised when an operation cannot continue because the license is invalid."""

    def __init__(self, message: str = "License is invalid", errors: dict = None):
        super().__init__(message, code="LICENSE_VALIDATION_FAILED")
        self.errors = errors or {}


class LicensePersistenceError(LicenseException):
    """Raised when a validated license could not be written to the store."""

    def __init__(self, message: str = "License validated but didn't save"):
        super().__init__(message, code="LICENSE_PERSISTENCE_FAILED")


class PluginException(DomainException):
    """Base exception for plugin-related errors."""

    pass


class InvalidPluginHandleError(PluginException):
    """Raised when a plugin handle does not resolve to a plugin."""

    def __init__(self, message: str = "Invalid plugin handle"):
        super().__init__(message, code="INVALID_PLUGIN_HANDLE")


class InvalidEditionHandleError(PluginException):
    """Raised when an edition handle does not resolve to an edition of the plugin."""

    def __init__(self, message: str = "Invalid plugin edition"):
        super().__init__(message, code="INVALID_EDITION_HANDLE")


class CmsLicenseNotFoundError(LicenseException):
    """Raised when a linked CMS license is not found."""

    def __init__(self, message: str = "CMS license not found"):
        super().__init__(message, code="CMS_LICENSE_NOT_FOUND")
