"""Typed failures shared by the parser, the store adapters, the services and the API."""


class CatalogError(Exception):
    """Base class for catalog errors. Carries an error kind and an HTTP status."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def to_dict(self):
        return {"kind": self.kind, "message": self.message}


class ValidationError(CatalogError):
    """Malformed input: filename, query parameter, missing confirmation."""

    kind = "validation"
    status_code = 400


class InvalidFilenameError(ValidationError):
    """Raised when a filename does not follow the exam naming convention."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason


class NotFoundError(CatalogError):
    kind = "not_found"
    status_code = 404


class StoreFailure(CatalogError):
    """The metadata store or the object store is unreachable or rejected the operation."""

    kind = "store_failure"
    status_code = 503


class ConfigurationMissing(CatalogError):
    """Required connection settings are absent. Fatal at startup."""

    kind = "configuration_missing"
    status_code = 500
