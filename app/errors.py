class ServiceError(Exception):
    """Base for every error the service surfaces to its callers."""


class InvalidInputError(ServiceError, ValueError):
    pass


class DuplicateError(InvalidInputError):
    pass


class NotFoundError(ServiceError, LookupError):
    pass


class StorageError(ServiceError, OSError):
    """The data file could not be read, parsed or written."""
