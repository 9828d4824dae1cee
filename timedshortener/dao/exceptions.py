"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    KeyNotFoundError:
        Raised when a key has no live value in the key-value store.

    LinkNotFoundError:
        Raised when a short code has no live link entry (unknown or expired).

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    MalformedRecordError:
        Raised when a stored value cannot be decoded into the expected record.

Example:
    >>> from timedshortener.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with code 'A12345' not found or expired.")
    Traceback (most recent call last):
        ...
    timedshortener.dao.exceptions.LinkNotFoundError: Link with code 'A12345' not found or expired.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class KeyNotFoundError(DAOError):
    """Exception raised when a key has no live value in the data store."""

    error_code = 'dao:key_not_found'


class LinkNotFoundError(KeyNotFoundError):
    """Exception raised when a short code is unknown or its link entry has expired."""

    error_code = 'CODE_NOT_FOUND'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'STORAGE_ERROR'


class MalformedRecordError(DAOError):
    """Exception raised when a stored value can't be decoded into a record."""

    error_code = 'MALFORMED_RECORD'
