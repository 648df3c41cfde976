"""Exception taxonomy for flatstore.

Filesystem failures are not wrapped: they surface as plain OSError.
"""

from __future__ import annotations


class FlatStoreError(Exception):
    """Base class for every error raised by flatstore itself."""


class InvalidSettingError(FlatStoreError):
    """A reload policy (or other setting) is not one we know how to apply."""


class FileParseError(FlatStoreError):
    """The backing file could not be parsed into a key-value mapping."""


class UnsupportedFileTypeError(FlatStoreError, ValueError):
    """No codec is registered for the requested file type or extension."""


class FileSerializeError(FlatStoreError):
    """The in-memory data holds a value the file's format cannot represent."""
