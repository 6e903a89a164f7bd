class RecordSheetError(Exception):
    """Base class for errors raised while building or materializing a sheet."""


class ConfigurationError(RecordSheetError, ValueError):
    """
    A record type declaration or its usage is invalid.

    Raised for duplicate column names, missing accessors, non-dataclass record
    types, unknown cell format properties and unsupported cell kinds.
    """


class InstantiationError(RecordSheetError, TypeError):
    """A converter or style provider could not be created without arguments."""
