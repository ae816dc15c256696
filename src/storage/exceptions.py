"""Exceptions raised by plan repositories."""


class RecordNotFoundError(KeyError):
    """No record exists for the requested id."""


class ConcurrentUpdateError(Exception):
    """A record changed since it was read.

    Raised by compare-and-swap updates when the stored version no longer
    matches the version the caller read.
    """
