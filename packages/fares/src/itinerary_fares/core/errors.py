from __future__ import annotations


class FareError(RuntimeError):
    """Base error"""


class TransientError(FareError):
    """
    Retryable failures such as network timeouts, temporary upstream 5xx
    """


class SourceError(TransientError):
    """A fare or alias source could not be read or fetched"""


class InputDataError(FareError):
    """
    Non-retryable: source content is present but unusable as a whole
    (HTML instead of a table, no rows, no origin/destination/fare columns)
    """


class FareTableShapeError(InputDataError):
    """First row of a fare table exposes no origin/destination/fare columns"""


class EmptyFareTableError(FareError):
    """
    No fare table is loaded, or the loaded one holds zero usable records.

    Kept apart from a resolution miss: a miss means the table was searched,
    this means there was nothing to search.
    """
