"""
db/errors.py
------------
Exceptions raised by the data store.
Database driver errors (psycopg2.Error) are not wrapped; they reach the
caller unchanged from the operations that propagate them.
"""


class DataStoreError(Exception):
    """Base class for data store errors."""


class ValidationError(DataStoreError, ValueError):
    """Invalid input rejected before any round trip to the database."""


class GuidAllocationError(DataStoreError):
    """No unused game GUID found within the allowed number of attempts."""
