# src/catalog_insights/errors.py


class CatalogError(Exception):
    """Base class for catalog errors."""


class StoreUnavailable(CatalogError):
    """
    The catalog store could not be loaded or a read against it failed.
    Never retried: callers surface it as a generic failure.
    """
