class CatalogError(Exception):
    """Base class for catalog service failures."""


class PersistenceError(CatalogError):
    """
    The underlying store rejected a read or write. Raised by the
    repositories and rendered as a generic error page by the app.
    """
