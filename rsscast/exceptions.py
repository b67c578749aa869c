"""
Error kinds raised by the rsscast catalog, store and feed source.

    StoreUnavailable   catalog file cannot be opened (fatal to the invocation)
    UnknownOperation   a query name missing from the registry (programming error)
    QueryFailed        execution error inside the store (command aborts, store still closes)
    FeedUnavailable    a feed could not be fetched or parsed (always recoverable)
"""


class RssCastError(Exception):
    """Base class for every error raised by rsscast."""


class StoreUnavailable(RssCastError):
    """The catalog file could not be opened or initialized."""


class UnknownOperation(RssCastError):
    """A named query was requested that the registry does not define."""

    def __init__(self, name: str):
        super().__init__(f"Unknown catalog operation: {name!r}")
        self.name = name


class QueryFailed(RssCastError):
    """A named query failed while executing against the catalog."""

    def __init__(self, detail: str):
        super().__init__(f"Catalog query failed: {detail}")
        self.detail = detail


class FeedUnavailable(RssCastError):
    """A feed URL could not be fetched, or did not parse as a usable feed."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Feed unavailable ({url}): {reason}")
        self.url = url
        self.reason = reason
