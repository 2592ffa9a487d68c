class SalesboardError(Exception):
    """Base class for failures reported to clients as HTTP 500."""


class UpstreamFetchError(SalesboardError):
    """The seed dataset could not be fetched or understood."""


class StoreError(SalesboardError):
    """A query or aggregation against the record store failed."""


class CompositionError(SalesboardError):
    """A sub-query of the combined view failed or timed out."""
