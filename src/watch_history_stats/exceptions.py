class WatchStatsError(RuntimeError):
    """Base class for errors raised while building a watch-history report."""
    pass


class DecodeError(WatchStatsError):
    """Raised when a payload is not valid JSON or does not hold watch-history records."""
    pass


class EmptyInputError(WatchStatsError):
    """Raised when decoding produced no events, so no time range can be established."""
    pass


class MalformedRecordWarning(UserWarning):
    """Emitted when records were left out of an aggregate because of a bad timestamp or URL."""
    pass
