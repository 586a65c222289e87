"""Domain exceptions for Channelscope."""


class ChannelScopeError(Exception):
    """Base class for all Channelscope errors."""


class InvalidSeriesError(ChannelScopeError, ValueError):
    """Raised when a price series is malformed (empty, non-numeric, mismatched arrays).

    Only truly malformed input raises. A series that is merely too short or too
    flat to hold a channel yields an empty result instead.
    """
