"""Custom exceptions for the swap rate feed.

None of these reach the viewer: the poller absorbs feed failures into
simulation and selection restore ignores unknown codes. They exist so each
failure kind is raised, caught and logged at a single seam.
"""


class RateFeedError(Exception):
    """Base exception for all rate feed errors."""


class FeedUnavailableError(RateFeedError):
    """Raised when the price feed is unreachable or returns an unusable payload."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class UnknownAssetError(RateFeedError, ValueError):
    """Raised when an asset code is not in the allowed set for a field."""

    def __init__(self, code: object, allowed: tuple[str, ...] = ()) -> None:
        self.code = code
        self.allowed = allowed
        if allowed:
            message = f"Unknown asset {code!r}, expected one of {', '.join(allowed)}"
        else:
            message = f"Unknown asset {code!r}"
        super().__init__(message)
