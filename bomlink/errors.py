"""Exception types raised by bomlink components."""


class BomLinkError(Exception):
    """Base class for all bomlink errors."""


class BomParseError(BomLinkError, ValueError):
    """Raised when a BOM or schematic file cannot be parsed at all.

    Fatal for that single file. Callers surface the message and do not retry.
    """


class SequenceExhaustedError(BomLinkError):
    """Raised when the shared LPN sequence counter has no values left."""


class StoreError(BomLinkError):
    """Raised by a component store when a read or write fails."""
