"""Custom exceptions for cftranscoder."""


class CftranscoderError(Exception):
    """Base exception for cftranscoder operations."""


class UnsupportedNodeKindError(CftranscoderError):
    """Node kind or fragment model has no transcoding rule."""


class FetchError(CftranscoderError):
    """Error while reading fragment records."""


class NotFoundError(FetchError):
    """Referenced fragment does not exist."""


class TransportError(FetchError):
    """Fragment API could not be reached or answered with an unexpected status."""


class WriteError(CftranscoderError):
    """Error while writing fragment records."""


class RejectedPayloadError(WriteError):
    """Fragment API refused a create or update payload."""


class VersionConflictError(WriteError):
    """Fragment changed since its version tag was read."""
