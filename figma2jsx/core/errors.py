"""Error taxonomy for the conversion pipeline.

Every class here is caught at the orchestrator boundary (or in an outer
adapter for input-side errors) and turned into a single-line user message.
`str(err)` is always the user-facing text.
"""


class ConversionError(Exception):
    """Base class for pipeline failures with a user-facing message."""


class EncodingFailure(ConversionError):
    """The image payload could not be read or converted to a data URL."""


class EmptyInput(ConversionError):
    """Neither structured text nor an image is present."""

    def __init__(self, message: str = "Please provide either Figma JSON or upload a screenshot image."):
        super().__init__(message)


class TransportFailure(ConversionError):
    """Network-level failure talking to the completion service."""


class ServiceError(ConversionError):
    """The completion service answered, but not with usable output."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InputRejected(ConversionError):
    """A selected or pasted payload was not accepted as an image."""


class NothingToExport(ConversionError):
    """Export was requested before any conversion completed."""

    def __init__(self, message: str = "No generated code to export."):
        super().__init__(message)
