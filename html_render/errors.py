"""
Conversion errors.

Every failure of a conversion call surfaces as one ConversionError subclass
carrying the engine-reported message. Nothing here is retried; retry policy
belongs to the caller.
"""


class ConversionError(Exception):
    """
    Base exception for all conversion failures.

    Attributes:
        kind: Short name of the failure kind (the subclass name)
        message: Underlying engine-reported message
    """

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}" if self.message else self.kind


class LaunchFailure(ConversionError):
    """
    Raised when the Chromium process or its control connection cannot be established.

    Fatal for the call. Typically a missing browser install
    (run ``html-render install-browser``).
    """
    pass


class NavigationFailure(ConversionError):
    """Raised when a URL or inline document fails to load."""
    pass


class ReadinessTimeout(ConversionError):
    """Raised when the document body never appears before the deadline."""
    pass


class ScriptEvaluationFailure(ConversionError):
    """Raised when the content height probe fails."""
    pass


class RenderFailure(ConversionError):
    """Raised when the print or screenshot command fails."""
    pass


class ExtractionFailure(ConversionError):
    """
    Raised when the rendered DOM cannot be serialized.

    Never invalidates a primary artifact already produced in the same call.
    """
    pass
