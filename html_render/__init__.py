"""Render HTML files or URLs to PDF and PNG/JPEG with headless Chromium."""

__version__ = "1.0.0"

from .converter import HTMLConverter, convert_to_image, convert_to_pdf
from .errors import (
    ConversionError,
    ExtractionFailure,
    LaunchFailure,
    NavigationFailure,
    ReadinessTimeout,
    RenderFailure,
    ScriptEvaluationFailure,
)
from .options import ConversionOptions, InputDescriptor, RenderedArtifact

__all__ = [
    "HTMLConverter",
    "convert_to_pdf",
    "convert_to_image",
    "ConversionOptions",
    "InputDescriptor",
    "RenderedArtifact",
    "ConversionError",
    "LaunchFailure",
    "NavigationFailure",
    "ReadinessTimeout",
    "ScriptEvaluationFailure",
    "RenderFailure",
    "ExtractionFailure",
]
