"""Parsing pipeline that materializes inline data and local files."""

from .classifier import InputClassifier
from .decoder import PayloadDecoder
from .detectors import ExtensionGuesser, HashComputer, TypeDetector
from .filesystem import LocalFilesystem
from .materializer import CleanupGuard, TempMaterializer
from .models import ClassifiedInput, DecodedPayload, SmartFile
from .pipeline import DataParser, parse_base64_data, parse_data, parse_text_data
from .reader import SourceReader
from .resolvers import ExtensionResolver, MediaTypeResolver

__all__ = [
    "ClassifiedInput",
    "CleanupGuard",
    "DataParser",
    "DecodedPayload",
    "ExtensionGuesser",
    "ExtensionResolver",
    "HashComputer",
    "InputClassifier",
    "LocalFilesystem",
    "MediaTypeResolver",
    "PayloadDecoder",
    "SmartFile",
    "SourceReader",
    "TempMaterializer",
    "TypeDetector",
    "parse_base64_data",
    "parse_data",
    "parse_text_data",
]
