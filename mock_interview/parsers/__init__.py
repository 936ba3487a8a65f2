"""Parsers package for resume text and contact extraction."""

from .file_handlers import FileFormat, FileHandlerRegistry, TextExtractionResult, detect_file_format
from .resume_parser import ResumeParser, ResumeParseResult, parse_contact_info

__all__ = [
    "FileFormat",
    "FileHandlerRegistry",
    "TextExtractionResult",
    "detect_file_format",
    "ResumeParser",
    "ResumeParseResult",
    "parse_contact_info",
]
