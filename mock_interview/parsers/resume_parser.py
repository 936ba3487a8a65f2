"""Resume parser: document bytes to text, text to contact details."""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .file_handlers import FileHandlerRegistry, FileFormat
from ..models.interview import ContactInfo
from ..utils.logging import get_logger

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"(\+?\d{1,3}[-.\s]?)?(\d{10}|\d{3}[-.\s]\d{3}[-.\s]\d{4})", re.IGNORECASE)
NAME_HINT_PATTERN = re.compile(r"[A-Z][a-z]")
MAX_NAME_WORDS = 4


def parse_contact_info(text: str) -> ContactInfo:
    """Best-effort name, email and phone guess from resume text.

    The name is the first non-empty line with the email and phone removed,
    kept only when it is at most four words and looks capitalized.
    """
    email_match = EMAIL_PATTERN.search(text)
    phone_match = PHONE_PATTERN.search(text)
    email = email_match.group(0) if email_match else None
    phone = phone_match.group(0) if phone_match else None

    lines = [line.strip() for line in re.split(r"\r?\n", text) if line.strip()]
    name = None
    if lines:
        maybe = lines[0]
        if email:
            maybe = maybe.replace(email, "", 1)
        if phone:
            maybe = maybe.replace(phone, "", 1)
        maybe = maybe.strip()
        if len(maybe.split(" ")) <= MAX_NAME_WORDS and NAME_HINT_PATTERN.search(maybe):
            name = maybe

    return ContactInfo(name=name, email=email, phone=phone)


@dataclass
class ResumeParseResult:
    """Result of resume parsing operation."""
    raw_text: str
    contact: ContactInfo
    file_format: FileFormat
    extraction_metadata: Dict[str, Any]


class ResumeParser:
    """Extracts raw text and contact details from an uploaded resume."""

    def __init__(self, file_handler_registry: Optional[FileHandlerRegistry] = None):
        self.logger = get_logger("parser.resume")
        self.file_handler_registry = file_handler_registry or FileHandlerRegistry()
        self.file_handler_registry.initialize()

    def parse(self, data: bytes, file_name: str = "", content_type: Optional[str] = None) -> ResumeParseResult:
        """Parse an uploaded resume.

        Args:
            data: Raw document bytes
            file_name: Original file name
            content_type: Optional MIME type reported by the upload

        Returns:
            ResumeParseResult with the raw text and the contact guess

        Raises:
            ExtractionError: If the document cannot be read
        """
        extraction = self.file_handler_registry.extract_text(data, file_name, content_type)
        contact = parse_contact_info(extraction.text)

        self.logger.info(
            f"Parsed resume {file_name or '<upload>'} ({extraction.file_format.value}): "
            f"name={'yes' if contact.name else 'no'}, email={'yes' if contact.email else 'no'}, "
            f"phone={'yes' if contact.phone else 'no'}"
        )

        return ResumeParseResult(
            raw_text=extraction.text,
            contact=contact,
            file_format=extraction.file_format,
            extraction_metadata=extraction.metadata,
        )
