"""File handlers that turn uploaded resume documents into plain text."""

import io
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any, Dict, List, Optional

import docx
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from ..utils.exceptions import ExtractionError
from ..utils.logging import get_logger


class FileFormat(Enum):
    """Supported resume formats."""
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"


@dataclass
class TextExtractionResult:
    """Result of text extraction from a document."""
    text: str
    file_format: FileFormat
    metadata: Dict[str, Any] = field(default_factory=dict)


def detect_file_format(file_name: str = "", content_type: Optional[str] = None) -> FileFormat:
    """Detect the document format from its MIME type or file name.

    Anything that is neither a PDF nor a ``.docx`` file is read as text.
    """
    if content_type == "application/pdf" or file_name.lower().endswith(".pdf"):
        return FileFormat.PDF
    if file_name.lower().endswith(".docx"):
        return FileFormat.DOCX
    return FileFormat.TXT


class FileHandler:
    """Base class for file handlers."""

    def __init__(self, file_format: FileFormat):
        """Initialize file handler.

        Args:
            file_format: Format this handler supports
        """
        self.file_format = file_format
        self.logger = get_logger(f"file_handler.{file_format.value}")

    def extract_text(self, data: bytes, file_name: str = "") -> TextExtractionResult:
        """Extract text from raw document bytes.

        Args:
            data: Raw document bytes
            file_name: Original file name, used in error messages

        Returns:
            TextExtractionResult containing extracted text and metadata

        Raises:
            ExtractionError: If the document is corrupt or unreadable
        """
        raise NotImplementedError


class TextFileHandler(FileHandler):
    """Handler for plain text files."""

    encodings = ("utf-8", "cp1252", "latin-1")

    def __init__(self):
        """Initialize text file handler."""
        super().__init__(FileFormat.TXT)

    def extract_text(self, data: bytes, file_name: str = "") -> TextExtractionResult:
        for encoding in self.encodings:
            try:
                content = data.decode(encoding)
            except UnicodeDecodeError:
                continue

            return TextExtractionResult(
                text=self._clean_text(content),
                file_format=self.file_format,
                metadata={
                    "encoding": encoding,
                    "line_count": len(content.splitlines()),
                    "file_size": len(data),
                },
            )

        raise ExtractionError("Failed to decode file with any supported encoding", file_name=file_name)

    def _clean_text(self, text: str) -> str:
        """Normalize line endings and drop control characters.

        Line structure is kept; the contact parser reads the first line.
        """
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", text)


class PDFFileHandler(FileHandler):
    """Handler for PDF files."""

    def __init__(self):
        """Initialize PDF file handler."""
        super().__init__(FileFormat.PDF)

    def extract_text(self, data: bytes, file_name: str = "") -> TextExtractionResult:
        try:
            reader = PdfReader(io.BytesIO(data))
            page_texts = [page.extract_text() or "" for page in reader.pages]
        except (PyPdfError, ValueError, OSError) as e:
            self.logger.error(f"Failed to extract text from PDF {file_name}: {e}")
            raise ExtractionError(f"Could not read PDF: {e}", file_name=file_name) from e

        # One line per page, items on a page joined by spaces
        text = "".join(" ".join(page_text.split()) + "\n" for page_text in page_texts)

        return TextExtractionResult(
            text=text,
            file_format=self.file_format,
            metadata={"page_count": len(page_texts), "file_size": len(data)},
        )


class DOCXFileHandler(FileHandler):
    """Handler for DOCX files."""

    def __init__(self):
        """Initialize DOCX file handler."""
        super().__init__(FileFormat.DOCX)

    def extract_text(self, data: bytes, file_name: str = "") -> TextExtractionResult:
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as e:
            # python-docx surfaces zip, xml and key errors for corrupt packages
            self.logger.error(f"Failed to extract text from DOCX {file_name}: {e}")
            raise ExtractionError(f"Could not read DOCX: {e}", file_name=file_name) from e

        text_parts: List[str] = [paragraph.text for paragraph in document.paragraphs]

        for table in document.tables:
            for row in table.rows:
                row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if row_text:
                    text_parts.append(" | ".join(row_text))

        return TextExtractionResult(
            text="\n".join(text_parts),
            file_format=self.file_format,
            metadata={"paragraph_count": len(document.paragraphs), "file_size": len(data)},
        )


class FileHandlerRegistry:
    """Registry for file handlers."""

    def __init__(self):
        """Initialize the file handler registry."""
        self.handlers: Dict[FileFormat, FileHandler] = {}
        self._initialized = False

    def initialize(self) -> None:
        """Register all file handlers."""
        if self._initialized:
            return

        self.handlers[FileFormat.TXT] = TextFileHandler()
        self.handlers[FileFormat.PDF] = PDFFileHandler()
        self.handlers[FileFormat.DOCX] = DOCXFileHandler()

        self._initialized = True

    def get_handler(self, file_format: FileFormat) -> Optional[FileHandler]:
        """Get handler for a specific file format.

        Args:
            file_format: File format to get handler for

        Returns:
            FileHandler instance or None if not found
        """
        return self.handlers.get(file_format)

    def extract_text(self, data: bytes, file_name: str = "", content_type: Optional[str] = None) -> TextExtractionResult:
        """Extract text from a document using the handler for its format."""
        if not self._initialized:
            self.initialize()

        file_format = detect_file_format(PurePath(file_name).name if file_name else "", content_type)
        handler = self.get_handler(file_format)
        if handler is None:
            raise ExtractionError(f"No handler available for file format: {file_format.value}", file_name=file_name)

        return handler.extract_text(data, file_name)
