"""Tests for resume text extraction and contact parsing."""

import io

import docx
import pytest
from pypdf import PdfWriter

from mock_interview.parsers.file_handlers import FileFormat, FileHandlerRegistry, detect_file_format
from mock_interview.parsers.resume_parser import ResumeParser, parse_contact_info
from mock_interview.utils.exceptions import ExtractionError


class TestParseContactInfo:
    def test_extracts_name_email_and_phone(self):
        text = "Jane Doe\njane.doe@example.com\n+1 555-123-4567\nSoftware Engineer"

        contact = parse_contact_info(text)

        assert contact.name == "Jane Doe"
        assert contact.email == "jane.doe@example.com"
        assert contact.phone == "+1 555-123-4567"

    def test_name_line_with_contact_details_is_stripped(self):
        contact = parse_contact_info("John Smith john@example.com 5551234567\nExperience")

        assert contact.name == "John Smith"
        assert contact.email == "john@example.com"
        assert contact.phone == "5551234567"

    def test_long_first_line_is_not_a_name(self):
        contact = parse_contact_info("Experienced Software Engineer With Many Years\njohn@example.com")

        assert contact.name is None
        assert contact.email == "john@example.com"

    def test_lowercase_first_line_is_not_a_name(self):
        assert parse_contact_info("resume\nmore text").name is None

    def test_blank_leading_lines_are_skipped(self):
        assert parse_contact_info("\n\n  Ada Lovelace  \n").name == "Ada Lovelace"

    def test_missing_fields_are_none(self):
        contact = parse_contact_info("")

        assert contact.name is None
        assert contact.email is None
        assert contact.phone is None


class TestFileHandlers:
    @pytest.mark.parametrize("file_name,content_type,expected", [
        ("resume.pdf", None, FileFormat.PDF),
        ("upload", "application/pdf", FileFormat.PDF),
        ("Resume.DOCX", None, FileFormat.DOCX),
        ("resume.txt", None, FileFormat.TXT),
        ("resume", None, FileFormat.TXT),
    ])
    def test_detect_file_format(self, file_name, content_type, expected):
        assert detect_file_format(file_name, content_type) == expected

    def test_text_keeps_lines(self):
        registry = FileHandlerRegistry()

        result = registry.extract_text(b"Jane Doe\r\njane@example.com\r\n", "resume.txt")

        assert result.text == "Jane Doe\njane@example.com\n"
        assert result.metadata["encoding"] == "utf-8"

    def test_text_falls_back_to_single_byte_encoding(self):
        result = FileHandlerRegistry().extract_text("Renée".encode("latin-1"), "resume.txt")

        assert result.text == "Renée"

    def test_docx_paragraphs(self):
        document = docx.Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("jane@example.com")
        buffer = io.BytesIO()
        document.save(buffer)

        result = FileHandlerRegistry().extract_text(buffer.getvalue(), "resume.docx")

        assert result.file_format == FileFormat.DOCX
        lines = result.text.splitlines()
        assert "Jane Doe" in lines
        assert "jane@example.com" in lines

    def test_pdf_page_count(self):
        writer = PdfWriter()
        writer.add_blank_page(width=612, height=792)
        buffer = io.BytesIO()
        writer.write(buffer)

        result = FileHandlerRegistry().extract_text(buffer.getvalue(), "resume.pdf")

        assert result.file_format == FileFormat.PDF
        assert result.metadata["page_count"] == 1
        assert result.text.strip() == ""

    @pytest.mark.parametrize("file_name", ["resume.pdf", "resume.docx"])
    def test_corrupt_documents_raise(self, file_name):
        with pytest.raises(ExtractionError):
            FileHandlerRegistry().extract_text(b"definitely not a document", file_name)


class TestResumeParser:
    def test_parse_returns_text_and_contact(self):
        data = b"Jane Doe\njane@example.com\n(555) 123 4567"

        result = ResumeParser().parse(data, "resume.txt")

        assert result.raw_text.startswith("Jane Doe")
        assert result.contact.name == "Jane Doe"
        assert result.contact.email == "jane@example.com"
        assert result.file_format == FileFormat.TXT

    def test_parse_propagates_extraction_error(self):
        with pytest.raises(ExtractionError):
            ResumeParser().parse(b"%PDF-broken", "resume.pdf")
