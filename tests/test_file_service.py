import base64
import io

import pytest
from pypdf import PdfWriter

from study_buddy.services import file_service


def _pdf_bytes(pages=1, password=None):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=72, height=72)
    if password:
        writer.encrypt(password)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def test_allowed_file_checks_extension():
    assert file_service.allowed_file("Lecture.PDF")
    assert file_service.allowed_file("notes.md")
    assert not file_service.allowed_file("malware.exe")
    assert not file_service.allowed_file("no_extension")


def test_parse_pdf_marks_each_page():
    text = file_service.parse_pdf(_pdf_bytes(pages=2))

    assert text.startswith("[Page 1]")
    assert "[Page 2]" in text


def test_parse_pdf_rejects_missing_signature():
    with pytest.raises(file_service.FileParseError, match="password protected"):
        file_service.parse_pdf(b"definitely not a pdf")


def test_parse_pdf_rejects_encrypted_documents():
    with pytest.raises(file_service.FileParseError):
        file_service.parse_pdf(_pdf_bytes(password="secret"))


def test_parse_attachment_text_and_image():
    text = file_service.parse_attachment("notes.md", "# Cells\nnucleus".encode("utf-8"))
    assert text == {"name": "notes.md", "type": "text/markdown", "content": "# Cells\nnucleus"}

    image = file_service.parse_attachment("diagram.jpg", b"\xff\xd8\xff")
    assert image["type"] == "image/jpeg"
    assert image["content"] == "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8\xff").decode("ascii")


def test_parse_attachment_rejects_unknown_types():
    with pytest.raises(file_service.FileParseError):
        file_service.parse_attachment("archive.zip", b"PK")


def test_parse_pdf_maps_reader_failures_to_parse_error(monkeypatch):
    def _broken_reader(_stream):
        raise KeyError("/Root")

    monkeypatch.setattr(file_service, "PdfReader", _broken_reader)

    with pytest.raises(file_service.FileParseError, match="password protected"):
        file_service.parse_pdf(b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nxref\n0 1\nbroken\ntrailer\n%%EOF")


def test_parse_pdf_maps_page_extraction_failures_to_parse_error(monkeypatch):
    class _Page:
        def extract_text(self):
            raise TypeError("bad content stream")

    class _Reader:
        is_encrypted = False
        pages = [_Page()]

        def __init__(self, _stream):
            pass

    monkeypatch.setattr(file_service, "PdfReader", _Reader)

    with pytest.raises(file_service.FileParseError):
        file_service.parse_pdf(b"%PDF-1.7\ntruncated")
