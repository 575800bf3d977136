"""Attachment parsing for chat and the summarizer."""

import base64
import io
import logging

from pypdf import PdfReader


logger = logging.getLogger('study_buddy.files')

ALLOWED_TEXT_EXTENSIONS = {'txt', 'md'}
ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
ALLOWED_EXTENSIONS = {'pdf'} | ALLOWED_TEXT_EXTENSIONS | ALLOWED_IMAGE_EXTENSIONS
IMAGE_MIME_TYPES = {
    'png': 'image/png',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'gif': 'image/gif',
    'webp': 'image/webp',
}
PDF_READ_ERROR = "Failed to read PDF. Make sure it's not password protected."


class FileParseError(Exception):
    pass


def file_extension(filename):
    if '.' not in (filename or ''):
        return ''
    return filename.rsplit('.', 1)[1].lower()


def allowed_file(filename):
    return file_extension(filename) in ALLOWED_EXTENSIONS


def has_pdf_signature(data):
    return data[:5] == b'%PDF-'


def parse_pdf(data):
    if not has_pdf_signature(data):
        raise FileParseError(PDF_READ_ERROR)
    try:
        reader = PdfReader(io.BytesIO(data))
        encrypted = reader.is_encrypted
        chunks = []
        if not encrypted:
            for index, page in enumerate(reader.pages, start=1):
                chunks.append(f"[Page {index}]\n{(page.extract_text() or '').strip()}")
    except Exception as exc:
        logger.warning(f"PDF parsing error: {exc}")
        raise FileParseError(PDF_READ_ERROR) from exc
    if encrypted:
        raise FileParseError(PDF_READ_ERROR)
    return '\n\n'.join(chunks).strip()


def parse_text_file(data):
    return data.decode('utf-8', errors='replace')


def image_to_data_url(data, mime_type):
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_attachment(filename, data):
    """Turn an uploaded file into the {name, type, content} attachment shape."""
    extension = file_extension(filename)
    if extension == 'pdf':
        return {'name': filename, 'type': 'application/pdf', 'content': parse_pdf(data)}
    if extension in ALLOWED_TEXT_EXTENSIONS:
        mime_type = 'text/markdown' if extension == 'md' else 'text/plain'
        return {'name': filename, 'type': mime_type, 'content': parse_text_file(data)}
    if extension in ALLOWED_IMAGE_EXTENSIONS:
        mime_type = IMAGE_MIME_TYPES[extension]
        return {'name': filename, 'type': mime_type, 'content': image_to_data_url(data, mime_type)}
    raise FileParseError('Unsupported file type. Use PDF, TXT, MD or an image.')
