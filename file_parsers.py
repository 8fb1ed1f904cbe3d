"""
File parsers for uploaded .txt, .docx and .pdf documents
"""
import io
import zipfile
from typing import BinaryIO, Callable, Dict, List

import docx
from docx.opc.exceptions import PackageNotFoundError
import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError
from pdfplumber.utils.exceptions import MalformedPDFException, PdfminerException

from config_logging import ValidationError, get_logger, handle_errors

logger = get_logger('file_parsers')

TEXT_ENCODINGS = ['utf-8-sig', 'cp1252', 'latin-1']


def get_file_type(filename: str) -> str:
    """Get lower-case file extension without the dot"""
    return filename.rsplit('.', 1)[1].lower() if '.' in filename else ''


def parse_txt(data: bytes) -> str:
    """Decode plain text, trying common encodings"""
    for encoding in TEXT_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    # latin-1 never fails, so this is unreachable in practice
    raise ValueError("Could not decode text file")


def parse_docx(data: bytes) -> str:
    """Join non-blank paragraph text of a Word document"""
    try:
        document = docx.Document(io.BytesIO(data))
    except (zipfile.BadZipFile, KeyError, PackageNotFoundError) as e:
        raise ValueError(f"Not a valid .docx document: {e}")
    return "\n".join(p.text for p in document.paragraphs if p.text.strip())


def parse_pdf(data: bytes) -> str:
    """Join extracted page text of a PDF"""
    pages: List[str] = []
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    pages.append(page_text)
    except (PdfminerException, MalformedPDFException, PDFSyntaxError) as e:
        raise ValueError(f"Not a valid .pdf document: {e}")
    return "\n".join(pages)


PARSERS: Dict[str, Callable[[bytes], str]] = {
    'txt': parse_txt,
    'docx': parse_docx,
    'pdf': parse_pdf,
}


@handle_errors(logger)
def extract_text(stream: BinaryIO, filename: str) -> str:
    """Extract the text of an uploaded document, dispatching on extension"""
    file_type = get_file_type(filename)
    parser = PARSERS.get(file_type)
    if parser is None:
        raise ValidationError(
            f'File type not allowed. Supported: {", ".join(sorted(PARSERS))}',
            field='file', filename=filename
        )

    data = stream.read()
    text = parser(data)
    logger.debug("Extracted text", filename=filename, file_type=file_type, characters=len(text))
    return text.strip()
