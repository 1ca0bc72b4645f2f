import io
import logging

import PyPDF2

logger = logging.getLogger(__name__)


def extract_pdf_text(content: bytes) -> str:
    """
    Best-effort plain text of a PDF. Returns an empty string when the bytes
    cannot be parsed; the caller scores such resumes as zero.
    """
    if not content:
        return ""

    text = ""
    try:
        pdf_reader = PyPDF2.PdfReader(io.BytesIO(content))
        for page in pdf_reader.pages:
            text += (page.extract_text() or "") + "\n"
    except Exception as e:
        logger.warning(f"PDF text extraction failed, continuing with empty text: {e}")
        return ""

    return text.strip()
