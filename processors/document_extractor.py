#!/usr/bin/env python3
"""
Document Extractor

Extracts text from uploaded audit decks. PDFs are read with pypdf; other file
types are recorded as a placeholder naming the file.
"""

import io
import logging
from pypdf import PdfReader


logger = logging.getLogger(__name__)

AUDIT_DECK_ERROR_PLACEHOLDER = "[Error processing audit deck]"


def uploaded_file_placeholder(filename: str) -> str:
    return f"[File uploaded: {filename}]"


def extract_pdf_text(data: bytes) -> str:
    """
    Extract text from all pages of a PDF

    Pages that fail to extract are skipped with a warning.

    Args:
        data: Raw PDF bytes

    Returns:
        Page texts joined by blank lines
    """
    reader = PdfReader(io.BytesIO(data))
    num_pages = len(reader.pages)
    logger.info(f"📄 [PDF] PDF has {num_pages} pages")

    text_content = []
    for page_num, page in enumerate(reader.pages, 1):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"⚠️ [PDF] Failed to extract text from page {page_num}: {e}")
            continue
        if page_text and page_text.strip():
            text_content.append(page_text)

    return "\n\n".join(text_content)


def extract_document_text(data: bytes, filename: str) -> str:
    """
    Extract text from an uploaded document

    Args:
        data: File contents
        filename: Original filename (the extension selects the extractor)

    Returns:
        Extracted text, or a bracketed placeholder for unsupported or unreadable files
    """
    if not filename.lower().endswith('.pdf'):
        logger.info(f"📎 [DOCUMENT] No text extractor for {filename}, recording placeholder")
        return uploaded_file_placeholder(filename)

    try:
        text = extract_pdf_text(data)
    except Exception as e:
        logger.error(f"❌ [PDF ERROR] Failed to process {filename}: {e}")
        return AUDIT_DECK_ERROR_PLACEHOLDER

    logger.info(f"✅ [PDF] Extracted {len(text)} chars from {filename}")
    return text
