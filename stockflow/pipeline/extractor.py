"""Attachment download and PDF text extraction."""

import asyncio
import io
import re

import httpx
from loguru import logger
from PyPDF2 import PdfReader

from stockflow.exceptions import ExtractionError

DOWNLOAD_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Collapse all whitespace runs to single spaces."""
    return _WHITESPACE.sub(" ", text).strip()


def extract_pdf_text(data: bytes, max_chars: int) -> str:
    """Extract normalized text from PDF bytes.

    Pages are read in order and reading stops once ``max_chars`` characters
    are available, so the result always favours the leading pages.

    Args:
        data: Raw PDF bytes
        max_chars: Character budget

    Returns:
        Normalized text, at most ``max_chars`` long
    """
    reader = PdfReader(io.BytesIO(data))

    collected = ""
    for page in reader.pages:
        page_text = page.extract_text() or ""
        collected = normalize_text(f"{collected} {page_text}")
        if len(collected) >= max_chars:
            break

    return collected[:max_chars]


class DocumentExtractor:
    """Fetches announcement attachments and returns their leading text."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float = 15.0,
        max_chars: int = 6000,
        min_chars: int = 200,
    ) -> None:
        """Initialize extractor.

        Args:
            client: HTTP client used for downloads
            timeout: Download timeout in seconds
            max_chars: Maximum characters returned
            min_chars: Texts shorter than this are treated as unreadable
        """
        self.client = client
        self.timeout = timeout
        self.max_chars = max_chars
        self.min_chars = min_chars

    async def extract(self, url: str) -> str:
        """Download an attachment and extract its text.

        Args:
            url: Attachment URL

        Returns:
            Extracted text, or an empty string when the document has too
            little readable text

        Raises:
            ExtractionError: If the download or the PDF parse fails
        """
        try:
            response = await self.client.get(url, headers=DOWNLOAD_HEADERS, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ExtractionError(f"Failed to download {url}: {e}") from e

        try:
            text = await asyncio.to_thread(extract_pdf_text, response.content, self.max_chars)
        except Exception as e:
            raise ExtractionError(f"Failed to parse {url}: {e}") from e

        if len(text) < self.min_chars:
            logger.warning(f"Attachment has very little readable text ({len(text)} chars): {url}")
            return ""

        logger.info(f"Extracted {len(text)} chars from attachment")
        return text
