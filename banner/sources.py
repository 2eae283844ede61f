"""
Collaborators that materialize banner inputs over HTTP.

- CsvRowSource: first data row of a remote CSV file
- HttpImageSource: remote image, fetched and decoded with Pillow

Each call makes exactly one attempt; retries belong to the caller.
"""

import csv
import io
import logging
from typing import Dict, Optional

import httpx
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, FetchError

logger = logging.getLogger(__name__)


class CsvRowSource:
    """Reads the first data row of a CSV file at a URL."""

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self._transport = transport

    async def fetch_first_row(self, url: str) -> Dict[str, str]:
        """
        Fetch a CSV file and return its first data row.

        Args:
            url: CSV file URL

        Returns:
            Mapping of column name to value; empty when the file has no rows
        """
        logger.info(f"Fetching CSV data: {url[:80]}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self._transport
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch CSV data: {e}")
            raise FetchError(f"Failed to fetch CSV data: {e}") from e

        try:
            reader = csv.DictReader(io.StringIO(response.text.lstrip("\ufeff")))
            row = next(reader, None)
        except csv.Error as e:
            logger.error(f"Error parsing CSV data: {e}")
            raise DecodeError(f"Error parsing CSV data: {e}") from e

        if row is None:
            logger.warning("CSV file has no data rows")
            return {}

        # Short rows yield None for trailing columns
        return {key.strip(): (value or "").strip() for key, value in row.items() if key}


class HttpImageSource:
    """Downloads and decodes images."""

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> Image.Image:
        """
        Download an image and decode it fully.

        Args:
            url: Image URL

        Returns:
            Decoded PIL Image
        """
        logger.info(f"Downloading image: {url[:80]}...")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self._transport
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to download image: {e}")
            raise FetchError(f"Failed to download image: {e}") from e

        try:
            image = Image.open(io.BytesIO(response.content))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            logger.error(f"Failed to decode image from {url[:80]}: {e}")
            raise DecodeError(f"Failed to decode image: {e}") from e

        logger.info(f"Image decoded: {image.size[0]}x{image.size[1]} {image.mode}")
        return image
