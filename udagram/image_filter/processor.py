"""Stateless processor that greyscales and shrinks images fetched from a URL."""

import io
import logging
import secrets
from pathlib import Path
from typing import List

import httpx
from PIL import Image, ImageOps
from pydantic import BaseModel, Field

from udagram import BaseProcessor, StatelessAction, fetch_url_bytes, render_file, run_blocking
from udagram.errors import FetchOrDecodeError, InvalidInput

from .config import Settings

logger = logging.getLogger(__name__)

INDEX_TEXT = "try GET /filteredimage?image_url={{}}, because there's nothing on the root route here."


class FilterImageQuery(BaseModel):
    """Query string of the filter endpoint."""

    image_url: str | None = Field(None, description="URL of a publicly accessible image")


def _write_filtered(raw_bytes: bytes, out_path: Path, size: int, quality: int) -> Path:
    with Image.open(io.BytesIO(raw_bytes)) as img:
        filtered = ImageOps.grayscale(img).resize((size, size))
    out_path.parent.mkdir(parents=True, exist_ok=True)
    filtered.save(out_path, format="JPEG", quality=quality)
    return out_path


class ImageFilterProcessor(BaseProcessor):
    """Processor exposing the /filteredimage action."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._transport = transport

    @property
    def name(self) -> str:
        return self.settings.service_name

    @property
    def version(self) -> str:
        return self.settings.service_version

    def get_stateless_actions(self) -> List[StatelessAction]:
        return [
            StatelessAction(
                name="filtered_image",
                path="/filteredimage",
                query_model=FilterImageQuery,
                handler=self.handle_filtered_image,
                methods=("GET",),
                summary="Filter an image from a public URL",
                description=(
                    "Downloads the image at image_url, converts it to greyscale, resizes it "
                    "to a fixed square and returns it as a JPEG."
                ),
                tags=("image",),
            ),
        ]

    def _output_path(self) -> Path:
        return Path(self.settings.filter_tmp_dir) / f"filtered.{secrets.token_hex(8)}.jpg"

    async def transform(self, source_url: str) -> Path:
        """
        Fetch, decode, greyscale, resize and store an image.

        Returns:
            Path of the filtered JPEG; the caller owns the file.

        Raises:
            FetchOrDecodeError: the URL could not be fetched or is not an image
        """
        try:
            scheme = httpx.URL(source_url).scheme
        except httpx.InvalidURL as exc:
            raise FetchOrDecodeError(f"Invalid image url: {source_url}") from exc
        if scheme not in ("http", "https"):
            raise FetchOrDecodeError(f"Unsupported url scheme: {source_url}")

        try:
            raw_bytes = await fetch_url_bytes(
                source_url,
                timeout=self.settings.image_fetch_timeout,
                transport=self._transport,
            )
            return await run_blocking(
                _write_filtered,
                raw_bytes,
                self._output_path(),
                self.settings.filter_size,
                self.settings.filter_quality,
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError, Image.DecompressionBombError) as exc:
            logger.error("Could not read image %s: %s", source_url, exc)
            raise FetchOrDecodeError("Could not read image.") from exc

    async def handle_filtered_image(self, query: FilterImageQuery):
        """Return the filtered image and delete the local copy once it is sent."""
        if not query.image_url:
            raise InvalidInput("An image_url query param is required.")

        try:
            filtered_path = await self.transform(query.image_url)
        except FetchOrDecodeError as exc:
            raise FetchOrDecodeError(
                f"Unable to filter the image from the url provided, which was: \n{query.image_url}"
            ) from exc

        return render_file(filtered_path, delete_after=True)
