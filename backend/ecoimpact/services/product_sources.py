# ecoimpact/services/product_sources.py

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

import httpx

from ecoimpact.core.config import settings
from ecoimpact.core.errors import InvalidProductInput
from ecoimpact.schemas.analyze import InputMethod, ProductInput
from ecoimpact.services.openai_vision import extract_product_json_from_image

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")


class ProductInputSource(ABC):
    """Something that can produce a ProductInput for the estimator."""

    input_method: InputMethod

    @abstractmethod
    async def load(self) -> ProductInput: ...


def _require_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidProductInput("Please enter a product name")
    return name


class ManualTextSource(ProductInputSource):
    input_method = InputMethod.TEXT

    def __init__(
        self, name: str | None, description: str = "", origin: str | None = None
    ):
        self.name = name
        self.description = description
        self.origin = origin

    async def load(self) -> ProductInput:
        return ProductInput(
            name=_require_name(self.name),
            description=(self.description or "").strip(),
            origin=self.origin,
            input_method=self.input_method,
        )


class ImageExtractionSource(ProductInputSource):
    """
    Image -> ProductInput
    Uses OpenAI vision when a key is configured. Without a key, or if the
    model call fails, returns the placeholder extraction.
    """

    input_method = InputMethod.IMAGE

    PLACEHOLDER = {
        "name": "Product extracted from image",
        "description": "Product details extracted using OCR technology",
        "origin": "Unknown",
        "confidence": 0.85,
    }

    def __init__(
        self,
        image_bytes: bytes,
        filename: str | None = None,
        mime_type: str | None = "image/jpeg",
    ):
        self.image_bytes = image_bytes
        self.filename = filename
        self.mime_type = mime_type

    def _validate(self) -> None:
        if not self.mime_type or not self.mime_type.startswith("image/"):
            raise InvalidProductInput("Invalid file type. Please upload an image.")
        if self.mime_type not in ALLOWED_IMAGE_TYPES:
            raise InvalidProductInput("Supported image types are JPEG, PNG and WebP.")
        if not self.image_bytes:
            raise InvalidProductInput("Uploaded image is empty.")
        if len(self.image_bytes) > settings.MAX_UPLOAD_BYTES:
            raise InvalidProductInput(
                f"Image is larger than {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB."
            )

    def _from_extracted(self, extracted: dict) -> ProductInput | None:
        name = extracted.get("name")
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            return None

        description = extracted.get("description")
        if isinstance(description, list):
            description = ", ".join(str(d) for d in description)
        origin = extracted.get("origin")

        return ProductInput(
            name=name,
            description=description if isinstance(description, str) else "",
            origin=origin if isinstance(origin, str) else None,
            input_method=self.input_method,
        )

    def placeholder(self) -> ProductInput:
        return ProductInput(**self.PLACEHOLDER, input_method=self.input_method)

    async def load(self) -> ProductInput:
        self._validate()

        if not settings.OPENAI_API_KEY:
            return self.placeholder()

        try:
            extracted = await asyncio.to_thread(
                extract_product_json_from_image,
                image_bytes=self.image_bytes,
                mime_type=self.mime_type,
            )
            product = self._from_extracted(extracted)
        except Exception as e:
            logger.warning("Vision extraction failed for %s: %s", self.filename, e)
            return self.placeholder()

        if product is None:
            logger.info("Vision model gave no product name for %s", self.filename)
            return self.placeholder()
        return product


class BarcodeLookupSource(ProductInputSource):
    """
    Barcode -> ProductInput
    Looks the code up on Open Food Facts when enabled; falls back to a
    placeholder record on a miss or a transport error.
    """

    input_method = InputMethod.BARCODE

    def __init__(self, barcode: str, client: httpx.AsyncClient | None = None):
        self.barcode = (barcode or "").strip()
        self.client = client

    def placeholder(self) -> ProductInput:
        return ProductInput(
            name=f"Product for barcode {self.barcode}",
            description="Product information retrieved from barcode database",
            origin="China",
            barcode=self.barcode,
            brand="Sample Brand",
            input_method=self.input_method,
        )

    async def _fetch(self, client: httpx.AsyncClient) -> dict | None:
        url = f"{settings.OFF_BASE_URL.rstrip('/')}/{self.barcode}.json"
        resp = await client.get(url, timeout=settings.HTTP_TIMEOUT_SECONDS)
        if resp.status_code != 200:
            logger.info("Barcode %s lookup returned %s", self.barcode, resp.status_code)
            return None
        data = resp.json()
        if data.get("status") != 1:
            return None
        return data.get("product") or None

    def _from_off(self, p: dict) -> ProductInput | None:
        name = (
            p.get("product_name")
            or p.get("product_name_en")
            or p.get("generic_name")
            or p.get("brands")
            or ""
        ).strip()
        if not name:
            return None

        origin = None
        for key in ("manufacturing_places", "origins"):
            raw = p.get(key) or ""
            first = raw.split(",")[0].strip()
            if first:
                origin = first
                break

        return ProductInput(
            name=name,
            description=p.get("categories") or "",
            origin=origin,
            barcode=self.barcode,
            brand=(p.get("brands") or "").split(",")[0].strip() or None,
            input_method=self.input_method,
        )

    async def load(self) -> ProductInput:
        if not self.barcode:
            raise InvalidProductInput("Please enter a barcode number")

        if not settings.BARCODE_LOOKUP_ENABLED:
            return self.placeholder()

        try:
            if self.client is not None:
                off_product = await self._fetch(self.client)
            else:
                async with httpx.AsyncClient() as client:
                    off_product = await self._fetch(client)
            product = self._from_off(off_product) if off_product else None
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning("Barcode %s lookup failed: %s", self.barcode, e)
            return self.placeholder()

        return product or self.placeholder()
