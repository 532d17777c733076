# wardrobe_project/services/media_service.py
import io
import uuid
import base64
import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError
from fastapi import HTTPException, status

from config.settings import settings

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE_BYTES = settings.MAX_REQUEST_BODY_MB * 1024 * 1024
SUPPORTED_FORMATS = ["JPEG", "PNG", "WEBP"]
MAX_IMAGE_SIDE = 1024


def _normalise_image(image_bytes: bytes) -> bytes:
    """Decodes an image, scales it down to MAX_IMAGE_SIDE and re-encodes it as JPEG."""
    with Image.open(io.BytesIO(image_bytes)) as img:
        img = img.convert("RGB")
        img.thumbnail((MAX_IMAGE_SIDE, MAX_IMAGE_SIDE))
        out = io.BytesIO()
        img.save(out, format="JPEG", quality=90)
        return out.getvalue()


async def save_image(image_bytes: bytes, subdir: str) -> str:
    """Validates and stores an uploaded image under MEDIA_DIR. Returns the stored path."""
    if len(image_bytes) > MAX_IMAGE_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image is too large (max {settings.MAX_REQUEST_BODY_MB}MB)."
        )
    try:
        normalised = await asyncio.to_thread(_normalise_image, image_bytes)
    except (UnidentifiedImageError, OSError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is not a valid image.")

    target_dir = Path(settings.MEDIA_DIR) / subdir
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f"{uuid.uuid4().hex}.jpg"
    await asyncio.to_thread(target.write_bytes, normalised)
    logger.info(f"Stored image {target} ({len(normalised)} bytes)")
    return str(target)


async def load_image_base64(uri: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """
    Returns the base64 payload (no data URI prefix) of an image referenced by
    a data URI, an http(s) URL or a local file path. Local and remote images are
    normalised to JPEG first.
    """
    if uri.startswith("data:"):
        _, _, payload = uri.partition(",")
        if not payload:
            raise ValueError("Empty data URI.")
        return payload

    if uri.startswith(("http://", "https://")):
        if client is None:
            async with httpx.AsyncClient(timeout=10.0) as own_client:
                response = await own_client.get(uri)
        else:
            response = await client.get(uri)
        response.raise_for_status()
        raw = response.content
    else:
        path = Path(uri.removeprefix("file://"))
        if not path.is_file():
            raise FileNotFoundError(f"Image file not found: {uri}")
        raw = await asyncio.to_thread(path.read_bytes)

    normalised = await asyncio.to_thread(_normalise_image, raw)
    return base64.b64encode(normalised).decode("ascii")


async def save_data_uri(data_uri: str, subdir: str) -> str:
    """Stores a base64 data URI image (e.g. a generated try-on picture) under MEDIA_DIR."""
    _, _, payload = data_uri.partition(",")
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image data is not valid base64.")
    return await save_image(image_bytes, subdir)
