# wardrobe_project/services/tryon_service.py
"""
Virtual try-on for stored outfits.

Composition runs on a remote try-on server when TRYON_SERVER_URL is set and
in-process otherwise. Whatever goes wrong during composition, the caller still
gets an image: a placeholder picture flagged with fallback=True.
"""
import time
import uuid
import asyncio
import logging
from typing import List, Optional, Sequence, Any, Tuple

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from ..models.outfit_models import TryOnResult
from ..models.tryon_models import (
    ClothingImageInput, ComposeImageRequest, CompositionOptions, CompositionSettings, ConnectionStatus,
)
from . import user_service, outfit_service, media_service, image_ai_service

logger = logging.getLogger(__name__)

CATEGORY_POSITIONS = {
    "Top": "upper_body",
    "Shirt": "upper_body",
    "T-shirt": "upper_body",
    "Outerwear": "upper_body_outer",
    "Bottom": "lower_body",
    "Pants": "lower_body",
    "Skirt": "lower_body",
    "Shoes": "feet",
    "Accessory": "accessories",
    "Bag": "accessories",
    "Hat": "head",
    "Underwear": "underwear",
}

POSITION_DESCRIPTIONS = {
    "upper_body": "upper body",
    "upper_body_outer": "outer layer of the upper body",
    "lower_body": "lower body",
    "feet": "feet",
    "head": "head",
    "accessories": "matching spot",
    "underwear": "inner layer",
    "body": "body",
}

TOP_CATEGORIES = {"Top", "Shirt", "T-shirt"}
BOTTOM_CATEGORIES = {"Bottom", "Pants", "Skirt"}
SHOE_CATEGORIES = {"Shoes"}


class CompositionError(Exception):
    pass


def category_position(category: Optional[str]) -> str:
    return CATEGORY_POSITIONS.get(category or "", "body")

def _display_category(item: Any) -> str:
    return getattr(item, "category_name", None) or item.category or "Other"

def validate_outfit(items: Sequence[Any]) -> Tuple[bool, Optional[str]]:
    """Checks that an outfit can be tried on. Returns (valid, message)."""
    if not items:
        return False, "The outfit is empty."

    missing_images = [item.name for item in items if not item.image_uri]
    if missing_images:
        return False, f"These items have no photo, so the try-on cannot be generated: {', '.join(missing_images)}"

    categories = {_display_category(item) for item in items}
    if not categories & (TOP_CATEGORIES | BOTTOM_CATEGORIES | SHOE_CATEGORIES):
        return False, "The outfit needs at least a top, a bottom or shoes."
    return True, None

def prepare_clothing_inputs(items: Sequence[Any]) -> List[ClothingImageInput]:
    inputs = []
    for item in items:
        category = _display_category(item)
        inputs.append(ClothingImageInput(
            image_uri=item.image_uri or "",
            category=category,
            position=category_position(category),
            name=item.name,
        ))
    return inputs

def build_composition_prompt(inputs: Sequence[ClothingImageInput], outfit_name: str) -> str:
    descriptions = ", ".join(
        f"put {i.name} ({i.category}) on the {POSITION_DESCRIPTIONS.get(i.position, 'body')}" for i in inputs
    )
    return (
        f"Dress the user precisely in the following items: {descriptions}.\n"
        "Keep the result natural: the clothes should fit the body, the lighting should be consistent "
        "and the whole look should be coherent.\n"
        f"Style: {outfit_name}, high quality composition, realistic result."
    )

def placeholder_image_url(seed: Optional[int] = None) -> str:
    return settings.PLACEHOLDER_IMAGE_URL.format(
        width=settings.TRYON_DEFAULT_WIDTH,
        height=settings.TRYON_DEFAULT_HEIGHT,
        seed=seed if seed is not None else int(time.time() * 1000),
    )


async def test_connection(client: Optional[httpx.AsyncClient] = None) -> ConnectionStatus:
    """Checks that the composition backend is reachable."""
    if not settings.TRYON_SERVER_URL:
        return ConnectionStatus(connected=True, message="Using the in-process compositor.", mode="in_process")

    url = settings.TRYON_SERVER_URL.rstrip("/") + "/health"
    try:
        if client is None:
            async with httpx.AsyncClient() as own_client:
                response = await own_client.get(url, timeout=settings.TRYON_HEALTH_TIMEOUT_SECONDS)
        else:
            response = await client.get(url, timeout=settings.TRYON_HEALTH_TIMEOUT_SECONDS)
    except httpx.TimeoutException:
        return ConnectionStatus(connected=False, message="Connection timed out, check the network or the server.", mode="remote")
    except httpx.RequestError as e:
        return ConnectionStatus(connected=False, message=f"Network request failed: {e}", mode="remote")

    if response.is_success:
        try:
            body = response.json()
        except ValueError:
            body = None
        timestamp = body.get("timestamp", "") if isinstance(body, dict) else ""
        return ConnectionStatus(connected=True, message=f"Server is up ({timestamp})", mode="remote")
    return ConnectionStatus(
        connected=False,
        message=f"Server responded with an error: {response.status_code} {response.reason_phrase}",
        mode="remote",
    )


async def request_composition(
    base_image_base64: str,
    inputs: List[ClothingImageInput],
    prompt: str,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Returns the composed image URL. Raises CompositionError or asyncio.TimeoutError on failure."""
    options = CompositionOptions(
        model=settings.OPENAI_TRYON_MODEL,
        width=settings.TRYON_DEFAULT_WIDTH,
        height=settings.TRYON_DEFAULT_HEIGHT,
        sample_strength=settings.TRYON_DEFAULT_SAMPLE_STRENGTH,
    )

    if settings.TRYON_SERVER_URL:
        connection = await test_connection(client)
        if not connection.connected:
            raise CompositionError(f"Cannot reach the try-on server: {connection.message}")

        payload = ComposeImageRequest(
            base_image=base_image_base64,
            clothing_images=inputs,
            prompt=prompt,
            model=options.model,
            mode=options.mode,
            width=options.width,
            height=options.height,
            sample_strength=options.sample_strength,
            composition_settings=CompositionSettings(),
        ).model_dump(by_alias=True, exclude_none=True)
        url = settings.TRYON_SERVER_URL.rstrip("/") + "/api/compose-image"
        try:
            if client is None:
                async with httpx.AsyncClient() as own_client:
                    response = await own_client.post(url, json=payload, timeout=settings.TRYON_COMPOSE_TIMEOUT_SECONDS)
            else:
                response = await client.post(url, json=payload, timeout=settings.TRYON_COMPOSE_TIMEOUT_SECONDS)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise CompositionError(f"Try-on server request failed: {e}") from e
        result = response.json()
        if result.get("success") and result.get("imageUrl"):
            return result["imageUrl"]
        raise CompositionError(result.get("error") or "Image composition failed.")

    result = await asyncio.wait_for(
        image_ai_service.compose_try_on_image(base_image_base64, inputs, prompt, options),
        timeout=settings.TRYON_COMPOSE_TIMEOUT_SECONDS,
    )
    if result.success and result.image_url:
        return result.image_url
    raise CompositionError(result.error or "Image composition failed.")


async def generate_try_on(
    db: AsyncSession,
    outfit_id: uuid.UUID,
    user_id: uuid.UUID,
    save: bool = False,
    client: Optional[httpx.AsyncClient] = None,
) -> TryOnResult:
    user = await user_service.get_user_or_404(db, user_id)
    db_outfit = await outfit_service.get_outfit_or_404(db, outfit_id)

    if not user.photo_uri or not user.photo_uri.strip():
        return TryOnResult(success=False, error="A user photo is required for virtual try-on.")

    items = await outfit_service.get_outfit_items(db, db_outfit)
    valid, message = validate_outfit(items)
    if not valid:
        return TryOnResult(success=False, error=message)

    inputs = prepare_clothing_inputs(items)
    prompt = build_composition_prompt(inputs, db_outfit.name)

    fallback = False
    try:
        base_image = await media_service.load_image_base64(user.photo_uri, client=client)
        for clothing_input in inputs:
            try:
                clothing_input.image_base64 = await media_service.load_image_base64(clothing_input.image_uri, client=client)
            except Exception as e:
                logger.warning(f"Could not load image of '{clothing_input.name}': {e}")
        image_url = await request_composition(base_image, inputs, prompt, client=client)
    except asyncio.TimeoutError:
        logger.warning(f"Try-on for outfit {outfit_id} timed out, using placeholder image.")
        image_url, fallback = placeholder_image_url(), True
    except Exception as e:
        logger.warning(f"Try-on for outfit {outfit_id} failed, using placeholder image: {e}", exc_info=True)
        image_url, fallback = placeholder_image_url(), True

    if save:
        stored_uri = image_url
        if image_url.startswith("data:"):
            stored_uri = await media_service.save_data_uri(image_url, "tryon")
        await outfit_service.set_outfit_image(db, outfit_id, stored_uri)

    return TryOnResult(success=True, image_url=image_url, fallback=fallback)
