# wardrobe_project/services/image_ai_service.py
# Virtual try-on image composition backed by the OpenAI Responses API
# with its image_generation tool.

import time
import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict

from openai import AsyncOpenAI

from config.settings import settings
from ..models.tryon_models import (
    ClothingImageInput, CompositionOptions, AIGenerationResult, GenerationMetadata,
    ClothingPosition, ClothingPositionsResponse,
)

logger = logging.getLogger(__name__)

# Where on the body each garment category goes, as described to the model
BODY_PLACEMENT = {
    "Top": "the upper body",
    "Shirt": "the upper body",
    "T-shirt": "the upper body",
    "Outerwear": "the outer layer of the upper body",
    "Bottom": "the lower body",
    "Pants": "the lower body",
    "Skirt": "the lower body",
    "Shoes": "the feet",
    "Accessory": "the matching body part",
    "Bag": "the matching body part",
    "Hat": "the head",
    "Underwear": "the inner layer",
}

CLOTHING_POSITIONS: Dict[str, ClothingPosition] = {
    "upper_body": ClothingPosition(name="Upper body", categories=["Top", "Shirt", "T-shirt"]),
    "upper_body_outer": ClothingPosition(name="Upper body, outer layer", categories=["Outerwear", "Jacket", "Suit"]),
    "lower_body": ClothingPosition(name="Lower body", categories=["Bottom", "Pants", "Skirt"]),
    "feet": ClothingPosition(name="Feet", categories=["Shoes", "Boots", "Sandals"]),
    "head": ClothingPosition(name="Head", categories=["Hat", "Headwear"]),
    "accessories": ClothingPosition(name="Accessories", categories=["Accessory", "Bag", "Jewelry"]),
    "underwear": ClothingPosition(name="Inner layer", categories=["Underwear", "Base layer"]),
}
SUPPORTED_FORMATS = ["jpg", "jpeg", "png", "webp"]


def body_placement(category: Optional[str]) -> str:
    return BODY_PLACEMENT.get(category or "", "the body")

def clothing_positions() -> ClothingPositionsResponse:
    return ClothingPositionsResponse(
        positions=CLOTHING_POSITIONS,
        supported_formats=SUPPORTED_FORMATS,
        recommended_size={"width": settings.TRYON_DEFAULT_WIDTH, "height": settings.TRYON_DEFAULT_HEIGHT},
    )

def build_analysis_prompt(clothing_images: List[ClothingImageInput], base_prompt: str) -> str:
    clothing_descriptions = ", ".join(
        f"{item.name} ({item.category}, worn on {body_placement(item.category)})" for item in clothing_images
    )
    lines = [
        "Carefully analyse these images:",
        "1. The first image is a photo of the user. Note their body shape, pose, current clothing and background.",
        f"2. The following images are clothing items: {clothing_descriptions}",
        "",
        "Generate a realistic virtual try-on image of the user wearing these items:",
        "- Keep the user's face, body shape, pose and background unchanged.",
        "- Reproduce each garment's color, material and cut faithfully.",
        "- Dress the user naturally with sensible layering.",
    ]
    if base_prompt:
        lines += ["", f"Additional requirements: {base_prompt}"]
    return "\n".join(lines)


def _metadata(clothing_count: int, prompt: str, options: CompositionOptions, started: float) -> GenerationMetadata:
    return GenerationMetadata(
        base_image="base64",
        clothing_count=clothing_count,
        prompt=prompt,
        model=options.model,
        mode=options.mode,
        timestamp=datetime.now(timezone.utc).isoformat(),
        processing_time=f"{time.monotonic() - started:.2f}s",
        fallback=False,
    )


async def compose_try_on_image(
    base_image_base64: str,
    clothing_images: List[ClothingImageInput],
    prompt: str,
    options: Optional[CompositionOptions] = None,
    client: Optional[AsyncOpenAI] = None,
) -> AIGenerationResult:
    """
    Sends the user photo and garment images to the image model and returns the
    composed picture as a PNG data URI. Never raises; failures are reported
    through success=False and error.
    """
    options = options or CompositionOptions()
    started = time.monotonic()
    logger.info(
        f"Starting try-on composition: {len(clothing_images)} items "
        f"({', '.join(f'{c.name} ({c.category})' for c in clothing_images)}), model {options.model}"
    )

    try:
        if client is None:
            if not settings.OPENAI_API_KEY:
                raise RuntimeError("OPENAI_API_KEY is not configured.")
            client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)

        content = [
            {"type": "input_text", "text": build_analysis_prompt(clothing_images, prompt)},
            {"type": "input_image", "image_url": f"data:image/jpeg;base64,{base_image_base64}"},
        ]
        for clothing_image in clothing_images:
            if clothing_image.image_base64:
                content.append({
                    "type": "input_image",
                    "image_url": f"data:image/jpeg;base64,{clothing_image.image_base64}",
                })
            else:
                logger.warning(f"Clothing image '{clothing_image.name}' has no base64 data, skipping it.")

        response = await client.responses.create(
            model=options.model,
            input=[{"role": "user", "content": content}],
            tools=[{"type": "image_generation"}],
        )
        image_data = [output.result for output in response.output if output.type == "image_generation_call"]
        if not image_data or not image_data[0]:
            raise RuntimeError("The model did not return a generated image.")

        return AIGenerationResult(
            success=True,
            image_url=f"data:image/png;base64,{image_data[0]}",
            metadata=_metadata(len(clothing_images), prompt, options, started),
        )

    except Exception as e:
        logger.error(f"Try-on composition failed: {e}", exc_info=True)
        return AIGenerationResult(
            success=False,
            error=str(e) or "Image generation failed.",
            metadata=_metadata(len(clothing_images), prompt, options, started),
        )
