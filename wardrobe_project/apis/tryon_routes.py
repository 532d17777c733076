# wardrobe_project/apis/tryon_routes.py
# Image proxy endpoints, mounted at the application root so that existing
# try-on clients keep working against /api/... and /health.
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from config.settings import settings
from ..models.tryon_models import (
    ComposeImageRequest, CompositionOptions, CompositionSettings, AIGenerationResult,
    ClothingAnalysisRequest, ClothingAnalysisResult, ClothingPositionsResponse, HealthCheckResponse,
)
from ..services import image_ai_service, clothing_analysis_service

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Virtual Try-On"]
)


def _error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})

def validate_compose_request(request: ComposeImageRequest) -> Optional[str]:
    """Returns the first validation error of a compose request, or None when it is complete."""
    if not request.base_image:
        return "Missing user photo (baseImage)."
    if not request.clothing_images:
        return "Missing clothing images (clothingImages)."
    if not request.prompt:
        return "Missing composition prompt (prompt)."
    for index, item in enumerate(request.clothing_images, start=1):
        if not item.image_uri or not item.category or not item.position:
            return f"Clothing image {index} is missing required fields (imageUri, category, position)."
    return None


@router.post("/api/compose-image", response_model=AIGenerationResult)
async def compose_image(request: ComposeImageRequest):
    """Compose the user photo with the clothing images into a single try-on picture."""
    error = validate_compose_request(request)
    if error:
        return _error(error)

    logger.info(
        f"Processing image composition request: {len(request.clothing_images)} clothing items, "
        f"settings {request.composition_settings}"
    )
    options = CompositionOptions(
        model=request.model or settings.OPENAI_TRYON_MODEL,
        mode=request.mode or "image_composition",
        width=request.width or settings.TRYON_DEFAULT_WIDTH,
        height=request.height or settings.TRYON_DEFAULT_HEIGHT,
        sample_strength=request.sample_strength or settings.TRYON_DEFAULT_SAMPLE_STRENGTH,
        composition_settings=request.composition_settings or CompositionSettings(),
    )
    base_image = request.base_image
    if base_image.startswith("data:"):
        base_image = base_image.partition(",")[2]
    return await image_ai_service.compose_try_on_image(base_image, request.clothing_images, request.prompt, options)

@router.post("/api/analyze-clothing", response_model=ClothingAnalysisResult)
async def analyze_clothing(request: ClothingAnalysisRequest):
    """Tag a clothing photo with colors, materials, seasons, styles and more."""
    if not request.image_base64:
        return _error("Missing clothing image (imageBase64).")
    result = await clothing_analysis_service.analyze_clothing_image(
        request.image_base64, category=request.category, name=request.name
    )
    if not result.success:
        return _error(result.error or "Analysis failed.", status.HTTP_500_INTERNAL_SERVER_ERROR)
    return result

@router.get("/api/clothing-positions", response_model=ClothingPositionsResponse)
async def get_clothing_positions():
    return image_ai_service.clothing_positions()

@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    return HealthCheckResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        services={
            "image-composition": "available" if settings.OPENAI_API_KEY else "placeholder-only",
            "clothing-analysis": "available" if settings.GOOGLE_GEMINI_API_KEY else "unavailable",
            "weather": "openweathermap" if settings.OPENWEATHER_API_KEY else "estimated",
        },
    )
