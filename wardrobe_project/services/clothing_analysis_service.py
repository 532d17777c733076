# wardrobe_project/services/clothing_analysis_service.py
import io
import re
import json
import base64
import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional

import google.generativeai as genai
from PIL import Image

from config.settings import settings
from ..models.tryon_models import ClothingTags, ClothingAnalysisResult, TemperatureRange

logger = logging.getLogger(__name__)

_JSON_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_GENDERS = ("male", "female", "unisex")

ANALYSIS_PROMPT = """
Analyze this clothing item in detail and return the result as a JSON object with this shape:

{{
  "colors": ["main color 1", "main color 2"],
  "materials": ["material 1", "material 2"],
  "patterns": ["pattern or cut 1", "pattern or cut 2"],
  "temperatureRange": {{"min": lowest suitable temperature in Celsius, "max": highest suitable temperature in Celsius}},
  "weatherConditions": ["Sunny", "Cloudy", "Rainy", ...],
  "seasons": ["Spring", "Summer", "Autumn", "Winter"],
  "styles": ["Casual", "Formal", "Sporty", "Business", "Street", "Vintage", ...],
  "occasions": ["Daily", "Work", "Party", "Sport", "Date", "Formal event", ...],
  "formalityLevel": a number from 1 (most casual) to 5 (most formal),
  "gender": "male" or "female" or "unisex",
  "ageGroups": ["Teen", "Young adult", "Middle-aged", "Senior"],
  "bodyTypes": ["Slim", "Standard", "Curvy", "Athletic", ...],
  "matchingColors": ["color that pairs well 1", "color that pairs well 2"],
  "avoidColors": ["color to avoid 1", "color to avoid 2"],
  "confidence": a number from 0 to 1 (how sure you are)
}}

Requirements:
1. Look closely at the color, material and cut.
2. Infer the suitable temperature range from the garment type.
3. Consider its formality and suitable occasions.
4. Describe who it suits.
5. Recommend colors to pair with and to avoid.
6. Give a confidence score for the analysis.

Category: {category}
Name: {name}

Your entire response must be ONLY the JSON object.
"""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def _list_or(value: Any, default: list) -> list:
    return value if isinstance(value, list) else default

def extract_json(text: str) -> Dict[str, Any]:
    """Parses the model reply, which may wrap the JSON in a ``` code block."""
    match = _JSON_BLOCK.search(text)
    json_str = match.group(1) if match else text
    data = json.loads(json_str.strip())
    if not isinstance(data, dict):
        raise ValueError("Analysis result is not a JSON object.")
    return data

def validate_and_clean(data: Dict[str, Any]) -> ClothingTags:
    """Coerces raw model output into ClothingTags, replacing anything malformed with defaults."""
    temp_range = data.get("temperatureRange") if isinstance(data.get("temperatureRange"), dict) else {}
    formality = data.get("formalityLevel")
    confidence = data.get("confidence")

    return ClothingTags(
        colors=_list_or(data.get("colors"), []),
        materials=_list_or(data.get("materials"), []),
        patterns=_list_or(data.get("patterns"), []),
        temperature_range=TemperatureRange(
            min=temp_range.get("min") if _is_number(temp_range.get("min")) else 0,
            max=temp_range.get("max") if _is_number(temp_range.get("max")) else 30,
        ),
        weather_conditions=_list_or(data.get("weatherConditions"), ["Sunny"]),
        seasons=_list_or(data.get("seasons"), ["All"]),
        styles=_list_or(data.get("styles"), ["Casual"]),
        occasions=_list_or(data.get("occasions"), ["Daily"]),
        formality_level=round(max(1, min(5, formality))) if _is_number(formality) else 2,
        gender=data.get("gender") if data.get("gender") in _GENDERS else "unisex",
        age_groups=_list_or(data.get("ageGroups"), ["Young adult"]),
        body_types=_list_or(data.get("bodyTypes"), ["Standard"]),
        matching_colors=_list_or(data.get("matchingColors"), []),
        avoid_colors=_list_or(data.get("avoidColors"), []),
        confidence=max(0.0, min(1.0, confidence)) if _is_number(confidence) else 0.8,
    )

def default_tags() -> ClothingTags:
    """Tags used when the image could not be analysed."""
    return ClothingTags(
        ai_analyzed=False,
        confidence=0.5,
        analyzed_at=datetime.now(timezone.utc).isoformat(),
    )


async def analyze_clothing_image(
    image_base64: str, category: Optional[str] = None, name: Optional[str] = None
) -> ClothingAnalysisResult:
    """Asks Gemini Vision for structured clothing tags. Never raises; failures come back as success=False."""
    if not settings.GOOGLE_GEMINI_API_KEY:
        return ClothingAnalysisResult(success=False, error="GOOGLE_GEMINI_API_KEY is not configured.")

    try:
        if image_base64.startswith("data:"):
            image_base64 = image_base64.partition(",")[2]
        image = Image.open(io.BytesIO(base64.b64decode(image_base64)))
        prompt_text = ANALYSIS_PROMPT.format(category=category or "not specified", name=name or "not specified")

        genai.configure(api_key=settings.GOOGLE_GEMINI_API_KEY)
        model = genai.GenerativeModel(settings.GEMINI_MODEL)
        response = await asyncio.to_thread(
            model.generate_content,
            [prompt_text, image],
            generation_config={"temperature": 0.1},
        )
        logger.debug(f"Raw clothing analysis: {response.text}")

        tags = validate_and_clean(extract_json(response.text))
        tags.analyzed_at = datetime.now(timezone.utc).isoformat()
        return ClothingAnalysisResult(success=True, analysis=tags)

    except Exception as e:
        logger.error(f"Clothing analysis failed: {e}", exc_info=True)
        return ClothingAnalysisResult(success=False, error=str(e) or "Analysis failed.")
