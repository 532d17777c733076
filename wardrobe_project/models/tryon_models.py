# wardrobe_project/models/tryon_models.py
# Wire models of the image proxy endpoints. Field aliases keep the camelCase
# JSON that mobile clients already send.

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Dict, Any, Literal


class ClothingImageInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_uri: Optional[str] = Field(None, alias="imageUri")
    category: Optional[str] = None
    position: Optional[str] = None
    name: str = ""
    image_base64: Optional[str] = Field(None, alias="imageBase64")

class CompositionSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    preserve_base_structure: bool = Field(True, alias="preserveBaseStructure")
    blend_mode: str = Field("natural", alias="blendMode")
    lighting_adjustment: bool = Field(True, alias="lightingAdjustment")

class ComposeImageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    base_image: Optional[str] = Field(None, alias="baseImage", description="Base64 encoded user photo.")
    clothing_images: Optional[List[ClothingImageInput]] = Field(None, alias="clothingImages")
    prompt: Optional[str] = None
    model: Optional[str] = None
    mode: Optional[str] = None
    width: Optional[int] = Field(None, gt=0, le=2048)
    height: Optional[int] = Field(None, gt=0, le=2048)
    sample_strength: Optional[float] = Field(None, gt=0, le=1)
    composition_settings: Optional[CompositionSettings] = Field(None, alias="compositionSettings")

class CompositionOptions(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model: str = "gpt-4o"
    mode: str = "image_composition"
    width: int = 512
    height: int = 768
    sample_strength: float = 0.8
    composition_settings: CompositionSettings = Field(default_factory=CompositionSettings)

class GenerationMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    base_image: str = Field("base64", alias="baseImage")
    clothing_count: int = Field(0, alias="clothingCount")
    prompt: str = ""
    model: str = ""
    mode: str = ""
    timestamp: str = ""
    processing_time: str = Field("N/A", alias="processingTime")
    fallback: bool = False

class AIGenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    image_url: Optional[str] = Field(None, alias="imageUrl")
    error: Optional[str] = None
    metadata: Optional[GenerationMetadata] = None

# --- Clothing analysis ---
class TemperatureRange(BaseModel):
    min: float = 0
    max: float = 30

class ClothingTags(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    colors: List[str] = Field(default_factory=list)
    materials: List[str] = Field(default_factory=list)
    patterns: List[str] = Field(default_factory=list)
    temperature_range: TemperatureRange = Field(default_factory=TemperatureRange, alias="temperatureRange")
    weather_conditions: List[str] = Field(default_factory=lambda: ["Sunny"], alias="weatherConditions")
    seasons: List[str] = Field(default_factory=lambda: ["All"])
    styles: List[str] = Field(default_factory=lambda: ["Casual"])
    occasions: List[str] = Field(default_factory=lambda: ["Daily"])
    formality_level: int = Field(2, ge=1, le=5, alias="formalityLevel")
    gender: Literal["male", "female", "unisex"] = "unisex"
    age_groups: List[str] = Field(default_factory=lambda: ["Young adult"], alias="ageGroups")
    body_types: List[str] = Field(default_factory=lambda: ["Standard"], alias="bodyTypes")
    matching_colors: List[str] = Field(default_factory=list, alias="matchingColors")
    avoid_colors: List[str] = Field(default_factory=list, alias="avoidColors")
    confidence: float = Field(0.8, ge=0, le=1)
    ai_analyzed: bool = Field(True, alias="aiAnalyzed")
    analyzed_at: Optional[str] = Field(None, alias="analyzedAt")

class ClothingAnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_base64: Optional[str] = Field(None, alias="imageBase64")
    category: Optional[str] = None
    name: Optional[str] = None

class ClothingAnalysisResult(BaseModel):
    success: bool
    analysis: Optional[ClothingTags] = None
    error: Optional[str] = None

# --- Static info endpoints ---
class ClothingPosition(BaseModel):
    name: str
    categories: List[str]

class ClothingPositionsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    positions: Dict[str, ClothingPosition]
    supported_formats: List[str] = Field(..., alias="supportedFormats")
    recommended_size: Dict[str, int] = Field(..., alias="recommendedSize")

class HealthCheckResponse(BaseModel):
    status: str
    timestamp: str
    services: Dict[str, Any]

class ConnectionStatus(BaseModel):
    connected: bool
    message: str
    mode: Literal["remote", "in_process"] = "in_process"
