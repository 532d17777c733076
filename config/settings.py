# config/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "SmartWardrobe"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Async SQLite by default; any SQLAlchemy async URL works
    DATABASE_URL: str = "sqlite+aiosqlite:///./wardrobe.db"

    # Uploaded clothing and profile photos
    MEDIA_DIR: str = "./media"
    MAX_REQUEST_BODY_MB: int = 10

    # OpenAI is used for virtual try-on image composition
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_TRYON_MODEL: str = "gpt-4o"

    # Google Gemini is used for clothing image analysis
    GOOGLE_GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"

    OPENWEATHER_API_KEY: Optional[str] = None
    OPENWEATHER_URL: str = "https://api.openweathermap.org/data/2.5/weather"

    # Leave unset to compose in-process; set to e.g. http://10.0.2.2:3001 to use a remote server
    TRYON_SERVER_URL: Optional[str] = None
    TRYON_HEALTH_TIMEOUT_SECONDS: float = 5.0
    TRYON_COMPOSE_TIMEOUT_SECONDS: float = 30.0
    TRYON_DEFAULT_WIDTH: int = 512
    TRYON_DEFAULT_HEIGHT: int = 768
    TRYON_DEFAULT_SAMPLE_STRENGTH: float = 0.8
    PLACEHOLDER_IMAGE_URL: str = "https://picsum.photos/{width}/{height}?random={seed}"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra='ignore')

settings = Settings()

if __name__ == "__main__":
    print(f"Project Name: {settings.PROJECT_NAME}")
    print(f"OpenAI API Key Loaded: {'Yes' if settings.OPENAI_API_KEY else 'No'}")
    print(f"Google Gemini API Key Loaded: {'Yes' if settings.GOOGLE_GEMINI_API_KEY else 'No'}")
    print(f"Database URL: {settings.DATABASE_URL}")
