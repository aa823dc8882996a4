import os
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = "Upload Store API"

    # Shared secret expected in the x-api-key header; empty rejects every request
    API_KEY: str = os.getenv("API_KEY", "")

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    RELOAD: bool = False
    LOG_LEVEL: str = "INFO"

    # Storage settings
    UPLOAD_DIR: Path = Path("public/uploads")

    # Comma-separated list of allowed origins, "*" for any
    CORS_ORIGINS: str = "*"

    # Create the upload root if it doesn't exist
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.UPLOAD_DIR.mkdir(exist_ok=True, parents=True)

    @property
    def cors_origins_list(self) -> List[str]:
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

# Global settings instance
settings = Settings()
