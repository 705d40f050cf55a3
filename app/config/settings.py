from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # App Info
    app_name: str = "Fichas API"
    version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str
    auto_create_tables: bool = True

    # Security
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 horas

    # CORS
    allowed_origins: List[str] = ["*"]

    # External Services
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "fichas"
    signed_url_ttl_seconds: int = Field(
        default=3600,
        description="Vigencia de las URLs firmadas de fotos"
    )

    # File Upload
    max_image_size: int = 10 * 1024 * 1024  # 10MB
    allowed_image_formats: set = {"image/jpeg", "image/png", "image/webp", "image/jpg"}

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
