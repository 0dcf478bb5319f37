from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # App Info
    app_name: str = "POS Stock API"
    version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = Field(
        default="sqlite:///./pos.db",
        description="URL SQLAlchemy (postgresql+psycopg2://... en producción)"
    )
    auto_create_tables: bool = Field(
        default=True,
        description="Crear tablas al iniciar si no existen"
    )

    # CORS
    allowed_origins: List[str] = Field(
        default=["http://localhost:5173"],  # Frontend Vite local
        description="Orígenes permitidos para CORS"
    )

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 5001

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
