# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _split_origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Voice Assistant Portal API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = _split_origins(
        os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
    )

    # Identity tokens (7 days by default)
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))

    # Vapi.ai API Settings (assistant provider)
    vapi_api_key: str | None = os.getenv("VAPI_API_KEY")
    vapi_api_base: str = os.getenv("VAPI_API_BASE", "https://api.vapi.ai")
    vapi_timeout_seconds: float = float(os.getenv("VAPI_TIMEOUT_SECONDS", "15"))

settings = Settings()  # Instantiate configuration
