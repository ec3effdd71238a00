"""Environment-driven settings for the canvas client and AI flows."""

import os

from dotenv import load_dotenv

# load environment variables from .env file
load_dotenv()

API_BASE_URL = os.getenv("FICX_API_BASE_URL", "http://127.0.0.1:8000/api")
API_TIMEOUT = float(os.getenv("FICX_API_TIMEOUT", "10"))

# seconds subtracted from a token's exp claim to absorb network delay
TOKEN_EXPIRY_BUFFER = 30


def get_ai_config() -> dict:
    """AI generation settings (provider, model, temperature, api key)."""
    return {
        "provider": os.getenv("FICX_AI_PROVIDER", "openai"),
        "model": os.getenv("FICX_AI_MODEL", "gpt-4o-mini"),
        "temperature": float(os.getenv("FICX_AI_TEMPERATURE", "0.2")),
        "api_key": os.getenv("OPENAI_API_KEY"),
    }
