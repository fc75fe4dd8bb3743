"""VisionChat — environment configuration."""

import os

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_API_URL = os.getenv("GROQ_API_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
GROQ_TIMEOUT = float(os.getenv("GROQ_TIMEOUT", "30"))

PORT = int(os.getenv("PORT", "5001"))
APP_ENV = os.getenv("APP_ENV", "development")

# 10 MB
MAX_BODY_BYTES = 10 * 1024 * 1024

VISIONCHAT_API_URL = os.getenv("VISIONCHAT_API_URL", "http://localhost:5001")

DEV_ORIGINS = ["http://localhost:5173"]  # Vite dev server
PROD_ORIGIN_REGEX = r"https?://.*\.vercel\.app"


def cors_options(app_env: str = APP_ENV) -> dict:
    """CORS middleware kwargs for the given environment.

    Production accepts any Vercel deployment, everything else only the local
    dev server.
    """
    if app_env == "production":
        return {"allow_origins": [], "allow_origin_regex": PROD_ORIGIN_REGEX}
    return {"allow_origins": DEV_ORIGINS}
