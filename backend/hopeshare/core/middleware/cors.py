"""CORS configuration built from settings."""

from hopeshare.core.config import settings


def get_cors_config() -> dict:
    """Return CORS middleware kwargs for FastAPI."""
    return {
        "allow_origins": settings.allowed_origins_list,
        "allow_credentials": False,
        "allow_methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        "allow_headers": [
            "Content-Type",
            "X-Request-Id",
            "X-Signature",
        ],
        "expose_headers": ["X-Request-Id"],
    }
