"""
Centralized settings for the MarketSage API.

This file reads environment variables (optionally from a .env file)
and provides sane defaults so the app can boot locally.
"""

import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from the .env file NEXT TO THIS FILE
ENV_PATH = Path(__file__).resolve().parent / ".env"
load_dotenv(ENV_PATH)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    return default if raw is None else raw


def _get_optional_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip()


# ---------------------------
# AI Settings
# ---------------------------
AI_API_KEY: str = _get_str("AI_API_KEY", "")
AI_BASE_URL: Optional[str] = _get_optional_str("AI_BASE_URL")
AI_MODEL: str = _get_str("AI_MODEL", "gpt-4o-mini")
AI_TEMPERATURE: float = _get_float("AI_TEMPERATURE", 0.2)

# ---------------------------
# Placeholder chart images
# ---------------------------
PLACEHOLDER_CHART_URL: str = _get_str("PLACEHOLDER_CHART_URL", "https://placehold.co/800x400.png")

# 0 (the default) means requests waits indefinitely
IMAGE_FETCH_TIMEOUT_SECONDS: float = _get_float("IMAGE_FETCH_TIMEOUT_SECONDS", 0.0)

# ---------------------------
# HTTP / Logging
# ---------------------------
CORS_ORIGIN_REGEX: str = _get_str("CORS_ORIGIN_REGEX", r"https?://(localhost|127\.0\.0\.1)(:\d+)?")
LOG_LEVEL: str = _get_str("LOG_LEVEL", "INFO").upper()
