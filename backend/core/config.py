"""
Configuration management for Coursedesk backend.
Loads configuration from environment variables and .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env file in the backend directory or project root
BACKEND_DIR = Path(__file__).parent.parent
PROJECT_ROOT = BACKEND_DIR.parent
ENV_FILE = PROJECT_ROOT / ".env"

# Load .env file if it exists
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)
else:
    # Also try loading from backend directory
    backend_env = BACKEND_DIR / ".env"
    if backend_env.exists():
        load_dotenv(backend_env)

# Generation backend (curriculum, detailed content, quiz, save)
BACKEND_API_URL = os.getenv("BACKEND_API_URL", "http://localhost:3000/api")
BACKEND_API_TOKEN = os.getenv("BACKEND_API_TOKEN", None)
BACKEND_TIMEOUT_SECONDS = float(os.getenv("BACKEND_TIMEOUT_SECONDS", "300"))  # generation calls are slow
CHECK_BACKEND_ON_STARTUP = os.getenv("CHECK_BACKEND_ON_STARTUP", "false").lower() == "true"

# AI provider used for quiz generation
DEFAULT_QUIZ_PROVIDER = os.getenv("DEFAULT_QUIZ_PROVIDER", "gemini")

# Editor settings
NOTIFICATION_HISTORY_LIMIT = int(os.getenv("NOTIFICATION_HISTORY_LIMIT", "200"))
AUTOSAVE_DEBOUNCE_SECONDS = float(os.getenv("AUTOSAVE_DEBOUNCE_SECONDS", "2.0"))
FLASHCARD_ANSWER_PREVIEW_CHARS = int(os.getenv("FLASHCARD_ANSWER_PREVIEW_CHARS", "200"))

# Course defaults
DEFAULT_ACADEMIC_LEVEL = os.getenv("DEFAULT_ACADEMIC_LEVEL", "undergraduate")
DEFAULT_SUBJECT = os.getenv("DEFAULT_SUBJECT", "General Studies")

# Placeholder texts shown until AI generation fills a subsection
PAGE_CONTENT_PLACEHOLDER = "Content will be available after generation"
EMPTY_PAGE_CONTENT = (
    "Content will be generated for this academic topic. Click 'Generate Enhanced "
    "Academic Content' to create detailed multipage content."
)
EMPTY_PAGE_TAKEAWAY = "This section will contain key learning objectives and important concepts."
EMPTY_SUBSECTION_SUMMARY = (
    "Generate detailed content to see multipage academic content with comprehensive "
    "explanations and examples"
)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# API configuration
API_V1_PREFIX = "/api/v1"
# CORS origins can be comma-separated list in env var
CORS_ORIGINS_STR = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
CORS_ORIGINS = [origin.strip() for origin in CORS_ORIGINS_STR.split(",")]
