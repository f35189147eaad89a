"""Application-level constants for linkedool.

This module keeps only cross-cutting identity, default and wire constants.
"""

# ============================================================================
# Application identity
# ============================================================================

APP_NAME = "linkedool"
SERVICE_NAME = f"{APP_NAME}-server"

LOG_FILE_EXTENSION = ".log"
DATETIME_FORMAT_FILENAME = "%Y-%m-%d_%H-%M-%S"

# ============================================================================
# Provider defaults
# ============================================================================

PROVIDER_OLLAMA = "ollama"
PROVIDER_OPENAI = "openai"

DEFAULT_PROVIDER = PROVIDER_OLLAMA
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"

DEFAULT_MODELS = {
    PROVIDER_OLLAMA: "llama3",
    PROVIDER_OPENAI: "gpt-4",
}

OPENAI_TEMPERATURE = 0.7

# ============================================================================
# Prompt
# ============================================================================

MAX_PROMPT_PROFILE_CHARS = 6000
TRUNCATION_MARKER = "\n... [truncated]\n"

# ============================================================================
# Streaming wire format
# ============================================================================

SSE_DATA_PREFIX = "data: "
SSE_DONE_SENTINEL = "[DONE]"

# ============================================================================
# HTTP server
# ============================================================================

DEFAULT_PORT = 3000
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
