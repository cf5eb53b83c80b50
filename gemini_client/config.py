"""
Configuration for the Gemini completion client.

Values come from environment variables; a local `.env` file is honoured.
The API key itself is read at call time by `resolve_api_key`.
"""

import os

from dotenv import load_dotenv

load_dotenv()

API_KEY_ENV = 'API_KEY'
DEFAULT_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')
GEMINI_TIMEOUT_MS = int(os.getenv('GEMINI_TIMEOUT_MS', '60000'))


class ConfigurationError(RuntimeError):
    """Raised when a required setting (the API key) is missing."""


def resolve_api_key() -> str:
    """
    Read the Gemini API key from the environment.

    Returns:
        The API key with surrounding whitespace removed

    Raises:
        ConfigurationError: if the key is unset or blank
    """
    api_key = os.getenv(API_KEY_ENV, '').strip()
    if not api_key:
        raise ConfigurationError(f"{API_KEY_ENV} environment variable not set")
    return api_key
