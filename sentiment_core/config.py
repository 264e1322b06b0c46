"""
Client configuration.

Values come from explicit arguments first, then the environment (a .env
file in the working directory is loaded on import), then defaults.

    SENTIMENT_API_URL            Service base URL (default http://localhost:8000)
    SENTIMENT_DEFAULT_MODEL      rnn or lstm (default lstm)
    SENTIMENT_TIMEOUT            Request timeout in seconds (default: aiohttp's own)
    SENTIMENT_REPORT_REJECTIONS  1/true/yes to show service rejections as errors
    DEBUG_SENTIMENT              Any value turns on debug logging
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .core.transport import DEFAULT_API_URL
from .errors import ConfigError
from .models import ModelName


# Load environment variables from .env file
load_dotenv()

TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass
class Settings:
    api_url: str = DEFAULT_API_URL
    default_model: str = ModelName.DEFAULT
    timeout: Optional[float] = None
    report_rejections: bool = False
    debug: bool = False

    @classmethod
    def from_env(cls, api_url: str = None, default_model: str = None,
                 timeout: Optional[float] = None, report_rejections: Optional[bool] = None,
                 debug: Optional[bool] = None) -> 'Settings':
        """
        Build settings, letting explicit arguments override the environment.

        Raises:
            ConfigError: Unknown model name or a timeout that is not a
                positive number
        """
        env = os.environ

        model = default_model or env.get('SENTIMENT_DEFAULT_MODEL') or ModelName.DEFAULT
        try:
            model = ModelName.validate(model)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        if timeout is None and env.get('SENTIMENT_TIMEOUT'):
            try:
                timeout = float(env['SENTIMENT_TIMEOUT'])
            except ValueError as e:
                raise ConfigError(f"SENTIMENT_TIMEOUT must be a number, got {env['SENTIMENT_TIMEOUT']!r}") from e
        if timeout is not None and timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {timeout}")

        if report_rejections is None:
            report_rejections = env.get('SENTIMENT_REPORT_REJECTIONS', '').strip().lower() in TRUE_VALUES
        if debug is None:
            debug = bool(env.get('DEBUG_SENTIMENT'))

        return cls(
            api_url=(api_url or env.get('SENTIMENT_API_URL') or DEFAULT_API_URL).rstrip('/'),
            default_model=model,
            timeout=timeout,
            report_rejections=report_rejections,
            debug=debug,
        )
