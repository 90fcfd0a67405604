"""Configuration management for spar."""

import os
import itertools
import time
from pathlib import Path
from typing import Optional, Union
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, PrivateAttr, SecretStr
from enum import Enum
import logging
import keyring
import getpass

logger = logging.getLogger(__name__)

class LLMProvider(str, Enum):
    OPENROUTER = "openrouter"

class TTSProvider(str, Enum):
    GOOGLE = "google"
    OPENAI = "openai"

class ConfigurationError(ValueError):
    """Raised when required credentials or settings are missing."""

# Base directory for audio files and logs; defaults to the working directory
DEFAULT_SPAR_DIR = os.getenv('SPAR_DIR', str(Path.cwd()))

class PathManager:
    """Manages all file paths used by the application."""

    def __init__(self, base_dir: Union[str, Path]):
        """Initialize with the base directory."""
        self.base_dir = Path(base_dir)

        # Subdirectories are created on first use
        self.subdirs = {
            "audio": self.base_dir / "audio",  # One file per spoken turn
            "logs": self.base_dir / "logs",    # For log files
        }
        self._counter = itertools.count(1)

        logger.debug(f"Initialized path manager with base directory: {self.base_dir}")

    def get_path(self, category: str) -> Path:
        """Get the path for a specific category, creating it if needed."""
        path = self.subdirs.get(category)
        if path is None:
            path = self.base_dir / category
            self.subdirs[category] = path
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_file_path(self, category: str, filename: str) -> Path:
        """Get a path to a specific file within a category."""
        return self.get_path(category) / filename

    def get_log_path(self, log_name: str) -> Path:
        """Get the path to a log file."""
        return self.get_file_path("logs", f"{log_name}.log")

    def get_unique_audio_path(self, prefix: str, suffix: str = ".mp3") -> Path:
        """Generate an audio path that no earlier call has produced.

        Names are ``<prefix>-<epoch millis>-<counter><suffix>``. The counter
        increases for every call in this process, and an existing file is
        never reused.
        """
        while True:
            millis = int(time.time() * 1000)
            path = self.get_file_path("audio", f"{prefix}-{millis}-{next(self._counter)}{suffix}")
            if not path.exists():
                return path

class SecureKeyManager:
    """Manages secure storage and retrieval of API keys."""

    APP_NAME = "spar"

    @staticmethod
    def get_key(service_name: str) -> Optional[str]:
        """Retrieve an API key from secure storage."""
        try:
            return keyring.get_password(SecureKeyManager.APP_NAME, service_name)
        except Exception as e:
            logger.error(f"Failed to retrieve key for {service_name}: {e}")
            return None

    @staticmethod
    def set_key(service_name: str, key: str) -> bool:
        """Store an API key in secure storage."""
        try:
            keyring.set_password(SecureKeyManager.APP_NAME, service_name, key)
            return True
        except Exception as e:
            logger.error(f"Failed to store key for {service_name}: {e}")
            return False

    @staticmethod
    def prompt_for_key(service_name: str, force_input: bool = False) -> Optional[str]:
        """Prompt user for API key and store it securely."""
        existing_key = None if force_input else SecureKeyManager.get_key(service_name)

        if existing_key:
            return existing_key

        print(f"Please enter your {service_name} API key (input will be hidden):")
        key = getpass.getpass()

        if key:
            SecureKeyManager.set_key(service_name, key)
            return key
        return None

OPENROUTER_KEY_SERVICE = "openrouter-api"
OPENAI_KEY_SERVICE = "openai-api"

class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    spar_dir: Path = Field(Path(DEFAULT_SPAR_DIR), description="Base directory for audio and logs")

    # Completion service
    llm_provider: LLMProvider = LLMProvider.OPENROUTER
    llm_model: str = "gryphe/mythomax-l2-13b"
    llm_timeout: Optional[float] = None
    openrouter_api_key: Optional[SecretStr] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    # Speech synthesis
    tts_provider: TTSProvider = TTSProvider.GOOGLE
    tts_model: Optional[str] = None
    google_client_email: Optional[str] = None
    google_private_key: Optional[SecretStr] = None
    openai_api_key: Optional[SecretStr] = None

    # Playback
    skip_audio_playback: bool = False

    # Conversation
    default_exchanges: int = Field(5, ge=1)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    _paths: Optional[PathManager] = PrivateAttr(default=None)

    @property
    def paths(self) -> PathManager:
        if self._paths is None:
            self._paths = PathManager(self.spar_dir)
        return self._paths

    @property
    def audio_dir(self) -> Path:
        return self.paths.get_path("audio")

    # Helper methods for secure API keys
    def get_openrouter_api_key(self) -> Optional[str]:
        """Get the OpenRouter key from the environment, falling back to the keyring."""
        if self.openrouter_api_key:
            return self.openrouter_api_key.get_secret_value()
        return SecureKeyManager.get_key(OPENROUTER_KEY_SERVICE)

    def get_openai_api_key(self) -> Optional[str]:
        """Get the OpenAI key from the environment, falling back to the keyring."""
        if self.openai_api_key:
            return self.openai_api_key.get_secret_value()
        return SecureKeyManager.get_key(OPENAI_KEY_SERVICE)

    def get_google_private_key(self) -> Optional[str]:
        """Get the Google private key with escaped newlines restored."""
        if not self.google_private_key:
            return None
        return self.google_private_key.get_secret_value().replace("\\n", "\n")

    def validate_credentials(self) -> None:
        """Check that every credential the configured providers need is present.

        Raises:
            ConfigurationError: naming the missing environment variables
        """
        if not self.get_openrouter_api_key():
            raise ConfigurationError(
                "OpenRouter API key missing. Check your .env file for OPENROUTER_API_KEY"
            )

        if self.tts_provider == TTSProvider.GOOGLE:
            if not self.google_client_email or not self.get_google_private_key():
                raise ConfigurationError(
                    "Google Cloud credentials missing. Check your .env file for "
                    "GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY"
                )
        elif self.tts_provider == TTSProvider.OPENAI:
            if not self.get_openai_api_key():
                raise ConfigurationError(
                    "OpenAI API key missing. Check your .env file for OPENAI_API_KEY"
                )

    def setup_logging(self, level: Optional[str] = None):
        """Configure logging based on settings."""
        level = getattr(logging, (level or self.log_level).upper(), logging.INFO)

        # Configure root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Clear existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        # All logs go to file
        log_file = self.log_file or self.paths.get_log_path("spar")
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_format)
        root_logger.addHandler(file_handler)

        # Only log warnings and errors to console
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_format = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(console_format)
        root_logger.addHandler(console_handler)

        logger.info(f"Logging to file: {log_file}")
        return log_file

# Create global settings instance
settings = Settings()
