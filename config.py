"""
Configuration management for Business Card Fusion API.

Settings come from environment variables (CARD_API_*), optionally loaded
from a .env file.
"""

import os
import logging
from typing import List, Optional

import phonenumbers
from dotenv import load_dotenv

from card_fusion.vocabulary import MOBILE_PREFIXES

load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Base settings shared by every environment.

    Attributes:
        DEBUG: Flask debug mode
        TESTING: Flask testing mode
        SECRET_KEY: Flask secret key
        MAX_CONTENT_LENGTH: Largest accepted request body (1MB)
        PHONE_REGION: Region used to read numbers without a country code
        MOBILE_LOCALE: Key into the mobile-number prefix table
        MAX_BATCH_SIZE: Largest number of cards per batch request
    """

    DEBUG: bool = _env_flag("CARD_API_DEBUG")
    TESTING: bool = _env_flag("CARD_API_TESTING")
    SECRET_KEY: str = os.getenv("CARD_API_SECRET_KEY", "dev-secret-key-change-in-production")

    # JSON bodies only, no uploads
    MAX_CONTENT_LENGTH: int = 1 * 1024 * 1024

    PHONE_REGION: str = os.getenv("CARD_API_PHONE_REGION", "DE").upper()
    MOBILE_LOCALE: str = os.getenv("CARD_API_MOBILE_LOCALE", "DE").upper()
    MAX_BATCH_SIZE: int = int(os.getenv("CARD_API_MAX_BATCH_SIZE", "50"))

    LOG_LEVEL: str = os.getenv("CARD_API_LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def init_app(cls, app) -> None:
        """Copy settings onto a Flask app and set up logging.

        Args:
            app: Flask application instance
        """
        app.config.from_object(cls)

        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL.upper(), logging.INFO),
            format=cls.LOG_FORMAT
        )

        for problem in cls.validate_settings():
            logger.warning(problem)

        logger.info(f"Extraction settings: {cls.get_extraction_settings()}")

    @classmethod
    def validate_settings(cls) -> List[str]:
        """Check extraction settings; returns one message per problem."""
        problems = []
        if cls.PHONE_REGION not in phonenumbers.SUPPORTED_REGIONS:
            problems.append(f"Unknown phone region {cls.PHONE_REGION!r}; numbers without a country code will not be found")
        if cls.MOBILE_LOCALE not in MOBILE_PREFIXES:
            problems.append(f"No mobile prefixes for locale {cls.MOBILE_LOCALE!r}; using the default table")
        if cls.MAX_BATCH_SIZE < 1:
            problems.append(f"MAX_BATCH_SIZE must be positive, got {cls.MAX_BATCH_SIZE}")
        return problems

    @classmethod
    def get_extraction_settings(cls) -> dict:
        """Keyword arguments for CardFusionPipeline."""
        return {
            "phone_region": cls.PHONE_REGION,
            "mobile_locale": cls.MOBILE_LOCALE,
            "max_batch_size": cls.MAX_BATCH_SIZE
        }


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    DEBUG = False
    LOG_LEVEL = "INFO"


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    LOG_LEVEL = "DEBUG"


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig
}


def get_config(config_name: Optional[str] = None) -> Config:
    """Look up a configuration class, defaulting to CARD_API_ENV.

    Unknown names fall back to DevelopmentConfig.
    """
    if config_name is None:
        config_name = os.getenv("CARD_API_ENV", "development")
    return config_by_name.get(config_name, DevelopmentConfig)
