"""Configuration management using environment variables.

This module provides centralized configuration management using python-decouple
to read from .env files and environment variables.
"""

from decouple import config


class Config:
    """Base configuration class."""

    # Database
    DATABASE_URL: str = config('DATABASE_URL', default='sqlite:///matchday.db')

    # Environment
    DEBUG: bool = config('DEBUG', default=False, cast=bool)
    ENVIRONMENT: str = config('ENVIRONMENT', default='development')

    # Logging
    LOG_LEVEL: str = config('LOG_LEVEL', default='INFO')
    LOG_FILE: str = config('LOG_FILE', default='')

    # Listing
    DEFAULT_PAGE_SIZE: int = config('DEFAULT_PAGE_SIZE', default=50, cast=int)
    MAX_PAGE_SIZE: int = config('MAX_PAGE_SIZE', default=200, cast=int)

    # Match event publication
    EVENT_PUBLISHING_ENABLED: bool = config('EVENT_PUBLISHING_ENABLED', default=True, cast=bool)

    @property
    def is_postgresql(self) -> bool:
        """Check if using PostgreSQL database."""
        return self.DATABASE_URL.startswith('postgresql')

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.DATABASE_URL.startswith('sqlite')

    def clamp_page_size(self, limit) -> int:
        """Bound a requested page size to the configured maximum."""
        if limit is None or limit <= 0:
            return self.DEFAULT_PAGE_SIZE
        return min(limit, self.MAX_PAGE_SIZE)


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    LOG_LEVEL = 'WARNING'


class TestingConfig(Config):
    """Testing configuration."""
    DATABASE_URL = 'sqlite:///:memory:'
    DEBUG = True


def get_config() -> Config:
    """Get configuration based on environment."""
    env = config('ENVIRONMENT', default='development')

    if env == 'production':
        return ProductionConfig()
    elif env == 'testing':
        return TestingConfig()
    else:
        return DevelopmentConfig()


# Global config instance
settings = get_config()
