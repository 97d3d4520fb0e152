"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Database - Support multiple environment variable naming conventions
    # Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        # Try DB_* variables (Docker style)
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'storehub')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'storehub')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'storehub')

        DATABASE_URL = (
            f"postgresql+psycopg://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Discounts
    # 'skip': log and ignore a discount whose data payload is malformed
    # 'raise': abort pricing of the line with InvalidDiscountDataError
    DISCOUNT_INVALID_DATA_POLICY = os.getenv('DISCOUNT_INVALID_DATA_POLICY', 'skip').lower()
    # Comma separated dotted paths, e.g. "shop.discounts.BuyXGetY,shop.discounts.Bundle"
    DISCOUNT_EXTRA_TYPES = [
        path.strip()
        for path in os.getenv('DISCOUNT_EXTRA_TYPES', '').split(',')
        if path.strip()
    ]


class TestConfig(Config):
    """Configuration for the test suite (in-memory SQLite)."""

    TESTING = True
    DEBUG = False
    WTF_CSRF_ENABLED = False
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    DISCOUNT_INVALID_DATA_POLICY = 'skip'
    DISCOUNT_EXTRA_TYPES = []
