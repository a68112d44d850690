"""
Configuration module for the invoicing actions backend.

Loads environment variables and validates required settings.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Supabase Configuration (Postgres store + Auth identity provider)
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_PUBLISHABLE_KEY: str = os.getenv("SUPABASE_PUBLISHABLE_KEY", "")

    # JWKS URL is derived from SUPABASE_URL
    @property
    def SUPABASE_JWKS_URL(self) -> str:
        """Get the JWKS URL for JWT verification."""
        if not self.SUPABASE_URL:
            return ""
        return f"{self.SUPABASE_URL}/auth/v1/.well-known/jwks.json"

    # View paths used for invalidation and navigation
    INVOICES_PATH: str = os.getenv("INVOICES_PATH", "/dashboard/invoices")
    LOGIN_REDIRECT_PATH: str = os.getenv("LOGIN_REDIRECT_PATH", "/dashboard")

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Settings
    CORS_ORIGINS: List[str] = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:8080"
    ).split(",")

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any required setting is missing.
        """
        required_settings = {
            "SUPABASE_URL": cls.SUPABASE_URL,
            "SUPABASE_PUBLISHABLE_KEY": cls.SUPABASE_PUBLISHABLE_KEY,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"


settings = Settings()

# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            print(f"Warning: {e}")
            print("   The app may not work correctly until you configure your .env file.")
        else:
            raise
