"""
core/config.py -- Runtime settings for the portfolio API (pydantic-settings).

Every knob the service reads from its environment is a field on Settings:
database URL, signing key and token lifetime, upload directory and size cap,
trusted hosts, CORS origins, and the per-route rate limits. Other modules ask
get_settings() for the shared instance instead of reading os.environ.

Values come from process environment variables first, then a .env file in
the working directory. Env names are the uppercased field names
(upload_dir <- UPLOAD_DIR); list fields take a JSON array.

SECRET_KEY policy (enforced by the after-validator on Settings):
  DEBUG=true and no key    -> INSECURE_DEV_SECRET_KEY, logged as a warning
  DEBUG=false and no key   -> startup fails
  any key under 32 chars   -> startup fails

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or portfolio/.
"""

import logging
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("portfolio.config")

# Insecure on purpose: anyone reading this file can forge tokens signed with it.
# Only ever used when DEBUG=true and SECRET_KEY is unset.
INSECURE_DEV_SECRET_KEY = "insecure-development-signing-key-do-not-deploy"


class Settings(BaseSettings):
    """Typed view of the service environment.

    Every field has a default, so the test suite and `python main.py serve`
    both work with an empty environment once DEBUG=true is set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured". The model_validator
    # below either substitutes the dev key or raises, so callers never see "".
    secret_key: str = ""
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------

    # Any SQLAlchemy URL. PostgreSQL needs the "postgres" extra installed.
    database_url: str = "sqlite:///./portfolio.db"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Bearer tokens expire 24 hours after issue.
    token_expire_seconds: int = 24 * 60 * 60
    self_registration_enabled: bool = True

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"
    max_upload_bytes: int = 5 * 1024 * 1024

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    allowed_hosts: list[str] = ["localhost", "127.0.0.1", "*.localhost"]
    cors_origins: list[str] = ["http://localhost", "http://localhost:3000", "http://127.0.0.1"]

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------

    rate_limit_enabled: bool = True
    login_rate_limit: str = "10/minute"
    register_rate_limit: str = "5/minute"
    contact_rate_limit: str = "5/minute"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): fall back to INSECURE_DEV_SECRET_KEY with a
            warning. Tokens survive restarts, but anyone can forge them.

        Production mode (DEBUG=false or not set): refuse to start if
            SECRET_KEY is missing.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = INSECURE_DEV_SECRET_KEY
                logger.warning(
                    "SECRET_KEY is unset; signing tokens with the built-in development key."
                )
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Build Settings on first use and return the same instance afterwards.

    Tests that need different environment values must set them before the
    first call, or call get_settings.cache_clear().
    """
    return Settings()
