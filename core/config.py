"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for TokenGate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. Implements the environment-conditional
      JWT_SECRET policy: development falls back to the documented default with
      a loud warning, production refuses to start with it.

Security notes:
  [S1] An unset or empty JWT_SECRET falls back to DEFAULT_JWT_SECRET. That value
       is public (it is in this file), so anyone can forge tokens for a server
       running with it.

  [S2] In production (ENVIRONMENT=production) the default secret, or any secret
       shorter than 32 chars, is a hard startup failure. HMAC-SHA256 signing
       relies on key entropy -- a short key weakens every issued token.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("tokengate.config")

DEFAULT_JWT_SECRET = "your_secret_key_change_in_production"  # nosec B105 -- documented insecure placeholder

MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces
    production-safety rules at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 3000
    # "development" shows exception detail in 500 responses; anything else hides it.
    environment: str = "development"
    log_level: str = "info"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    jwt_secret: str = DEFAULT_JWT_SECRET
    token_expire_seconds: int = 3600

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def using_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """Enforce the JWT_SECRET policy [S1] [S2].

        Empty secret: treated as unset and replaced by DEFAULT_JWT_SECRET.

        Production: refuse to start with the default secret or with a secret
            shorter than MIN_SECRET_LENGTH.

        Everywhere else: start anyway, but log a warning so the insecure
            configuration is visible in the first lines of output.
        """
        if not self.jwt_secret:
            self.jwt_secret = DEFAULT_JWT_SECRET

        if self.using_default_secret:
            if self.is_production:
                raise ValueError(
                    "JWT_SECRET is required in production. "
                    "Set JWT_SECRET in your environment or .env file."
                )
            logger.warning("JWT_SECRET not set -- USING DEFAULT (CHANGE THIS!). Tokens can be forged by anyone.")
        elif len(self.jwt_secret) < MIN_SECRET_LENGTH:
            if self.is_production:
                raise ValueError(f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters.")
            logger.warning("JWT_SECRET is shorter than %d characters -- weak signing key.", MIN_SECRET_LENGTH)

        if self.token_expire_seconds <= 0:
            raise ValueError("TOKEN_EXPIRE_SECONDS must be a positive number of seconds.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Uses lru_cache so Settings() is instantiated exactly once -- at first call.
    This is the official FastAPI pattern for config (see FastAPI docs /advanced/settings/).
    All modules should call get_settings() rather than constructing Settings() directly.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
