"""
core/config.py -- Vendorify settings, read from the environment by pydantic-settings.

Every environment lookup goes through get_settings(); other modules never
touch os.environ themselves.

  get_settings() is wrapped in lru_cache, so Settings is built on first use
      and the same instance is handed out afterwards.

  Settings fields map one-to-one onto upper-case env vars (jwt_secret ->
      JWT_SECRET), with .env as a fallback source. List fields take JSON,
      e.g. ALLOWED_HOSTS='["vendorify.example"]'.

  apply_security_defaults() runs once every field has been resolved and
      fills in the JWT secret fallback and the production cookie policy.

Security notes:
  A missing JWT_SECRET falls back to INSECURE_DEFAULT_SECRET with a logged
  warning. Startup is NOT refused: demo deployments rely on this. Anyone who
  knows the constant can mint valid session tokens, so production
  deployments must set JWT_SECRET.

  APP_ENV=production forces secure_cookies=True regardless of SECURE_COOKIES.

Layer rule: core/ is the kernel and imports nothing from api/, web/, auth/
or vendors/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("vendorify.config")

INSECURE_DEFAULT_SECRET = "vendorify-demo-secret-key-2026"

# Seven days, in seconds. Token expiry and cookie max-age both use this value.
SESSION_TTL_SECONDS = 60 * 60 * 24 * 7

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'vendorify.db'}"


class Settings(BaseSettings):
    """Vendorify runtime configuration.

    Every field has a default, so a bare Settings() works with no .env present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    app_env: str = "development"  # "development" | "production" | "test"
    debug: bool = False
    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured". The validator swaps
    # in INSECURE_DEFAULT_SECRET, so callers never see "".
    jwt_secret: str = ""
    secure_cookies: bool = False
    bcrypt_rounds: int = 10
    protected_prefixes: list[str] = ["/dashboard", "/vendors/new"]

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

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    max_upload_bytes: int = 5 * 1024 * 1024
    # Uploaded bytes are validated but not stored; documents point here.
    mock_upload_url: str = "https://example.com/mock-file.jpg"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def apply_security_defaults(self) -> "Settings":
        """Resolve the JWT secret and cookie policy.

        Missing JWT_SECRET: fall back to INSECURE_DEFAULT_SECRET and warn.
        APP_ENV=production: always mark cookies Secure.
        """
        if not self.jwt_secret:
            self.jwt_secret = INSECURE_DEFAULT_SECRET
            logger.warning("JWT_SECRET is not set -- using insecure fallback. Set JWT_SECRET in your environment.")
        if self.is_production:
            self.secure_cookies = True
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the cached Settings instance.

    Tests that change the environment build Settings() directly instead.
    """
    return Settings()
