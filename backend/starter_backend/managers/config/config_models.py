"""Pydantic models for configuration."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Main application settings loaded from environment variables."""

    app_name: str = "Starter Backend"
    app_version: str = "1.0.0"
    port: int = 5000
    debug_mode: bool = False
    log_level: str = "INFO"
    environment: str = "development"
    app_log_dir: str = ""

    # MongoDB
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017", validation_alias="MONGODB_URI"
    )
    mongodb_db_name: str = Field(default="starter", validation_alias="MONGODB_DB_NAME")
    mongodb_max_pool_size: int = Field(
        default=10, validation_alias="MONGODB_MAX_POOL_SIZE"
    )
    mongodb_socket_timeout_ms: int = Field(
        default=45000, validation_alias="MONGODB_SOCKET_TIMEOUT_MS"
    )
    mongodb_server_selection_timeout_ms: int = Field(
        default=5000, validation_alias="MONGODB_SERVER_SELECTION_TIMEOUT_MS"
    )

    # Auth
    secret_key: str = Field(default="", validation_alias="SECRET_KEY")
    access_token_expire_minutes: int = Field(
        default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # Monitoring
    monitoring_key: str = Field(default="", validation_alias="MONITORING_KEY")
    otel_exporter_otlp_endpoint: str = Field(
        default="", validation_alias="OTEL_EXPORTER_OTLP_ENDPOINT"
    )

    # Client bundle served at "/" when present
    frontend_dist_dir: str = Field(
        default="frontend/dist", validation_alias="FRONTEND_DIST_DIR"
    )

    # Comma separated; "*" allows any origin
    cors_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")

    # Rate limiting settings
    rate_limit_enabled: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")
    rate_limit_rpm: int = Field(default=600, validation_alias="RATE_LIMIT_RPM")
    rate_limit_window_seconds: int = Field(
        default=60, validation_alias="RATE_LIMIT_WINDOW_SECONDS"
    )
    rate_limit_per_path: bool = Field(
        default=False, validation_alias="RATE_LIMIT_PER_PATH"
    )

    # Security headers settings
    security_csp_enabled: bool = Field(
        default=True, validation_alias="SECURITY_CSP_ENABLED"
    )
    security_csp_value: str = Field(
        default="default-src 'self'; img-src 'self' data:; script-src 'self'; style-src 'self' 'unsafe-inline'; connect-src 'self'; frame-ancestors 'self'",
        validation_alias="SECURITY_CSP_VALUE",
    )
    security_xfo_enabled: bool = Field(
        default=True, validation_alias="SECURITY_XFO_ENABLED"
    )
    security_xfo_value: str = Field(
        default="SAMEORIGIN", validation_alias="SECURITY_XFO_VALUE"
    )
    security_nosniff_enabled: bool = Field(
        default=True, validation_alias="SECURITY_NOSNIFF_ENABLED"
    )
    security_referrer_policy_enabled: bool = Field(
        default=True, validation_alias="SECURITY_REFERRER_POLICY_ENABLED"
    )
    security_referrer_policy_value: str = Field(
        default="no-referrer", validation_alias="SECURITY_REFERRER_POLICY_VALUE"
    )
    # Unset means enabled outside development
    security_hsts_enabled: Optional[bool] = Field(
        default=None, validation_alias="SECURITY_HSTS_ENABLED"
    )
    security_hsts_value: str = Field(
        default="max-age=15552000; includeSubDomains",
        validation_alias="SECURITY_HSTS_VALUE",
    )
    security_coop_enabled: bool = Field(
        default=True, validation_alias="SECURITY_COOP_ENABLED"
    )
    security_coop_value: str = Field(
        default="same-origin", validation_alias="SECURITY_COOP_VALUE"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "allow",
        "env_prefix": "",
        "populate_by_name": True,
    }

    @property
    def is_development(self) -> bool:
        return self.debug_mode or self.environment.lower() in {"dev", "development"}

    @property
    def cors_origin_list(self) -> List[str]:
        """Parse CORS_ORIGINS into a list; empty entries are dropped."""
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["*"]


__all__ = ["AppSettings"]
