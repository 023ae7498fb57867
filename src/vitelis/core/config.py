from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Vitelis API"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Database
    database_url: str
    database_migrations_url: str | None = None  # owner role for DDL, defaults to database_url
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Root admin bootstrap (skipped when either is unset)
    root_user_email: str | None = None
    root_user_password: str | None = None
    root_company_name: str = "Root Company"

    # Analysis credits granted to newly registered users
    default_user_credits: int = 0

    # Object storage (S3)
    aws_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_s3_bucket: str = "vitelis"
    aws_s3_endpoint_url: str | None = None

    # n8n workflow engine
    n8n_api_url: str = "https://vitelis.app.n8n.cloud/"
    n8n_api_key: str | None = None
    n8n_bizminer_url: str | None = None
    n8n_bizminer_api_key: str | None = None
    n8n_salesminer_url: str | None = None
    n8n_salesminer_api_key: str | None = None
    n8n_vitelis_sales_url: str | None = None
    n8n_vitelis_sales_api_key: str | None = None
    n8n_orchestrator_webhook: str | None = None
    n8n_timeout_seconds: float = 30.0

    # Webhook callbacks: when set, X-Webhook-Secret must match
    webhook_secret: str | None = None

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("n8n_api_url", "n8n_bizminer_url", "n8n_salesminer_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str | None) -> str | None:
        """Workflow paths are appended directly to the base URL."""
        if v and not v.endswith("/"):
            return f"{v}/"
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()
