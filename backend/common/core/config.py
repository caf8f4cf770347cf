from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.core.constants import Environment, LockProviderType


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment Profile
    environment: Environment = Environment.LOCAL

    # API Settings
    app_name: str = "entitlements-engine"
    api_version: str = "1.0.0"
    debug: bool = False

    # Database Components
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "entitlements"
    db_use_nullpool: bool = (
        False  # True for workers (sequential), False for API (concurrent)
    )
    db_pool_size: int = 10
    db_pool_overflow: int = 5

    @property
    def database_url(self) -> str:
        """Construct database URL from components."""
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # RabbitMQ (subscription event notifications)
    rabbitmq_host: str = "localhost"
    rabbitmq_port: int = 5672
    rabbitmq_username: str = "guest"
    rabbitmq_password: str = "guest"
    rabbitmq_vhost: str = "/"
    rabbitmq_publish_timeout_seconds: float = 5.0

    # Redis (distributed locks)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    @property
    def redis_connection_url(self) -> str:
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Rate limiting (SlowAPI); defaults to the Redis above, "memory://" for single-process
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: Optional[str] = None

    # Locking
    lock_provider: LockProviderType = LockProviderType.REDIS
    lock_ttl_seconds: int = 30
    lock_acquire_timeout_seconds: float = 5.0

    # Logging / OpenTelemetry
    log_level: str = "INFO"
    otel_service_name: str = "entitlements-engine"
    otel_service_version: str = "1.0.0"
    otel_traces_endpoint: str = "https://api.axiom.co/v1/traces"

    # Axiom (span export is only wired when a token is present)
    axiom_token: str = ""
    axiom_dataset: str = ""

    # Internal callers (rest of the application) authenticate with this key
    internal_api_key: str = ""

    # Billing - Stripe (payments)
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    payment_provider_timeout_seconds: float = 10.0

    # Entitlements
    trial_period_days: int = 30
    usage_grace_days: int = 60

    # Reconciliation worker
    reconciliation_interval_seconds: int = 300
    reconciliation_min_age_minutes: int = 15
    reconciliation_batch_size: int = 100

    @property
    def cors_allowed_origins(self) -> List[str]:
        """Auto-select CORS origins based on environment."""
        if self.environment == Environment.LOCAL:
            return [
                "http://localhost:3000",
                "http://localhost:3001",
            ]
        return []


settings = Settings()
