"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "Sports Club"
    debug: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = []

    # Database. database_url wins; otherwise assembled from the parts below.
    database_url: str = ""
    db_user: str = "clubhouse"
    db_pass: str = "clubhouse"
    db_host: str = "db:5432"
    db_name: str = "sportdb"
    database_echo: bool = False
    create_tables: bool = True

    # Identity provider: "firebase" in production, "local" for dev and tests
    identity_provider: str = "firebase"
    firebase_service_key: str = ""  # base64-encoded service account JSON
    identity_secret: str = "dev-secret-change-in-production"
    identity_algorithm: str = "HS256"
    identity_token_expire_minutes: int = 60

    # Catalog
    courts_page_size: int = 6

    model_config = {"env_prefix": "CB_", "env_file": ".env", "extra": "ignore"}

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"postgresql+asyncpg://{self.db_user}:{self.db_pass}@{self.db_host}/{self.db_name}"


settings = Settings()
