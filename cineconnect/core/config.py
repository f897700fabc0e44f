"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "cineconnect"
    debug: bool = False
    environment: str = "production"  # development | production
    port: int = 3000

    # Database; database_url wins over the individual parts when set
    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "cineconnect"
    db_user: str = "postgres"
    db_password: str = ""
    db_pool_size: int = 10

    # JWT
    jwt_secret: str = "change-me-in-production-use-openssl-rand-hex-32"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days

    password_reset_expire_minutes: int = 60

    # Browser origin allowed by CORS
    frontend_url: str = "http://localhost:5173"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def sqlalchemy_url(self) -> str | URL:
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


settings = Settings()
