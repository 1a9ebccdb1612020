from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    host: str = Field(default="localhost", alias="POSTGRES_HOST")
    port: int = Field(default=5432, alias="POSTGRES_DB_PORT")
    db_name: str = Field(default="flashdeck", alias="POSTGRES_DB_NAME")
    user: str = Field(default="postgres", alias="POSTGRES_DB_USER")
    password: str = Field(default="postgres", alias="POSTGRES_DB_PASSWORD")
    # Full SQLAlchemy URL; wins over the POSTGRES_* parts when set
    url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    @computed_field
    def connection_string(self) -> str:
        if self.url:
            return self.url
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db_name}"


class JWTSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    issuer: str = Field(default="https://auth.example.com", alias="JWT_ISSUER")
    application_id: str = Field(default="flashdeck", alias="JWT_APPLICATION_ID")
    token_lifetime_seconds: int = Field(
        default=3600, alias="JWT_TOKEN_LIFETIME_SECONDS"
    )
    # PEM file for the RSA signing key; a fresh in-memory key is used when unset
    key_file: Optional[str] = Field(default=None, alias="JWT_KEY_FILE")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="flashdeck", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=5000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")
    jwt_secret: str = Field(alias="JWT_SECRET")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS"
    )

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class OracleSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")
    openrouter_model: str = Field(
        default="x-ai/grok-code-fast-1", alias="OPENROUTER_MODEL"
    )

    # Model provider selection: "google" or "openrouter"
    model_provider: str = Field(default="google", alias="MODEL_PROVIDER")
    timeout_seconds: Optional[float] = Field(
        default=60.0, alias="ORACLE_TIMEOUT_SECONDS"
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    postgres: PostgresSettings = Field(default_factory=lambda: PostgresSettings())
    jwt: JWTSettings = Field(default_factory=lambda: JWTSettings())
    oracle: OracleSettings = Field(default_factory=lambda: OracleSettings())


settings = Settings()
