from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come from the environment (or a local .env file in development).
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./openmic.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # --- Auth ---
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    RESET_TOKEN_EXPIRE_SECONDS: int = 60 * 60
    BCRYPT_ROUNDS: int = 12

    # --- Per-event signup lock ---
    SIGNUP_LOCK_TIMEOUT: int = 10
    SIGNUP_LOCK_BLOCKING_TIMEOUT: float = 5

    # --- Email ---
    AWS_REGION: str = "us-east-2"
    FROM_EMAIL: str = "noreply@openmic.local"
    PLATFORM_URL: str = "http://localhost:5173"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]


settings = Settings()


def get_redis_url():
    return settings.REDIS_URL
