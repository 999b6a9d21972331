from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "development"
    log_level: str = "INFO"

    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24

    # 4 è il minimo accettato da bcrypt, utile nei test
    bcrypt_rounds: int = 12

    cors_origins: List[str] = ["*"]
    seed_demo_data: bool = True

    def validate_runtime(self) -> None:
        if self.app_env.lower() == "production" and self.jwt_secret_key == "change-me":
            raise RuntimeError("JWT_SECRET_KEY must be set in production.")


settings = Settings()
