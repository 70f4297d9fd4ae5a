from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Excavation Estimate Tracker"
    DATABASE_URL: str = "sqlite:///./excavation.db"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Echo SQL to the log. Noisy, local debugging only
    SQL_ECHO: bool = False

    class Config:
        env_file = ".env"


settings = Settings()
