# backend-server/app/core/config.py
from pydantic_settings import BaseSettings; from dotenv import load_dotenv
load_dotenv()
class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./employee_tracker.db"
    JWT_SECRET_KEY: str; JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    # Scheduled task activation sweep (cron fields)
    SCHEDULER_ENABLED: bool = True
    SWEEP_CRON_HOUR: int = 0; SWEEP_CRON_MINUTE: int = 0; SWEEP_TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"
settings = Settings()
