"""
Application configuration.
All deployment-specific values loaded from environment variables.
"""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    # Database
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/fittrack"
    SQL_ECHO: bool = False
    
    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console
    
    # Statistics
    # Trailing window (in calendar months) covered by monthly rollups
    STATS_ROLLUP_MONTHS: int = 6
    # Number of exercises reported in the top exercises list
    STATS_TOP_EXERCISES: int = 5
    
    # Workout history page size
    WORKOUT_HISTORY_LIMIT: int = 10
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
