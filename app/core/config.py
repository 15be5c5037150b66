from pydantic_settings import BaseSettings
from typing import Optional, List

from app.core.constants import PastLessonPolicyEnum

class Settings(BaseSettings):
    PROJECT_NAME: str = "Lesson Scheduling Service"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: Optional[str] = None
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None

    DATABASE_URL: str = ""
    SQLITE_DATABASE_URL: str = "sqlite:///./lessons.db"
    TEST_DATABASE_URL: Optional[str] = None

    def __init__(self, **data):
        super().__init__(**data)
        if self.DATABASE_HOST and self.DATABASE_NAME:
            self.DATABASE_URL = (
                f'postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}'
                f'@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}'
            )
        elif not self.DATABASE_URL:
            self.DATABASE_URL = self.SQLITE_DATABASE_URL

    # Every wall-clock comparison and naive input instant uses this zone
    OPERATIONAL_TIMEZONE: str = "Asia/Manila"

    DEFAULT_TAKE: int = 10
    LESSON_SNIPPET_TAKE: int = 3
    PAST_LESSON_UPCOMING_POLICY: PastLessonPolicyEnum = PastLessonPolicyEnum.PREVIOUS

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"

settings = Settings()
