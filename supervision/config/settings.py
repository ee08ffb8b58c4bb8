# supervision/config/settings.py
# Application configuration read from the environment

import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Settings for the supervision backend"""

    # Database
    DATABASE_URL: str = os.getenv('DATABASE_URL', 'sqlite:///./supervision.db')
    DB_SSLMODE: str = os.getenv('DB_SSLMODE', '')

    # Token settings
    SECRET_KEY: str = os.getenv('SECRET_KEY', 'change-me-in-production')
    ALGORITHM: str = os.getenv('ALGORITHM', 'HS256')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', 60 * 24))
    REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv('REFRESH_TOKEN_EXPIRE_DAYS', 7))

    # Number of completed tasks a student needs before the final project submission
    REQUIRED_TASK_COUNT: int = int(os.getenv('REQUIRED_TASK_COUNT', 5))

    # Server
    HOST: str = os.getenv('HOST', '0.0.0.0')
    PORT: int = int(os.getenv('PORT', '8000'))
    RELOAD: bool = os.getenv('RELOAD', 'true').lower() == 'true'
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO').upper()

    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            'CORS_ORIGINS',
            'http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000'
        ).split(',')
        if origin.strip()
    ]

    @classmethod
    def is_postgres(cls) -> bool:
        return cls.DATABASE_URL.startswith('postgresql')

    @classmethod
    def is_sqlite(cls) -> bool:
        return cls.DATABASE_URL.startswith('sqlite')


settings = Settings()
