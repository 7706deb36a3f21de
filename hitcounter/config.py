"""Runtime settings, read from the environment and an optional .env file."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Redis
    redis_host: str = Field(default='redis', validation_alias='REDIS_HOST')
    redis_port: int = Field(default=6379, validation_alias='REDIS_PORT')
    redis_db: int = Field(default=0, validation_alias='REDIS_DB')
    redis_password: Optional[str] = Field(default=None, validation_alias='REDIS_PASSWORD')

    # Counter
    counter_key: str = Field(default='hits', min_length=1, validation_alias='COUNTER_KEY')
    max_retries: int = Field(default=5, ge=0, validation_alias='MAX_RETRIES')
    backoff_seconds: float = Field(default=0.5, ge=0, validation_alias='BACKOFF_SECONDS')

    # Web
    host: str = Field(default='0.0.0.0', validation_alias='APP_HOST')
    port: int = Field(default=5000, validation_alias='APP_PORT')
    debug: bool = Field(default=False, validation_alias='APP_DEBUG')
    log_level: str = Field(default='INFO', validation_alias='APP_LOG_LEVEL')

    model_config = {'env_file': '.env', 'env_file_encoding': 'utf-8', 'populate_by_name': True}
