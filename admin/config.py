from typing import Literal

from pydantic_settings import BaseSettings

StatsFormat = Literal[
    'commonsmetrics',
    'ostrich',
    'commonsstats',
]


class Settings(BaseSettings):
    model_config = {
        'extra': 'ignore',
        'env_file': '.env',
        'env_file_encoding': 'utf-8',
        'frozen': True,
    }

    API_HOST: str = '0.0.0.0'
    API_PORT: int = 9990
    API_RELOAD: bool = False

    SERVICE_NAME: str = 'metrics-admin'
    SERVICE_VERSION: str = '0.1.0'
    LOG_LEVEL: str = 'INFO'
    LOG_FORMAT: str = 'json'

    SCOPE_SEPARATOR: str = '/'
    STATS_FORMAT: StatsFormat = 'commonsmetrics'
    DTAB_BASE: str = ''


settings = Settings()
