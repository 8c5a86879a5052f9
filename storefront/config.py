"""
Configuration

Typed view of the environment variables the server reads.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

BACKENDS = ('sqlite', 'memory')
LOG_LEVELS = ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG')


@dataclass(frozen=True)
class Settings:
    """Server settings."""
    host: str = '0.0.0.0'
    port: int = 8080
    store_backend: str = 'sqlite'
    data_dir: Path = Path('data')
    database_path: Path = Path('data') / 'myshop.db'
    snapshot_path: Path = Path('data') / 'myshop.snapshot.db'
    snapshot_interval: float = 5.0
    log_level: str = 'INFO'
    log_sql: bool = False
    cors_origins: Tuple[str, ...] = ('*',)


def _int(value: Optional[str], default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Optional[str], default: float) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if result > 0 else default


def _bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {'1', 'true', 'yes', 'on'}


def _level(value: Optional[str], default: str = 'INFO') -> str:
    name = (value or default).strip().upper()
    return name if name in LOG_LEVELS else default


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    data_dir = Path(os.getenv('DATA_DIR', 'data'))
    origins = tuple(
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', '*').split(',')
        if origin.strip()
    )

    return Settings(
        host=os.getenv('HOST', '0.0.0.0'),
        port=_int(os.getenv('PORT'), 8080),
        store_backend=(os.getenv('STORE_BACKEND') or 'sqlite').strip().lower(),
        data_dir=data_dir,
        database_path=Path(os.getenv('DATABASE_PATH', str(data_dir / 'myshop.db'))),
        snapshot_path=Path(os.getenv('SNAPSHOT_PATH', str(data_dir / 'myshop.snapshot.db'))),
        snapshot_interval=_float(os.getenv('SNAPSHOT_INTERVAL'), 5.0),
        log_level=_level(os.getenv('LOG_LEVEL')),
        log_sql=_bool(os.getenv('LOG_SQL')),
        cors_origins=origins or ('*',)
    )
