# app/config.py
from pathlib import Path
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Storage sandbox
    STORAGE_ROOT: Path = Path("./filesys")
    DIR_MODE: int = 0o755
    FILE_MODE: int = 0o644

    # Only files with this suffix may be created/read/deleted
    FILE_SUFFIX: str = ".txt"

    # Stats: descend into subdirectories (off = single directory level)
    STATS_RECURSIVE: bool = False

    # HTTP transport
    HTTP_HOST: str = "127.0.0.1"
    HTTP_PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
