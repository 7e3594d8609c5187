from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from appdirs import user_data_dir, user_log_dir
from dotenv import load_dotenv

APP_NAME = "oris_formation"
APP_AUTHOR = "ORIS FORMATION"


@dataclass
class Settings:
    data_dir: str = field(default_factory=lambda: user_data_dir(APP_NAME, APP_AUTHOR))
    exports_dir: str = field(
        default_factory=lambda: str(Path(user_data_dir(APP_NAME, APP_AUTHOR)) / "exports")
    )
    log_dir: str = field(default_factory=lambda: user_log_dir(APP_NAME, APP_AUTHOR))
    log_level: str = "INFO"
    detailed_logging: bool = False
    wkhtmltopdf_path: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    dotenv_path = Path.cwd() / ".env"
    load_dotenv(dotenv_path)

    data_dir = os.getenv("ORIS_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR)
    return Settings(
        data_dir=data_dir,
        exports_dir=os.getenv("ORIS_EXPORTS_DIR") or str(Path(data_dir) / "exports"),
        log_dir=os.getenv("LOG_DIR") or user_log_dir(APP_NAME, APP_AUTHOR),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        detailed_logging=os.getenv("DETAILED_LOGGING", "0").lower() in {"1", "true", "yes", "on"},
        wkhtmltopdf_path=os.getenv("WKHTMLTOPDF_PATH") or None,
    )
