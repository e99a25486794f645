# config.py ----------------------------------------------------
import os
from dataclasses import dataclass, field
from typing import List, Optional

import dotenv


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime knobs read from the environment (and ``.env`` when present).

    - ``PYREACTIVE_BACKTRACE``: ``on``/``off`` default for component backtraces
    - ``PYREACTIVE_RERAISE``: re-raise hook failures instead of reporting them
    - ``PYREACTIVE_COMPONENT_PATH``: comma separated modules searched by the
      top-level component lookup
    - ``PYREACTIVE_HOST`` / ``PYREACTIVE_PORT``: web server bind
    - ``PYREACTIVE_TRACE``: record render traces
    """

    backtrace: bool = True
    reraise: bool = False
    component_path: List[str] = field(default_factory=list)
    host: str = "127.0.0.1"
    port: int = 8000
    trace: bool = False

    @classmethod
    def from_env(cls, *, load_dotenv: bool = True) -> "Settings":
        if load_dotenv:
            dotenv.load_dotenv()
        raw_path = os.getenv("PYREACTIVE_COMPONENT_PATH", "")
        return cls(
            backtrace=_flag(os.getenv("PYREACTIVE_BACKTRACE"), True),
            reraise=_flag(os.getenv("PYREACTIVE_RERAISE"), False),
            component_path=[p.strip() for p in raw_path.split(",") if p.strip()],
            host=os.getenv("PYREACTIVE_HOST", "127.0.0.1"),
            port=int(os.getenv("PYREACTIVE_PORT", "8000")),
            trace=_flag(os.getenv("PYREACTIVE_TRACE"), False),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next read goes back to the environment."""
    global _settings
    _settings = None
