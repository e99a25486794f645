import logging
from collections import deque
from threading import RLock
from typing import Callable, Deque, List, Optional, Tuple

_logger = logging.getLogger("pyreactive.console")

_LEVELS = {
    "log": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

Entry = Tuple[str, str]


class Console:
    """
    Host console sink for runtime messages.

    - `warn(text)` receives one formatted string per failed prop validation
    - `error(text)` receives one formatted string per failed lifecycle hook
    - `subscribe(cb)`/`unsubscribe(cb)` register callbacks invoked on each entry
      with ``(level, text)``
    - Implemented as a SINGLETON so the engine, the components and the web
      server all write to the same place. Every entry is also forwarded to the
      ``pyreactive.console`` logger.
    """

    _instance: Optional["Console"] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, max_entries: int = 500) -> None:
        if getattr(self, "_initialized", False):
            return

        self._entries: Deque[Entry] = deque(maxlen=max_entries)
        self._subs: List[Callable[[str, str], None]] = []
        self._lock: RLock = RLock()

        self._initialized = True

    def _append(self, level: str, text: str) -> None:
        with self._lock:
            self._entries.append((level, text))

        _logger.log(_LEVELS.get(level, logging.INFO), text)

        for cb in list(self._subs):
            try:
                cb(level, text)
            except Exception:
                _logger.exception("console subscriber failed")

    # ---------------- Public API ----------------
    def log(self, text: str) -> None:
        self._append("log", text)

    def warn(self, text: str) -> None:
        self._append("warn", text)

    def error(self, text: str) -> None:
        self._append("error", text)

    def entries(self, level: Optional[str] = None) -> List[str]:
        with self._lock:
            return [t for lvl, t in self._entries if level is None or lvl == level]

    def dump(self) -> str:
        return "\n".join(self.entries())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def subscribe(self, cb: Callable[[str, str], None]) -> None:
        with self._lock:
            if cb not in self._subs:
                self._subs.append(cb)

    def unsubscribe(self, cb: Callable[[str, str], None]) -> None:
        with self._lock:
            try:
                self._subs.remove(cb)
            except ValueError:
                pass


console = Console()
