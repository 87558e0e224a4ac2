from __future__ import annotations
import logging
import sys
from pathlib import Path

_APP_PACKAGES = ("app", "controller", "core", "gui", "services", "storage")


class _ConsoleNoiseFilter(logging.Filter):
    """Own logs pass; third-party loggers (urllib3, requests) only from WARNING up."""
    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.split(".", 1)[0] in _APP_PACKAGES or record.name == "__main__":
            return True
        return record.levelno >= logging.WARNING


def setup_logging(log_dir: str | Path, level: str = "INFO") -> Path:
    """Console + file logging. Call once, before the first window is built."""
    log_dir = Path(log_dir).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "join.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(getattr(logging, level, logging.INFO))
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
