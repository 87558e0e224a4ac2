import os

# Overridable through JOIN_* environment variables.


def _env(name: str, default: str) -> str:
    v = os.getenv(f"JOIN_{name}")
    return default if v is None or v.strip() == "" else v


def _env_int(name: str, default: int) -> int:
    try:
        return int(_env(name, str(default)))
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, "1" if default else "0").strip().lower() in {"1", "true", "yes", "on"}


BASE_URL = _env("BASE_URL", "https://join-56225-default-rtdb.europe-west1.firebasedatabase.app/")
REQUEST_TIMEOUT = _env_int("REQUEST_TIMEOUT", 10)  # seconds
SYNC_INTERVAL_MS = _env_int("SYNC_INTERVAL_MS", 60_000)
TOPMOST = _env_bool("TOPMOST", False)
WINDOW_GEOMETRY = _env("WINDOW_GEOMETRY", "1180x720")
LOG_DIR = _env("LOG_DIR", os.path.join(os.path.expanduser("~"), ".local", "share", "join"))
LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()
