import os

from dotenv import load_dotenv

_loaded_env_file: str | None = None


def load_env(force: bool = False) -> str:
    """Load environment variables from env file.

    Defaults to config/local.env for local development.
    Set ENV_FILE environment variable to override. Values already present in
    the process environment win over the file.
    """
    global _loaded_env_file
    env = os.getenv("ENV_FILE", "config/local.env")
    if force or _loaded_env_file != env:
        load_dotenv(env, override=False)
        _loaded_env_file = env
    return env


def env_str(key: str, default: str) -> str:
    value = os.getenv(key)
    return value.strip() if value and value.strip() else default


def env_int(key: str, default: int) -> int:
    """Read an integer setting, falling back to the default on junk values."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default
