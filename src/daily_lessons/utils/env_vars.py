import logging
import os

_LOGGER = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT_SECONDS = 15
DEFAULT_SYNC_QUEUE_SIZE = 32


def _get_resource_by_env_var(env_var: str) -> str:
    value = os.environ.get(env_var)
    if not value:
        raise ValueError(f"Missing environment variable: {env_var}")
    return value


def _get_positive_int_env_var(env_var: str, default: int) -> int:
    raw_value = os.environ.get(env_var)
    if raw_value is None or raw_value == "":
        return default
    try:
        value = int(raw_value)
    except ValueError:
        _LOGGER.warning(f"Invalid {env_var} value '{raw_value}', using default {default}")
        return default
    if value <= 0:
        _LOGGER.warning(f"Non-positive {env_var} value '{raw_value}', using default {default}")
        return default
    return value


def get_supabase_url() -> str:
    return _get_resource_by_env_var("SUPABASE_URL").rstrip("/")


def get_supabase_anon_key() -> str:
    return _get_resource_by_env_var("SUPABASE_ANON_KEY")


def get_request_timeout_seconds() -> int:
    return _get_positive_int_env_var("LESSON_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS)


def get_sync_queue_size() -> int:
    """
    Maximum number of pending progress writes held by the background sync queue.
    Defaults to 32 if not set or invalid.
    """
    return _get_positive_int_env_var("PROGRESS_SYNC_QUEUE_SIZE", DEFAULT_SYNC_QUEUE_SIZE)
