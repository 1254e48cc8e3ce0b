"""Configuration management using msgspec Struct."""

import functools
import logging
import os

import msgspec

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_SCHEMES = {"basic", "aug", "pop"}


class Config(msgspec.Struct, frozen=True):
    """Library configuration using msgspec Struct."""

    # Logging
    log_level: str = "INFO"

    # Scheme used by get_scheme() when no kind is given
    default_scheme: str = "aug"

    # Metrics settings
    metrics_enabled: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got {self.log_level}")

        if self.default_scheme.lower() not in VALID_SCHEMES:
            raise ValueError(
                f"default_scheme must be one of {VALID_SCHEMES}, got {self.default_scheme}"
            )

    @property
    def normalized_log_level(self) -> str:
        """Return normalized uppercase log level."""
        return self.log_level.upper()

    @property
    def normalized_default_scheme(self) -> str:
        """Return normalized lowercase scheme name."""
        return self.default_scheme.lower()


@functools.lru_cache(maxsize=1)
def get_config() -> Config:
    """Load configuration from PY3BLS_* environment variables.

    The result is cached; call ``reload_config()`` after changing the
    environment. A failed load is not cached.

    Raises:
        ValueError: If any variable holds an invalid value

    """
    config_dict: dict[str, object] = {
        "log_level": os.getenv("PY3BLS_LOG_LEVEL", "INFO"),
        "default_scheme": os.getenv("PY3BLS_DEFAULT_SCHEME", "aug"),
        "metrics_enabled": _metrics_enabled_env(),
    }

    # strict=False lets msgspec coerce "true"/"false"/"1"/"0" into a bool
    try:
        config = msgspec.convert(config_dict, Config, strict=False)
    except msgspec.ValidationError as e:
        raise ValueError(f"Configuration validation error: {e}") from e

    return config


@functools.lru_cache(maxsize=1)
def get_metrics_enabled() -> bool:
    """Read only PY3BLS_METRICS_ENABLED, falling back to True if unparseable.

    Consulted on every sign and verify call. Never raises and ignores the
    other PY3BLS_* variables.
    """
    raw = _metrics_enabled_env()
    try:
        return msgspec.convert(raw, bool, strict=False)
    except msgspec.ValidationError:
        logger.warning(f"Ignoring invalid PY3BLS_METRICS_ENABLED={raw!r}, metrics stay enabled")
        return True


def reload_config() -> None:
    """Drop cached configuration so the next read sees the current environment."""
    get_config.cache_clear()
    get_metrics_enabled.cache_clear()


def _metrics_enabled_env() -> str:
    return os.getenv("PY3BLS_METRICS_ENABLED", "true").strip().lower()


def setup_logging(log_level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
