"""
Configuration for the co-signer callback.

All settings are read from ``CALLBACK_*`` environment variables.
"""
import os
import logging
from dataclasses import dataclass, field
from typing import Optional

from .envelope import DEFAULT_ALGORITHM, is_safe_jwt_algorithm
from .validator import DEFAULT_DECIMALS

# Configure logger
logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got: {raw!r})")


def get_log_level() -> str:
    """
    Get the log level from environment variables.

    Returns:
        Upper-case logging level name, INFO for unknown values
    """
    level = os.environ.get("CALLBACK_LOG_LEVEL", "INFO").upper()
    if level not in LOG_LEVELS:
        logger.warning(f"Unknown log level: {level}, defaulting to INFO")
        return "INFO"
    return level


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, built once at startup"""
    private_key_path: str = "callback_private.pem"
    cosigner_pubkey_path: str = "cosigner_public.pem"
    private_key_password: Optional[str] = field(default=None, repr=False)
    native_decimals: int = DEFAULT_DECIMALS
    jwt_algorithm: str = DEFAULT_ALGORITHM
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    auth_log_interval: int = 60

    def __post_init__(self):
        if not is_safe_jwt_algorithm(self.jwt_algorithm):
            raise ValueError(f"Unsafe JWT algorithm configured: {self.jwt_algorithm!r}")
        if self.native_decimals < 0:
            raise ValueError("native_decimals must be non-negative")

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from ``CALLBACK_*`` environment variables.

        Raises:
            ValueError: If a numeric variable is not an integer or the
                configured algorithm is unsafe
        """
        return cls(
            private_key_path=os.environ.get("CALLBACK_PRIVATE_KEY_PATH", cls.private_key_path),
            cosigner_pubkey_path=os.environ.get("CALLBACK_COSIGNER_PUBKEY_PATH", cls.cosigner_pubkey_path),
            private_key_password=os.environ.get("CALLBACK_PRIVATE_KEY_PASSWORD"),
            native_decimals=_env_int("CALLBACK_NATIVE_DECIMALS", DEFAULT_DECIMALS),
            jwt_algorithm=os.environ.get("CALLBACK_JWT_ALGORITHM", DEFAULT_ALGORITHM),
            host=os.environ.get("CALLBACK_HOST", cls.host),
            port=_env_int("CALLBACK_PORT", cls.port),
            log_level=get_log_level(),
            auth_log_interval=_env_int("CALLBACK_AUTH_LOG_INTERVAL", cls.auth_log_interval),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
