"""Settings source for the session API client

Values resolve in this order: process environment, then the ``.env`` file,
then the default passed by the caller. Environment strings are converted to
the default's type, so ``REFRESH_SKEW_SECONDS=120`` yields an int.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")


class ConfigLoader:
    """Reads typed settings from the environment and an optional .env file"""

    def __init__(self, env_path: Optional[str] = None):
        """Initialize the config loader

        Args:
            env_path: Optional path to .env file.
                     Defaults to '.env' in the current directory.
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self.loaded_env_file = False

        if self.env_path.exists():
            # Variables already set in the process are not overwritten
            load_dotenv(dotenv_path=self.env_path, override=False)
            self.loaded_env_file = True
            logger.debug(f"Loaded settings from {self.env_path}")
        else:
            logger.debug(f"No .env file at {self.env_path}, using environment and defaults")

    def get(self, name: str, default: Any) -> Any:
        """Look up a setting

        Args:
            name: Environment variable name
            default: Value used when the variable is unset; also fixes the type

        Returns:
            The typed value. Strings starting with ``~`` are expanded to the
            user's home directory.
        """
        raw = os.getenv(name)
        if raw is None:
            return self._expand(default)

        # bool before int: bool is an int subclass
        if isinstance(default, bool):
            return raw.strip().lower() in _TRUE_VALUES
        if isinstance(default, (int, float)):
            return self._number(name, raw, default)
        return self._expand(raw)

    @staticmethod
    def _number(name: str, raw: str, default):
        try:
            return type(default)(raw.strip())
        except ValueError:
            logger.warning(
                f"Ignoring {name}={raw!r}: not a valid {type(default).__name__}, using {default}"
            )
            return default

    @staticmethod
    def _expand(value: Any) -> Any:
        if isinstance(value, str) and value.startswith("~"):
            return os.path.expanduser(value)
        return value


_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the process-wide ConfigLoader"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
