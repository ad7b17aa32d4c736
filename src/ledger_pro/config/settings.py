from dataclasses import dataclass
from pathlib import Path
import json
from typing import Dict, Any, Optional

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored)
PROJECT_ROOT = Path(__file__).resolve().parents[3]
USER_CONFIG_DIR = PROJECT_ROOT / "config"

class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'ledger.json')

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = USER_CONFIG_DIR / config_name
        if user_config_path.exists():
            with open(user_config_path) as f:
                return json.load(f)
            
        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path) as f:
                return json.load(f)
            
        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_ledger_config() -> Dict[str, Any]:
        """Load the ledger settings file"""
        return ConfigLoader.load_config('ledger.json')


@dataclass
class LedgerSettings:
    """Runtime settings for the ledger application"""
    database_path: Path = Path("data/ledger.db")
    closed_flags_path: Path = Path("data/closed_accounts.json")
    log_level: Optional[str] = None

    @classmethod
    def load(cls, config: Optional[Dict[str, Any]] = None) -> "LedgerSettings":
        """
        Build settings from configuration.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Useful for testing with custom configs.

        Returns:
            Settings with defaults filled in for missing keys
        """
        if config is None:
            try:
                config = ConfigLoader.load_ledger_config()
            except FileNotFoundError:
                config = {}

        defaults = cls()
        return cls(
            database_path=Path(config.get("database_path", defaults.database_path)),
            closed_flags_path=Path(
                config.get("closed_flags_path", defaults.closed_flags_path)
            ),
            log_level=config.get("log_level", defaults.log_level),
        )
