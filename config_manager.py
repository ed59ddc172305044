"""Configuration file management."""
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads application configuration. Mixer state is never saved."""

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = config_file or Path(__file__).parent / "config.json"
        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from file, falling back to defaults."""
        config = self._default_config()
        if not self.config_file.exists():
            return config
        try:
            with open(self.config_file, 'r') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("ignoring config file %s: %s", self.config_file, e)
            return config
        if isinstance(loaded, dict):
            config.update(loaded)
        else:
            logger.warning("ignoring config file %s: not a JSON object", self.config_file)
        return config

    def _default_config(self) -> dict:
        """Return default configuration."""
        return {
            "mixer_device": None,
        }

    # ── Mixer device ─────────────────────────────────────────────

    def get_mixer_device(self) -> Optional[str]:
        """Get the configured mixer device path, or None for the default."""
        return self.config.get("mixer_device")
