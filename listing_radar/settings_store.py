import json
import logging

from pydantic import ValidationError

from .models import ScanSettings
from .storage import KeyValueStorage

SETTINGS_KEY = "listingRadar_settings"

logger = logging.getLogger(__name__)


class SettingsStore:
    """Load/save passthrough for the user's scan settings."""

    def __init__(self, storage: KeyValueStorage, key: str = SETTINGS_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> ScanSettings:
        try:
            raw = self.storage.get(self.key)
            if raw:
                return ScanSettings.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable settings: {e}")
        except Exception as e:
            logger.warning(f"Could not read settings: {e}")
        return ScanSettings()

    def save(self, settings: ScanSettings) -> bool:
        try:
            self.storage.set(self.key, settings.model_dump_json(by_alias=True))
        except Exception as e:
            logger.error(f"Failed to save settings: {e}")
            return False
        logger.info("Settings saved")
        return True
