"""
Credential Store Module

Persists the API key in a small JSON key-value file.
Failures are logged and degrade to "no credential"; they never propagate.
"""

import os
import json
import logging
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Union

from ..config import DEFAULT_CREDENTIALS_PATH

# Configure logging
logger = logging.getLogger(__name__)

API_KEY_KEY = "rule-harvester-api-key"


def masked(api_key: str, visible: int = 4) -> str:
    """Return the key with all but its last characters hidden."""
    if not api_key:
        return ''
    if len(api_key) <= visible:
        return '*' * len(api_key)
    return '*' * (len(api_key) - visible) + api_key[-visible:]


class CredentialStore:
    """Saves, reads and clears the API key."""

    def __init__(self, path: Union[str, Path] = DEFAULT_CREDENTIALS_PATH):
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        with open(self.path, 'r', encoding='utf-8') as store_file:
            data = json.load(store_file)

        if not isinstance(data, dict):
            logger.warning(f"Ignoring invalid credential store structure in {self.path}")
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        """Write the store atomically through a temporary file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(dir=self.path.parent, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as temp_file:
                json.dump(data, temp_file, indent=2)
            os.chmod(temp_path, 0o600)
            shutil.move(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def save(self, api_key: str) -> bool:
        """Store the API key.

        Returns:
            bool: True if the key was written
        """
        try:
            data = self._load()
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Replacing unreadable credential store: {e}")
            data = {}

        data[API_KEY_KEY] = api_key
        try:
            self._write(data)
            logger.info(f"Saved API key to {self.path}")
            return True
        except OSError as e:
            logger.error(f"Error saving API key: {e}")
            return False

    def get(self) -> str:
        """Return the stored API key, or an empty string if there is none."""
        try:
            value = self._load().get(API_KEY_KEY, '')
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error getting API key: {e}")
            return ''
        return value if isinstance(value, str) else ''

    def clear(self) -> bool:
        """Remove the stored API key.

        Returns:
            bool: True if the store no longer holds a key
        """
        try:
            data = self._load()
            if API_KEY_KEY not in data:
                return True
            del data[API_KEY_KEY]
            self._write(data)
            logger.info("Cleared API key")
            return True
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error clearing API key: {e}")
            return False
