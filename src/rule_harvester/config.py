"""
Configuration Module
Loads settings from the environment (and a local .env file) and sets up logging.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_ENDPOINT = "https://models.inference.ai.azure.com"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_CREDENTIALS_PATH = "~/.rule_harvester/credentials.json"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class Settings:
    """Runtime settings for a harvesting session."""
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    timeout: float = 60.0
    credentials_path: Path = Path(DEFAULT_CREDENTIALS_PATH).expanduser()
    output_dir: Path = Path("outputs")
    log_dir: Path = Path("logs")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from RULE_HARVESTER_* environment variables."""
        return cls(
            endpoint=os.getenv("RULE_HARVESTER_ENDPOINT", DEFAULT_ENDPOINT),
            model=os.getenv("RULE_HARVESTER_MODEL", DEFAULT_MODEL),
            timeout=float(os.getenv("RULE_HARVESTER_TIMEOUT", "60")),
            credentials_path=Path(
                os.getenv("RULE_HARVESTER_CREDENTIALS_PATH", DEFAULT_CREDENTIALS_PATH)
            ).expanduser(),
            output_dir=Path(os.getenv("RULE_HARVESTER_OUTPUT_DIR", "outputs")),
            log_dir=Path(os.getenv("RULE_HARVESTER_LOG_DIR", "logs")),
            log_level=os.getenv("RULE_HARVESTER_LOG_LEVEL", "INFO").upper()
        )


def configure_logging(settings: Settings) -> None:
    """Log to logs/harvester.log and keep the console to warnings and above.

    Args:
        settings: Session settings carrying the log directory and level
    """
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(settings.log_dir / 'harvester.log', mode='a')
    file_handler.setLevel(settings.log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)

    logging.basicConfig(
        level=settings.log_level,
        format=LOG_FORMAT,
        handlers=[file_handler, console_handler],
        force=True
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
