"""
File Writer Module
Handles writing exported rules in JSON and CSV formats.
"""

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Iterable, Union

import pandas as pd

from ..models import Rule

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "rules-export"


def export_filename(extension: str = "json", today: Optional[date] = None) -> str:
    """Build the export filename for the given (UTC) date."""
    today = today or datetime.now(timezone.utc).date()
    return f"{EXPORT_PREFIX}-{today.isoformat()}.{extension}"


def build_export_data(rules: Iterable[Rule]) -> List[Dict[str, str]]:
    """Strip identifiers, keeping rule order."""
    return [rule.to_export_dict() for rule in rules]


def serialize_export_data(export_data: List[Dict[str, str]]) -> str:
    """Serialize export data to a JSON array with 2-space indentation."""
    return json.dumps(export_data, indent=2, ensure_ascii=False)


class RuleFileWriter:
    """Writes exported rules to the outputs directory."""

    def __init__(self, outputs_dir: Union[str, Path] = "outputs"):
        self.outputs_dir = Path(outputs_dir)

    def _target(self, filename: str) -> Path:
        self.outputs_dir.mkdir(parents=True, exist_ok=True)
        return self.outputs_dir / filename

    def write_json(self, export_data: List[Dict[str, str]], filename: str) -> Path:
        """Write export data as pretty-printed JSON.

        Args:
            export_data: List of {title, description} objects
            filename: Name of the file inside the outputs directory

        Returns:
            Path: Path of the written file
        """
        path = self._target(filename)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(serialize_export_data(export_data))
        except OSError as e:
            logger.error(f"Error exporting rules to {path}: {e}")
            raise

        logger.info(f"Written {len(export_data)} rules to {path}")
        return path

    def write_csv(self, export_data: List[Dict[str, str]], filename: str) -> Path:
        """Write export data as a CSV with title and description columns."""
        path = self._target(filename)
        df = pd.DataFrame(export_data, columns=Rule.EXPORT_FIELDS)
        try:
            df.to_csv(path, index=False)
        except OSError as e:
            logger.error(f"Error exporting rules to {path}: {e}")
            raise

        logger.info(f"Written {len(df)} rules to {path}")
        return path

    def write(self, export_data: List[Dict[str, str]], filename: str) -> Path:
        """Write export data in the format implied by the filename extension."""
        if filename.endswith('.csv'):
            return self.write_csv(export_data, filename)
        return self.write_json(export_data, filename)
