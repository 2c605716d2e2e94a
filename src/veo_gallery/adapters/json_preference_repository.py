"""JSON file storage for client preferences."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from veo_gallery.services.preferences import PreferenceRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonPreferenceRepository(PreferenceRepository):
    """Preferences kept as a flat JSON object on local disk."""

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a value, rewriting the file atomically."""
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            _logger.warning("Ignoring unreadable preferences file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}
