from pathlib import Path
from typing import Dict, Optional, Any

import yaml


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    flat: Dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = str(value)
    return flat


class MessageCatalog:
    """Message templates keyed by dotted ids, e.g. ``generate.file.success``."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or Path(__file__).parent.parent / "assets" / "messages.yaml"
        self._templates: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._templates is None:
            with self.path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            self._templates = _flatten(data)
        return self._templates

    def get(self, msg_id: str) -> str:
        # Unknown ids fall through as literal text.
        return self._load().get(msg_id, msg_id)
