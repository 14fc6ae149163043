"""File-backed persistence for exported classifier models."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from tanya.errors import ModelFormatError

logger = logging.getLogger(__name__)


class ModelStore:
    """Reads and writes one model JSON file.

    Writes go to ``<path>.tmp`` first and are renamed into place, so a
    reader never sees a half-written model.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, blob: Mapping[str, Any], dataset_size: int | None = None) -> Path:
        payload = {
            "model": dict(blob),
            "metadata": {
                "saved_at": datetime.now(timezone.utc).isoformat(),
                "dataset_size": dataset_size,
            },
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(payload, f)
        os.replace(tmp, self.path)
        logger.info(f"[ModelStore] Saved model to {self.path}")
        return self.path

    def load(self) -> dict[str, Any] | None:
        """Return the stored model blob, or None if no model file exists.

        Raises:
            ModelFormatError: If the file exists but cannot be parsed
        """
        if not self.exists():
            logger.info(f"[ModelStore] No model at {self.path}")
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ModelFormatError(f"Cannot read model file {self.path}: {e}") from e
        if not isinstance(payload, dict) or "model" not in payload:
            raise ModelFormatError(f"Model file {self.path} has no 'model' section")
        return payload["model"]
