from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError

from .models import SessionData

logger = logging.getLogger(__name__)


@dataclass
class AuthStore:
    app_name: str = "ams"
    app_author: str = "AMS"
    filename: str = "session.json"
    base_dir: Path | None = None

    def _path(self) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, self.app_author))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def save(self, session: SessionData) -> None:
        """Writes next to the target and renames, so readers never see a partial token file."""
        path = self._path()
        staging = path.with_name(path.name + ".tmp")
        staging.write_text(session.model_dump_json(indent=2), encoding="utf-8")
        try:
            staging.chmod(0o600)
        except OSError:
            logger.warning("could not restrict permissions on %s", staging)
        staging.replace(path)

    def load(self) -> SessionData | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return SessionData.model_validate(data)
        except (json.JSONDecodeError, ValidationError):
            logger.warning("discarding unreadable session file %s", path)
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()
