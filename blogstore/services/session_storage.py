"""File-backed persistence for the identity provider session."""

import logging
from pathlib import Path

from pydantic import ValidationError

from blogstore.models.session import Session

logger = logging.getLogger(__name__)


class SessionStorage:
    """Keeps the last issued session on disk so it survives restarts.

    Usage::

        storage = SessionStorage(Path("~/.blogstore/session.json").expanduser())
        storage.save(session)
        restored = storage.load()  # Session or None
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Session | None:
        """Return the stored session, or None if missing or unreadable."""
        if not self._path.is_file():
            return None
        try:
            return Session.model_validate_json(self._path.read_text())
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self._path, e)
            return None

    def save(self, session: Session) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(session.model_dump_json())

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
