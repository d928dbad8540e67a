"""Filesystem-backed persistence for the authentication session."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from consultores_client.application.ports.session_store import SessionStorePort
from consultores_client.domain.session import Session
from consultores_client.errors import StorageError

logger = logging.getLogger("consultores_client.state.session_file")

SESSION_STORAGE_KEY = "consultores.auth.session"


class StoredSessionRecord(BaseModel):
    """On-disk shape of the session record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", strict=True)

    email: str
    id_token: str = Field(alias="idToken")
    refresh_token: str = Field(alias="refreshToken")
    expires_at: int = Field(alias="expiresAt")

    @classmethod
    def from_session(cls, session: Session) -> StoredSessionRecord:
        return cls(
            email=session.identifier,
            id_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
        )

    def to_session(self) -> Session:
        return Session(
            identifier=self.email,
            access_token=self.id_token,
            refresh_token=self.refresh_token,
            expires_at=self.expires_at,
        )


class FileSessionStore(SessionStorePort):
    """Persist the session as a single JSON document.

    Storage and decode failures never escape: a record that cannot be read is
    reported as absent and a record that cannot be written is logged and
    dropped. Callers therefore always see either a complete session or none.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # public API

    def load(self) -> Session | None:
        try:
            return self._read_session(self._path)
        except StorageError as exc:
            logger.warning(
                "stored session unreadable, treating as absent",
                extra={"data": {"path": str(self._path), "error": str(exc)}},
            )
            return None

    def save(self, session: Session | None) -> None:
        try:
            if session is None:
                self._delete(self._path)
            else:
                self._write_session(self._path, session)
        except StorageError as exc:
            logger.warning(
                "session write-through failed",
                extra={"data": {"path": str(self._path), "error": str(exc)}},
            )

    # ------------------------------------------------------------------
    # helpers

    def _read_session(self, path: Path) -> Session | None:
        try:
            if not path.exists():
                return None
            raw = path.read_bytes()
        except OSError as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc
        try:
            text = raw.decode("utf-8")
            if not text.strip():
                return None
            record = StoredSessionRecord.model_validate(json.loads(text))
            return record.to_session()
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError, ValueError) as exc:
            raise StorageError(f"session file {path} is malformed: {exc}") from exc

    def _write_session(self, path: Path, session: Session) -> None:
        record = StoredSessionRecord.from_session(session)
        payload = record.model_dump_json(by_alias=True)
        tmp_path = Path(f"{path}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StorageError(f"cannot write {path}: {exc}") from exc

    def _delete(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot delete {path}: {exc}") from exc


__all__ = ["FileSessionStore", "SESSION_STORAGE_KEY", "StoredSessionRecord"]
