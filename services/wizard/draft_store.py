# -*- coding: utf-8 -*-
"""
Draft Store - persists in-progress wizard input between sessions.

One JSON file per entity type under Config.DRAFTS_DIR. Every patch is
written through immediately; transient file handles never reach disk.
Anything unreadable on disk is treated as "no draft".
"""

import json
import os
import threading
from datetime import date
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from app.config import Config
from models.draft import Draft
from models.wizard import WizardDefinition
from utils.datetime_utils import from_date_isoformat, now_isoformat, to_isoformat
from utils.logger import get_logger

logger = get_logger(__name__)


class DraftStore:
    """
    Persistent draft of one wizard.

    Single writer: the current wizard session. Two sessions editing the
    same entity type overwrite each other (last write wins). Writes from a
    submission worker thread are serialized with the session's own edits.

    Dates are only accepted in the wizard's ``date_fields``, the keys that
    are turned back into dates on load.
    """

    def __init__(
        self,
        definition: WizardDefinition,
        storage_dir: Optional[Path] = None,
        defaults: Optional[Mapping[str, Any]] = None,
    ):
        self.definition = definition
        self.storage_dir = Path(storage_dir) if storage_dir else Config.DRAFTS_DIR
        self.defaults: Dict[str, Any] = dict(defaults or {})
        self._current: Optional[Draft] = None
        self._lock = threading.RLock()

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def current(self) -> Draft:
        """In-memory draft of the session (loaded on first access)."""
        with self._lock:
            if self._current is None:
                self._current = self.load()
            return self._current

    @property
    def path(self) -> Path:
        return self.storage_dir / f"{self.definition.storage_key}.json"

    def load(self, entity_type: Optional[str] = None) -> Draft:
        """
        Load the persisted draft, or a default draft if there is none.

        Corrupt, stale or foreign data is logged and ignored.
        """
        if entity_type is not None and entity_type != self.definition.entity_type:
            raise ValueError(
                f"This store holds '{self.definition.entity_type}' drafts, not '{entity_type}'"
            )

        with self._lock:
            fields = self._read()
            draft = self._new_draft(fields if fields is not None else dict(self.defaults))
            self._current = draft
            return draft

    def patch(self, partial: Mapping[str, Any]) -> Draft:
        """
        Shallow-merge ``partial`` into the current draft and persist it.

        Returns:
            The merged draft

        Raises:
            ValueError: if a date is given for a key outside ``date_fields``
        """
        self._check_dates(partial)
        with self._lock:
            draft = self.current.merged(partial)
            self._current = draft
            self._write(draft)
            return draft

    def clear(self):
        """Remove the persisted draft; the next load returns defaults."""
        try:
            self.path.unlink()
            logger.info(f"Draft cleared: {self.path.name}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove draft {self.path}: {e}")

    def reset(self) -> Draft:
        """Clear persisted data and start over from defaults."""
        with self._lock:
            self.clear()
            self._current = self._new_draft(dict(self.defaults))
            return self._current

    def has_saved_draft(self) -> bool:
        return self._read() is not None

    # =========================================================================
    # Persistence
    # =========================================================================

    def _check_dates(self, partial: Mapping[str, Any]):
        for key, value in partial.items():
            if isinstance(value, date) and key not in self.definition.date_fields:
                raise ValueError(f"'{key}' is not a date field of the {self.definition.entity_type} wizard")

    def _new_draft(self, fields: Dict[str, Any]) -> Draft:
        return Draft(
            entity_type=self.definition.entity_type,
            fields=fields,
            transient_fields=self.definition.transient_fields,
        )

    def _read(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None

        try:
            envelope = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable draft {self.path.name}: {e}")
            return None

        if not isinstance(envelope, dict) or not isinstance(envelope.get("data"), dict):
            logger.warning(f"Ignoring malformed draft {self.path.name}")
            return None
        if envelope.get("version") != Config.DRAFT_FORMAT_VERSION:
            logger.warning(
                f"Ignoring stale draft {self.path.name} "
                f"(version {envelope.get('version')}, expected {Config.DRAFT_FORMAT_VERSION})"
            )
            return None
        if envelope.get("entity_type") != self.definition.entity_type:
            logger.warning(f"Ignoring draft {self.path.name} for entity type {envelope.get('entity_type')}")
            return None

        fields = envelope["data"]
        for name in self.definition.date_fields:
            if fields.get(name) is not None:
                fields[name] = from_date_isoformat(fields[name])
        return fields

    def _serialize(self, draft: Draft) -> Dict[str, Any]:
        data = draft.to_dict()
        for name in self.definition.date_fields:
            if isinstance(data.get(name), date):
                data[name] = to_isoformat(data[name])
        return data

    def _write(self, draft: Draft):
        envelope = {
            "version": Config.DRAFT_FORMAT_VERSION,
            "entity_type": draft.entity_type,
            "saved_at": now_isoformat(),
            "data": self._serialize(draft),
        }
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(envelope, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            # The in-memory draft stays authoritative for this session
            logger.error(f"Failed to save draft {self.path.name}: {e}")
