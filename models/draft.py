# -*- coding: utf-8 -*-
"""
Draft entity model.

A draft is the partially filled create-form of one entity type. Its
``fields`` are persisted between sessions; its ``files`` are transient
file handles that only live in memory until they are uploaded.
"""

import copy
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union


@dataclass(frozen=True)
class MediaFile:
    """A local image chosen by the user and not uploaded yet."""

    path: Path
    name: str
    mime_type: str
    size: int

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "MediaFile":
        """Build a handle for a file on disk (raises OSError if it is missing)."""
        path = Path(path)
        size = path.stat().st_size
        mime_type = mimetypes.guess_type(str(path))[0] or "application/octet-stream"
        return cls(path=path, name=path.name, mime_type=mime_type, size=size)

    @property
    def size_mb(self) -> float:
        return self.size / (1024 * 1024)


@dataclass
class Draft:
    """
    Partially filled entity being created.

    ``transient_fields`` names the keys that hold MediaFile handles; patches
    touching those keys update ``files`` instead of ``fields``.
    """

    entity_type: str
    fields: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, MediaFile] = field(default_factory=dict)
    transient_fields: FrozenSet[str] = frozenset()

    def get(self, key: str, default: Any = None) -> Any:
        """Look a key up in the transient files first, then in the fields."""
        if key in self.transient_fields:
            return self.files.get(key, default)
        return self.fields.get(key, default)

    def merged(self, partial: Mapping[str, Any]) -> "Draft":
        """Return a new draft with ``partial`` shallow-merged in."""
        fields = dict(self.fields)
        files = dict(self.files)
        for key, value in partial.items():
            if key in self.transient_fields:
                if value is None:
                    files.pop(key, None)
                else:
                    files[key] = value
            else:
                fields[key] = value
        return Draft(
            entity_type=self.entity_type,
            fields=fields,
            files=files,
            transient_fields=self.transient_fields,
        )

    def without_files(self) -> "Draft":
        """Same persisted fields, no transient handles."""
        return Draft(
            entity_type=self.entity_type,
            fields=dict(self.fields),
            transient_fields=self.transient_fields,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Persistable fields only; transient handles are never included."""
        return copy.deepcopy(self.fields)

    def is_empty(self) -> bool:
        return not self.fields and not self.files

    def file_for(self, key: str) -> Optional[MediaFile]:
        return self.files.get(key)
