"""
Revision handling for records with versioned content (activities, templates).

Newly authored content lives in the record's ``revisions`` list and is sent
on the next create/update. Once saved, those revisions move to
``existing_revisions`` so saving again does not create them a second time.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .fields import DerivedField, Mapped
from .record import Record

logger = logging.getLogger(__name__)


class Revision(Mapped):
    """
    Content revision nested inside a parent record.

    Attributes:
        composed_keys: Wire keys copied into the parent's pending revision
            when this revision is assigned to ``latest_revision``
    """

    composed_keys: Tuple[str, ...] = ("content",)

    def __init__(
        self,
        parent: Optional["RevisionedRecord"] = None,
        backing: Optional[Dict[str, Any]] = None,
        strict: bool = True,
    ) -> None:
        super().__init__(backing=backing, strict=strict)
        self._parent = parent

    @property
    def parent(self) -> Optional["RevisionedRecord"]:
        return self._parent

    def composed(self) -> Dict[str, Any]:
        return {key: self._backing.get(key) for key in self.composed_keys}


class LatestRevision(DerivedField):
    """
    The latest revision of a record.

    Reads the first pending revision, else the first existing one, else
    None. Assigning a revision replaces the first pending revision (or adds
    one); assigning None drops pending revisions.
    """

    def compute(self, obj: "RevisionedRecord") -> Optional[Revision]:
        pending = obj._backing.get("revisions") or []
        if pending:
            source = pending[0]
        elif obj._existing_revisions:
            source = obj._existing_revisions[0]
        else:
            return None
        return obj.revision_class(parent=obj, backing=dict(source))

    def compose(self, obj: "RevisionedRecord", value: Optional[Revision]) -> None:
        if value is None:
            obj._backing["revisions"] = []
            return
        if not isinstance(value, Revision):
            raise TypeError(
                f"latest_revision must be a {obj.revision_class.__name__}, "
                f"got {type(value).__name__}"
            )
        pending = obj._backing.get("revisions")
        if not isinstance(pending, list):
            pending = []
            obj._backing["revisions"] = pending
        if pending:
            pending[0] = value.composed()
        else:
            pending.append(value.composed())


class RevisionedRecord(Record):
    """
    A record whose ``revisions`` are tracked as pending vs. existing.

    Attributes:
        revision_class: Revision type returned by ``latest_revision``
    """

    revision_class: Type[Revision] = Revision
    latest_revision = LatestRevision()

    def __init__(self, context: Any, strict: bool = True) -> None:
        super().__init__(context, strict=strict)
        self._existing_revisions: List[Dict[str, Any]] = []

    @property
    def existing_revisions(self) -> List[Dict[str, Any]]:
        """Revisions already stored on the server (read-only history)."""
        return list(self._existing_revisions)

    @property
    def pending_revisions(self) -> List[Dict[str, Any]]:
        """Revisions that will be sent on the next save."""
        return list(self._backing.get("revisions") or [])

    def _absorb(self, data: Dict[str, Any]) -> None:
        # Keep revisions out of the backing store so they are not sent back.
        self._existing_revisions = list(data.get("revisions") or [])
        data["revisions"] = []
        super()._absorb(data)

    def _save(self, save: Callable[[], Record]) -> "RevisionedRecord":
        sent = self.pending_revisions
        previous = self._existing_revisions
        save()
        if not self._existing_revisions:
            self._existing_revisions = sent or previous
        logger.debug(
            f"{self.resource_type} saved with {len(sent)} new revision(s); "
            f"{len(self._existing_revisions)} existing"
        )
        return self

    def create(self) -> "RevisionedRecord":
        return self._save(super().create)

    def update(self) -> "RevisionedRecord":
        return self._save(super().update)

    def create_or_update(self) -> "RevisionedRecord":
        return self._save(super().create_or_update)

    @classmethod
    def get_with_content(
        cls, context: Any, record_id: Any, parameters: Optional[Dict[str, Any]] = None
    ) -> "RevisionedRecord":
        """
        Retrieve a record together with its latest revision content.

        Args:
            context: Context to query
            record_id: The record's unique identifier
            parameters: Additional request parameters; ``revision`` is
                always set to 'latest'
        """
        params = dict(parameters or {})
        params["revision"] = "latest"
        return cls.get(context, record_id, params)
