"""Core functionality for TaguchiMail connections and records."""

from .base import BaseConnection
from .credentials import CredentialManager
from .fields import DerivedField, Field, Mapped
from .record import Record
from .revisions import LatestRevision, Revision, RevisionedRecord

__all__ = [
    "BaseConnection",
    "CredentialManager",
    "DerivedField",
    "Field",
    "Mapped",
    "Record",
    "LatestRevision",
    "Revision",
    "RevisionedRecord",
]
