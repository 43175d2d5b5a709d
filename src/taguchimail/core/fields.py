"""
Field mapping between typed record attributes and a backing dictionary.

Every record keeps its server-visible state in a plain dict keyed by wire
field names (the backing store). Record classes declare their public
attributes as Field descriptors that name the wire key and whether callers
may write it; derived fields compute their value from other backing-store
content instead of a single key.
"""

import json
import logging
from typing import Any, Dict, Optional

from ..exceptions import InvalidFieldError

logger = logging.getLogger(__name__)


def stringify(value: Any) -> Optional[str]:
    """
    Convert a backing-store value to the string form returned by reads.

    None stays None, booleans become 'true'/'false', numbers use str(),
    lists and dicts are rendered as compact JSON.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


class Field:
    """
    A logical record field stored under a single wire key.

    Reading returns the stringified value, or None when the key is absent.
    Writing stores the value as given.

    Attributes:
        wire: Backing-store key
        writable: Whether callers may assign the field
        name: Logical attribute name, filled in when the owning class is built
    """

    def __init__(self, wire: str, writable: bool = True) -> None:
        self.wire = wire
        self.writable = writable
        self.name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: Optional[type] = None) -> Any:
        if obj is None:
            return self
        return self.read(obj)

    def __set__(self, obj: "Mapped", value: Any) -> None:
        if not self.writable:
            obj._reject_write(self.name, "read-only")
            return
        self.write(obj, value)

    def read(self, obj: "Mapped") -> Any:
        return stringify(obj._backing.get(self.wire))

    def write(self, obj: "Mapped", value: Any) -> None:
        obj._backing[self.wire] = value

    def __repr__(self) -> str:
        mode = "rw" if self.writable else "ro"
        return f"<{self.__class__.__name__} {self.name}->{self.wire} {mode}>"


class DerivedField(Field):
    """
    A logical field computed from other backing-store content.

    Subclasses implement compute() and, if writable, compose(), which
    rewrites the underlying structure rather than a single key.
    """

    def __init__(self, writable: bool = True) -> None:
        super().__init__(wire="", writable=writable)

    def read(self, obj: "Mapped") -> Any:
        return self.compute(obj)

    def write(self, obj: "Mapped", value: Any) -> None:
        self.compose(obj, value)

    def compute(self, obj: "Mapped") -> Any:
        raise NotImplementedError

    def compose(self, obj: "Mapped", value: Any) -> None:
        raise NotImplementedError


class Mapped:
    """
    Base class for objects backed by an untyped field dictionary.

    Subclasses declare Field attributes; they are collected into the
    ``fields`` table (logical name -> Field) when the class is created.

    With ``strict`` (the default) writing an unknown or read-only field
    raises InvalidFieldError. With ``strict=False`` such writes are ignored,
    matching the behavior of earlier TaguchiMail client libraries.

    Keys present in the backing store but not declared as fields are kept
    and sent back to the server unchanged.
    """

    fields: Dict[str, Field] = {}
    record_id = Field("id", writable=False)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: Dict[str, Field] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, Field):
                    table[name] = attr
        cls.fields = table

    def __init__(
        self, backing: Optional[Dict[str, Any]] = None, strict: bool = True
    ) -> None:
        object.__setattr__(self, "_strict", strict)
        object.__setattr__(self, "_backing", {} if backing is None else backing)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or name in self.fields:
            object.__setattr__(self, name, value)
            return
        self._reject_write(name, "unknown")

    def _reject_write(self, name: Optional[str], reason: str) -> None:
        kind = self.__class__.__name__
        if self._strict:
            raise InvalidFieldError(
                f"Cannot write {reason} field {name!r} on {kind}", field=name
            )
        logger.debug(f"Ignoring write to {reason} field {name!r} on {kind}")

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def backing(self) -> Dict[str, Any]:
        """The backing store itself (wire key -> JSON value)."""
        return self._backing

    def get_raw(self, name: str) -> Any:
        """
        Return the unstringified backing value for a logical field.

        Raises:
            InvalidFieldError: If the name is not a declared field
        """
        field = self.fields.get(name)
        if field is None or isinstance(field, DerivedField):
            raise InvalidFieldError(
                f"{self.__class__.__name__} has no stored field {name!r}", field=name
            )
        return self._backing.get(field.wire)

    def to_dict(self) -> Dict[str, Any]:
        """Return a shallow copy of the backing store."""
        return dict(self._backing)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self._backing.get('id')}>"
