"""
Query predicates for TaguchiMail find requests.

A predicate is a single ``field-operator-value`` filter, sent to the API as
a repeated ``query`` parameter. Operators map to fixed server-side
comparisons:

* ``eq`` / ``neq``: SQL ``=`` / ``!=`` (case-sensitive for strings)
* ``lt`` / ``gt`` / ``lte`` / ``gte``: SQL ordering comparisons
* ``re`` / ``rei``: PostgreSQL ``~`` / ``~*`` POSIX regular expression match
* ``like``: SQL ``LIKE`` (case-sensitive)
* ``is`` / ``nt``: SQL ``IS`` / ``IS NOT``, for NULL tests, since
  ``field-eq-null`` is always false

Dashes inside the field, operator or value are not escaped.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

from .exceptions import QueryError

logger = logging.getLogger(__name__)


class Operator(str, Enum):
    """Comparison operators understood by the query parameter."""

    EQ = "eq"
    NEQ = "neq"
    LT = "lt"
    GT = "gt"
    LTE = "lte"
    GTE = "gte"
    RE = "re"
    REI = "rei"
    LIKE = "like"
    IS = "is"
    NT = "nt"


@dataclass(frozen=True, init=False)
class QueryPredicate:
    """
    An immutable ``field-operator-value`` filter.

    Examples:
        >>> str(QueryPredicate("email", "eq", "john@example.org"))
        'email-eq-john@example.org'
        >>> QueryPredicate("unsubscribed", Operator.IS, None).serialize()
        'unsubscribed-is-null'
    """

    field: str
    operator: Operator
    value: str

    def __init__(self, field: str, operator: Union[Operator, str], value: Any) -> None:
        try:
            op = Operator(operator)
        except ValueError:
            raise QueryError(
                f"Unknown query operator: {operator!r} "
                f"(expected one of {', '.join(o.value for o in Operator)})"
            ) from None
        object.__setattr__(self, "field", str(field))
        object.__setattr__(self, "operator", op)
        object.__setattr__(self, "value", "null" if value is None else str(value))

    def serialize(self) -> str:
        """Return the wire form of this predicate."""
        return f"{self.field}-{self.operator.value}-{self.value}"

    def __str__(self) -> str:
        return self.serialize()


def serialize_predicates(
    predicates: Optional[Union[Iterable[Union[QueryPredicate, str]], QueryPredicate, str]],
) -> List[str]:
    """
    Serialize predicates for the query string.

    Preformatted strings are forwarded verbatim. A lone predicate or string
    is treated as a one-element list.

    Args:
        predicates: Predicates or preformatted predicate strings

    Returns:
        List of wire-form predicate strings, in the given order
    """
    if not predicates:
        return []
    if isinstance(predicates, (str, QueryPredicate)):
        predicates = [predicates]
    return [str(p) for p in predicates]
