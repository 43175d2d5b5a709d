"""
Generic record lifecycle for TaguchiMail resources.

Record implements get, find, create, update and create_or_update once;
concrete resource classes only set ``resource_type``, declare their fields,
and may override ``_absorb`` to reshape records taken from a response.

Every write sends the backing store wrapped in a one-element JSON array,
and every response is a JSON array of record objects.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from ..exceptions import InvalidFieldError, ResponseError
from ..query import QueryPredicate
from .fields import Mapped

logger = logging.getLogger(__name__)

R = TypeVar("R", bound="Record")


def decode_records(body: str, resource: str) -> List[Dict[str, Any]]:
    """
    Decode a response body into a list of record dicts.

    Raises:
        ResponseError: If the body is not JSON, or not an array of objects
    """
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise ResponseError(
            f"Invalid JSON in {resource} response: {str(e)}", body=body
        ) from e

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ResponseError(
            f"Expected a JSON array of {resource} records, got {type(data).__name__}",
            body=body,
        )
    return data


class Record(Mapped):
    """
    Base class for TaguchiMail record types.

    Attributes:
        resource_type: API resource name (e.g. 'subscriber')
    """

    resource_type: str = ""

    def __init__(self, context: Any, strict: bool = True) -> None:
        """
        Initialize an empty record.

        Args:
            context: Context determining the TaguchiMail instance and organization
            strict: Raise on writes to unknown or read-only fields
        """
        super().__init__(strict=strict)
        self._context = context

    @property
    def context(self) -> Any:
        return self._context

    # -- Response shaping -------------------------------------------------------

    def _absorb(self, data: Dict[str, Any]) -> None:
        """Replace the backing store with a record taken from a response."""
        self._backing = data

    @classmethod
    def _from_response(cls: Type[R], context: Any, data: Dict[str, Any]) -> R:
        rec = cls(context)
        rec._absorb(data)
        return rec

    def _first(self, body: str) -> Dict[str, Any]:
        records = decode_records(body, self.resource_type)
        if not records:
            raise ResponseError(
                f"{self.resource_type} response contained no records", body=body
            )
        return records[0]

    def _require_id(self) -> Any:
        record_id = self._backing.get("id")
        if record_id is None or record_id == "":
            raise InvalidFieldError(
                f"{self.__class__.__name__} has no record_id; create it first",
                field="record_id",
            )
        return record_id

    # -- Lifecycle --------------------------------------------------------------

    @classmethod
    def get(
        cls: Type[R],
        context: Any,
        record_id: Any,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> R:
        """
        Retrieve a single record by its TaguchiMail identifier.

        Args:
            context: Context to query
            record_id: The record's unique identifier
            parameters: Additional request parameters

        Returns:
            The record

        Raises:
            ResponseError: If the response is malformed or empty
        """
        body = context.request(cls.resource_type, "GET", str(record_id), None, parameters, None)
        records = decode_records(body, cls.resource_type)
        if not records:
            raise ResponseError(
                f"No {cls.resource_type} record with id {record_id}", body=body
            )
        logger.debug(f"Fetched {cls.resource_type} {record_id}")
        return cls._from_response(context, records[0])

    @classmethod
    def find(
        cls: Type[R],
        context: Any,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        query: Optional[Iterable[Union[QueryPredicate, str]]] = None,
    ) -> List[R]:
        """
        Retrieve records matching a query.

        Args:
            context: Context to query
            sort: Field used to sort the result set
            order: 'asc' or 'desc'
            offset: Index of the first record to return
            limit: Maximum number of records to return
            query: Query predicates (QueryPredicate or preformatted strings)

        Returns:
            List of records, possibly empty

        Examples:
            >>> Subscriber.find(ctx, "id", "asc", 0, 10,
            ...                 [QueryPredicate("email", "eq", "john@example.org")])
        """
        parameters = {"sort": sort, "order": order, "offset": offset, "limit": limit}
        body = context.request(cls.resource_type, "GET", None, None, parameters, query)
        records = decode_records(body, cls.resource_type)
        logger.debug(f"Found {len(records)} {cls.resource_type} records")
        return [cls._from_response(context, data) for data in records]

    def create(self: R) -> R:
        """
        Create this record in the TaguchiMail database.

        The server-assigned id and defaults are absorbed into this object.
        """
        body = self._context.request(
            self.resource_type, "POST", None, [self._backing], None, None
        )
        self._absorb(self._first(body))
        logger.info(f"Created {self.resource_type} {self._backing.get('id')}")
        return self

    def update(self: R) -> R:
        """Save this record to the TaguchiMail database."""
        record_id = self._require_id()
        body = self._context.request(
            self.resource_type, "PUT", str(record_id), [self._backing], None, None
        )
        self._absorb(self._first(body))
        logger.info(f"Updated {self.resource_type} {record_id}")
        return self

    def create_or_update(self: R) -> R:
        """
        Create this record, or update the existing one it matches.

        The server matches on ref, then on the resource's unique key (e.g.
        email for subscribers). Only fields present in the backing store are
        written, so untouched server-side fields are left alone.
        """
        body = self._context.request(
            self.resource_type, "CREATEORUPDATE", None, [self._backing], None, None
        )
        self._absorb(self._first(body))
        logger.info(f"Created or updated {self.resource_type} {self._backing.get('id')}")
        return self

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.resource_type} id={self._backing.get('id')}>"
