"""Subscriber list records."""

from typing import Any, List, Optional

from ..core.fields import Field
from ..core.record import Record
from ..query import Operator, QueryPredicate
from .subscriber import Subscriber


class SubscriberList(Record):
    """
    A TaguchiMail subscriber list.

    Fields:
        ref: External ID/reference; must be unique when set
        name: List name
        type: None for a public opt-in list; 'proof', 'approval' or
            'notification' for utility lists; any other value hides the
            list from the UI
        creation_datetime: When the list was created (read-only)
        xml_data: Arbitrary application XML data
        status: List status (read-only)
    """

    resource_type = "list"

    ref = Field("ref")
    name = Field("name")
    type = Field("type")
    creation_datetime = Field("timestamp", writable=False)
    xml_data = Field("data")
    status = Field("status", writable=False)

    def subscribe_subscriber(self, subscriber: Subscriber, option: Any = None) -> None:
        """Add a subscriber to this list with a subscription option."""
        subscriber.subscribe_to_list(self, option)

    def unsubscribe_subscriber(self, subscriber: Subscriber) -> None:
        """Unsubscribe a subscriber from this list (adding it first if necessary)."""
        subscriber.unsubscribe_from_list(self)

    def get_subscribers(
        self, offset: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Subscriber]:
        """
        Retrieve subscribers on this list, regardless of opt-in/opt-out status.

        Args:
            offset: Index of the first subscriber to return
            limit: Maximum number of subscribers to return
        """
        predicate = QueryPredicate("list_id", Operator.EQ, self._require_id())
        return Subscriber.find(self._context, "id", "asc", offset, limit, [predicate])
