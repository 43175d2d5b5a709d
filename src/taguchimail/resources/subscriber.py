"""
Subscriber records.

A subscriber's list memberships are kept in the ``lists`` array of its
backing store, one ``{list_id, option, unsubscribed}`` entry per list.
Membership methods only change that local array; call update() or
create_or_update() to persist them.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from ..core.fields import Field, stringify
from ..core.record import Record

if TYPE_CHECKING:
    from .subscriber_list import SubscriberList

logger = logging.getLogger(__name__)

ListRef = Union[str, int, "SubscriberList"]


def list_id_of(list_ref: ListRef) -> str:
    """Normalize a list id or SubscriberList to its id string."""
    from .subscriber_list import SubscriberList

    if isinstance(list_ref, SubscriberList):
        return str(list_ref._require_id())
    return str(list_ref)


def _wire_list_id(list_id: str) -> Union[str, int]:
    return int(list_id) if list_id.isdigit() else list_id


class Subscriber(Record):
    """
    A TaguchiMail subscriber profile.

    Fields:
        ref: External ID/reference; must be unique when set
        title, firstname, lastname: Name fields
        notifications, extra: Arbitrary application data
        phone, dob, gender: Contact details
        address, address2, address3, suburb, state, country, postcode:
            Postal address
        email: Email address; must be unique when ref is unset
        social_rating: Social media influence rating (read-only, computed
            by TaguchiMail)
        social_profile: Social media aggregate profile (JSON)
        unsubscribe_datetime: When the subscriber globally unsubscribed
        bounce_datetime: When the email address was marked invalid
        xml_data: Arbitrary application XML data

    Examples:
        >>> subscriber = Subscriber(ctx)
        >>> subscriber.email = "john.doe@example.org"
        >>> subscriber.firstname = "John"
        >>> subscriber.subscribe_to_list("12")
        >>> subscriber.create_or_update()
    """

    resource_type = "subscriber"

    ref = Field("ref")
    title = Field("title")
    firstname = Field("firstname")
    lastname = Field("lastname")
    notifications = Field("notifications")
    extra = Field("extra")
    phone = Field("phone")
    dob = Field("dob")
    address = Field("address")
    address2 = Field("address2")
    address3 = Field("address3")
    suburb = Field("suburb")
    state = Field("state")
    country = Field("country")
    postcode = Field("postcode")
    gender = Field("gender")
    email = Field("email")
    social_rating = Field("social_rating", writable=False)
    social_profile = Field("social_profile")
    unsubscribe_datetime = Field("unsubscribed")
    bounce_datetime = Field("bounced")
    xml_data = Field("data")

    def _entries_for_write(self, key: str) -> List[Dict[str, Any]]:
        # Only writers create the array; reads must leave the backing store untouched.
        entries = self._backing.get(key)
        if not isinstance(entries, list):
            entries = []
            self._backing[key] = entries
        return entries

    # -- Custom fields ----------------------------------------------------------

    def _custom_fields(self) -> List[Dict[str, Any]]:
        entries = self._backing.get("custom_fields")
        return entries if isinstance(entries, list) else []

    def get_custom_field(self, field: str) -> Optional[str]:
        """
        Retrieve a custom field value by field name.

        Returns:
            The field's data as a string, or None if the field is not set
        """
        for entry in self._custom_fields():
            if str(entry.get("field")) == field:
                return stringify(entry.get("data"))
        return None

    def set_custom_field(self, field: str, data: Any) -> None:
        """
        Set a custom field value, overwriting any existing value.

        Complex values should be JSON-encoded (or serialized to XML) by
        the caller.
        """
        entries = self._entries_for_write("custom_fields")
        for entry in entries:
            if str(entry.get("field")) == field:
                entry["data"] = data
                return
        entries.append({"field": field, "data": data})

    # -- List membership --------------------------------------------------------

    def _lists(self) -> List[Dict[str, Any]]:
        entries = self._backing.get("lists")
        return entries if isinstance(entries, list) else []

    def _find_list(self, list_id: str) -> Optional[Dict[str, Any]]:
        for entry in self._lists():
            if str(entry.get("list_id")) == list_id:
                return entry
        return None

    def is_subscribed_to_list(self, list_ref: ListRef) -> bool:
        """Return True if subscribed (and not unsubscribed) to the list."""
        entry = self._find_list(list_id_of(list_ref))
        return entry is not None and not entry.get("unsubscribed")

    def is_unsubscribed_from_list(self, list_ref: ListRef) -> Optional[bool]:
        """
        Check the unsubscription status for a list.

        Returns:
            True if unsubscribed, False if subscribed, None if the subscriber
            has no entry for the list
        """
        entry = self._find_list(list_id_of(list_ref))
        if entry is None:
            return None
        return bool(entry.get("unsubscribed"))

    def get_subscription_option(self, list_ref: ListRef) -> Optional[str]:
        """Return the subscription option (application data) for a list."""
        entry = self._find_list(list_id_of(list_ref))
        if entry is None:
            return None
        return stringify(entry.get("option"))

    def get_subscribed_list_ids(self) -> List[str]:
        return [
            str(entry.get("list_id"))
            for entry in self._lists()
            if not entry.get("unsubscribed")
        ]

    def get_unsubscribed_list_ids(self) -> List[str]:
        return [
            str(entry.get("list_id"))
            for entry in self._lists()
            if entry.get("unsubscribed")
        ]

    def get_subscribed_lists(self) -> List["SubscriberList"]:
        """Fetch every list this subscriber is subscribed to (one request each)."""
        from .subscriber_list import SubscriberList

        return [
            SubscriberList.get(self._context, list_id)
            for list_id in self.get_subscribed_list_ids()
        ]

    def get_unsubscribed_lists(self) -> List["SubscriberList"]:
        """Fetch every list this subscriber is unsubscribed from."""
        from .subscriber_list import SubscriberList

        return [
            SubscriberList.get(self._context, list_id)
            for list_id in self.get_unsubscribed_list_ids()
        ]

    def subscribe_to_list(self, list_ref: ListRef, option: Any = None) -> None:
        """
        Add the subscriber to a list, clearing any unsubscription.

        Args:
            list_ref: List ID or SubscriberList
            option: Subscription option (arbitrary application data)
        """
        list_id = list_id_of(list_ref)
        entry = self._find_list(list_id)
        if entry is not None:
            entry["option"] = option
            entry["unsubscribed"] = None
        else:
            self._entries_for_write("lists").append(
                {"list_id": _wire_list_id(list_id), "option": option}
            )
        logger.debug(f"Subscribed {self._backing.get('id')} to list {list_id}")

    def unsubscribe_from_list(self, list_ref: ListRef) -> None:
        """
        Unsubscribe from a list, adding an unsubscribed entry if needed.

        An existing unsubscription keeps its original marker.
        """
        list_id = list_id_of(list_ref)
        entry = self._find_list(list_id)
        if entry is not None:
            if not entry.get("unsubscribed"):
                entry["unsubscribed"] = True
        else:
            self._entries_for_write("lists").append(
                {"list_id": _wire_list_id(list_id), "unsubscribed": True}
            )
        logger.debug(f"Unsubscribed {self._backing.get('id')} from list {list_id}")
