"""TaguchiMail record types."""

from .activity import Activity, ActivityRevision
from .campaign import Campaign
from .subscriber import Subscriber
from .subscriber_list import SubscriberList
from .template import Template, TemplateRevision

__all__ = [
    "Activity",
    "ActivityRevision",
    "Campaign",
    "Subscriber",
    "SubscriberList",
    "Template",
    "TemplateRevision",
]
