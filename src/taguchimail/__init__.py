"""
TaguchiMail - Python client library for the TaguchiMail API (v4).

This library maps TaguchiMail subscribers, lists, activities, templates and
campaigns onto typed record objects, and translates their lifecycle
operations into authenticated JSON requests.
"""

from .config import ConfigManager
from .context import Context
from .core.credentials import CredentialManager
from .exceptions import (
    TaguchiMailError,
    CredentialError,
    ConnectionError,
    ConfigurationError,
    QueryError,
    ResponseError,
    InvalidFieldError,
)
from .query import Operator, QueryPredicate
from .resources import (
    Activity,
    ActivityRevision,
    Campaign,
    Subscriber,
    SubscriberList,
    Template,
    TemplateRevision,
)

__version__ = "0.1.0"

__all__ = [
    # Connection
    "Context",
    # Records
    "Activity",
    "ActivityRevision",
    "Campaign",
    "Subscriber",
    "SubscriberList",
    "Template",
    "TemplateRevision",
    # Queries
    "Operator",
    "QueryPredicate",
    # Configuration
    "ConfigManager",
    # Credentials
    "CredentialManager",
    # Exceptions
    "TaguchiMailError",
    "CredentialError",
    "ConnectionError",
    "ConfigurationError",
    "QueryError",
    "ResponseError",
    "InvalidFieldError",
]
