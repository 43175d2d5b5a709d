"""Campaign records."""

from ..core.fields import Field
from ..core.record import Record


class Campaign(Record):
    """
    A TaguchiMail campaign, grouping related activities.

    Fields:
        ref: External ID/reference; must be unique when set
        name: Campaign name
        start_datetime: When the campaign started (or is scheduled to)
        xml_data: Arbitrary application XML data
        status: Campaign status (read-only)
    """

    resource_type = "campaign"

    ref = Field("ref")
    name = Field("name")
    start_datetime = Field("date")
    xml_data = Field("data")
    status = Field("status", writable=False)
