"""Template records and their revisions."""

from typing import Any, Dict, Optional, Tuple

from ..core.fields import Field
from ..core.revisions import Revision, RevisionedRecord


class TemplateRevision(Revision):
    """
    A template revision.

    Fields:
        format: The Data Description, which drives the activity edit form
            and so the structure of activity source documents
        content: The XSLT stylesheet applied to activity content
    """

    composed_keys: Tuple[str, ...] = ("content", "format")

    format = Field("format")
    content = Field("content")

    def __init__(
        self,
        format: Any = None,
        content: Any = None,
        parent: Optional["Template"] = None,
        backing: Optional[Dict[str, Any]] = None,
        strict: bool = True,
    ) -> None:
        super().__init__(parent=parent, backing=backing, strict=strict)
        if format is not None:
            self.format = format
        if content is not None:
            self.content = content


class Template(RevisionedRecord):
    """
    A TaguchiMail template.

    Fields:
        ref: External ID/reference; must be unique when set
        name: Template name
        type: Matched with activity types for template suggestions
        subtype: Application-defined value
        xml_data: Arbitrary application XML data
        status: Template status (read-only)
        latest_revision: Latest revision; assigning one creates a new
            revision on the next create/update
    """

    resource_type = "template"
    revision_class = TemplateRevision

    ref = Field("ref")
    name = Field("name")
    type = Field("type")
    subtype = Field("subtype")
    xml_data = Field("data")
    status = Field("status", writable=False)
