"""
Activity records and their content revisions.

Besides the shared lifecycle, activities support three actions sent as
their own commands: TRIGGER (deliver to given subscribers), PROOF (send a
sample to a proof list) and APPROVAL (request sign-off from an approval
list).
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

from ..core.fields import Field
from ..core.revisions import Revision, RevisionedRecord
from .subscriber import ListRef, Subscriber, list_id_of

logger = logging.getLogger(__name__)


class ActivityRevision(Revision):
    """
    An activity content revision (a.k.a. Source Document).

    Fields:
        content: Revision XML content, normally based on RSS. The template's
            transform must turn it into a valid intermediate MIME document.
        approval_status: 'deployed' if the revision is publicly available;
            otherwise only test events may use it (read-only)
    """

    content = Field("content")
    approval_status = Field("status", writable=False)

    def __init__(
        self,
        content: Any = None,
        parent: Optional["Activity"] = None,
        backing: Optional[Dict[str, Any]] = None,
        strict: bool = True,
    ) -> None:
        super().__init__(parent=parent, backing=backing, strict=strict)
        if content is not None:
            self.content = content


class Activity(RevisionedRecord):
    """
    A TaguchiMail activity (a message or page).

    Fields:
        ref: External ID/reference; must be unique when set
        name: Activity name
        type: Matched with template types for template suggestions
        subtype: Application-defined value
        target_lists: JSON array of list IDs the activity is queued to
        target_views: JSON array of view IDs restricting distribution
        approval_status: Approval workflow status
        deploy_datetime: When the activity was (or will be) deployed
        template_id: ID of the template this activity uses
        campaign_id: ID of the campaign this activity belongs to
        throttle: Maximum deployment rate in messages per minute; 0 suspends
        xml_data: Arbitrary application XML data
        status: Activity status (read-only)
        latest_revision: Latest content revision; assigning one creates a
            new revision on the next create/update

    Examples:
        >>> activity = Activity.get(ctx, "17")
        >>> activity.trigger(["42"], None, test=True)
    """

    resource_type = "activity"
    revision_class = ActivityRevision

    ref = Field("ref")
    name = Field("name")
    type = Field("type")
    subtype = Field("subtype")
    target_lists = Field("target_lists")
    target_views = Field("target_views")
    approval_status = Field("approval_status")
    deploy_datetime = Field("date")
    template_id = Field("template_id")
    campaign_id = Field("campaign_id")
    throttle = Field("throttle")
    xml_data = Field("data")
    status = Field("status", writable=False)

    def _command(self, command: str, data: Dict[str, Any]) -> str:
        record_id = self._require_id()
        logger.info(f"Sending {command} for activity {record_id}")
        return self._context.request(
            self.resource_type, command, str(record_id), [data], None, None
        )

    def proof(self, proof_list: ListRef, subject_tag: str, custom_message: str) -> str:
        """
        Send a proof of this activity to a proof list.

        Args:
            proof_list: List ID or SubscriberList to send the proof to
            subject_tag: Shown at the start of the subject line
            custom_message: Included in the proof header

        Returns:
            Raw response body
        """
        data = {
            "id": self._require_id(),
            "list_id": list_id_of(proof_list),
            "tag": subject_tag,
            "message": custom_message,
        }
        return self._command("PROOF", data)

    def request_approval(
        self, approval_list: ListRef, subject_tag: str, custom_message: str
    ) -> str:
        """
        Send an approval request for this activity to an approval list.

        Args:
            approval_list: List ID or SubscriberList to send the request to
            subject_tag: Shown at the start of the subject line
            custom_message: Included in the approval header

        Returns:
            Raw response body
        """
        data = {
            "id": self._require_id(),
            "list_id": list_id_of(approval_list),
            "tag": subject_tag,
            "message": custom_message,
        }
        return self._command("APPROVAL", data)

    def trigger(
        self,
        subscribers: Iterable[Union[str, int, Subscriber]],
        request_content: Optional[str] = None,
        test: bool = False,
    ) -> str:
        """
        Deliver this activity to specific subscribers.

        Args:
            subscribers: Subscriber IDs or Subscriber objects
            request_content: XML content for message customization, made
                available to the template's stylesheet alongside the
                revision content
            test: Treat this as a test send

        Returns:
            Raw response body
        """
        subscriber_ids = [
            s._require_id() if isinstance(s, Subscriber) else s
            for s in subscribers
        ]
        data = {
            "id": self._require_id(),
            "test": 1 if test else 0,
            "request_content": request_content,
            "conditions": subscriber_ids,
        }
        return self._command("TRIGGER", data)
