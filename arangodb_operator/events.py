"""
Helper module to define the incident events raised while planning
"""

# Standard
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

# Local
from . import constants


@dataclass
class Event:
    """DataClass describing an incident on a member of a deployment. The reason
    is a stable code; the message is for humans.
    """

    reason: str
    message: str
    member_id: str = ""
    role: str = ""
    type: str = constants.EVENT_TYPE_WARNING
    involved_object: Optional[dict] = None
    timestamp: datetime = field(default_factory=datetime.now)


# Signature of the sink the planners report incidents through
EventSink = Callable[[Event], None]


def _object_ref(api_object: Optional[dict]) -> Optional[dict]:
    """Reduce a resource to the reference stored on its events"""
    if api_object is None:
        return None
    metadata = api_object.get("metadata", {})
    return {
        "apiVersion": api_object.get("apiVersion"),
        "kind": api_object.get("kind"),
        "name": metadata.get("name"),
        "namespace": metadata.get("namespace"),
        "uid": metadata.get("uid"),
    }


def new_cannot_change_storage_class_event(
    api_object: Optional[dict],
    member_id: str,
    role: str,
    cause: str,
) -> Event:
    """Create an event reporting that a member cannot move to another storage
    class

    Args:
        api_object:  Optional[dict]
            The deployment resource the member belongs to
        member_id:  str
            The id of the member
        role:  str
            Role label of the member's group
        cause:  str
            Why the change is not possible

    Returns:
        event:  Event
            The event to hand to the sink
    """
    return Event(
        reason=constants.EVENT_REASON_CANNOT_CHANGE_STORAGE_CLASS,
        message=(
            f"Member {member_id} with role {role} cannot change its storage "
            f"class: {cause}"
        ),
        member_id=member_id,
        role=role,
        involved_object=_object_ref(api_object),
    )


def new_storage_claim_read_failed_event(
    api_object: Optional[dict],
    member_id: str,
    role: str,
    claim_name: str,
    cause: str,
) -> Event:
    """Create an event reporting that the storage claim of a member could not
    be read
    """
    return Event(
        reason=constants.EVENT_REASON_STORAGE_CLAIM_READ_FAILED,
        message=(
            f"Failed to read storage claim {claim_name} of member {member_id} "
            f"with role {role}: {cause}"
        ),
        member_id=member_id,
        role=role,
        involved_object=_object_ref(api_object),
    )


def new_immutable_fields_reset_event(api_object: Optional[dict], fields) -> Event:
    """Create an event reporting that edits to immutable fields were undone"""
    return Event(
        reason=constants.EVENT_REASON_IMMUTABLE_FIELDS_RESET,
        message=f"Changes to immutable fields were reverted: {', '.join(fields)}",
        involved_object=_object_ref(api_object),
    )
