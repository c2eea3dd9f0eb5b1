"""
Plan builder for members whose storage no longer matches the spec
"""

# Standard
from typing import Optional

# First Party
import alog

# Local
from ..action import Plan
from ..claims import (
    ClaimGetter,
    get_claim_storage_class_name,
    is_claim_file_system_resize_pending,
)
from ..events import (
    EventSink,
    new_cannot_change_storage_class_event,
    new_storage_claim_read_failed_event,
)
from ..spec import DeploymentMode, DeploymentSpec, ServerGroup
from ..status import DeploymentStatus, MemberPhase, MemberStatus
from .plan_builder_rotate import create_replace_member_plan, create_rotate_member_plan

log = alog.use_channel("PLANR")

# Only these groups may move to another storage class
_STORAGE_CLASS_CHANGE_GROUPS = (ServerGroup.AGENTS, ServerGroup.DBSERVERS)


def create_rotate_server_storage_plan(
    api_object: Optional[dict],
    spec: DeploymentSpec,
    status: DeploymentStatus,
    get_claim: ClaimGetter,
    create_event: EventSink,
) -> Plan:
    """Create a plan to replace or rotate a member because its storage class
    differs from the spec or its volume waits for a filesystem resize.

    At most one member is handled per call. Members whose claim cannot be read
    or whose group cannot change storage class are reported through
    create_event and skipped.

    Args:
        api_object:  Optional[dict]
            The deployment resource, referenced by emitted events
        spec:  DeploymentSpec
            The normalized spec of the deployment
        status:  DeploymentStatus
            The status snapshot. It is only read.
        get_claim:  ClaimGetter
            Reads a claim by name
        create_event:  EventSink
            Receives incidents that could not be turned into a plan

    Returns:
        plan:  Plan
            The steps for the first member needing action, or an empty plan
    """
    if spec.get_mode() == DeploymentMode.SINGLE:
        # Storage cannot be changed in single server deployments
        return Plan()

    for group, members in status.members.iter_groups():
        for member in members:
            if member.phase != MemberPhase.CREATED:
                # Only make changes when phase is created
                continue
            if not member.persistent_volume_claim_name:
                # Plan is irrelevant without a claim
                continue

            storage_class_name = spec.get_server_group_spec(
                group
            ).get_storage_class_name()
            claim = _read_claim(api_object, group, member, get_claim, create_event)
            if claim is None:
                continue

            claim_storage_class_name = get_claim_storage_class_name(claim)
            replacement_needed = False
            if storage_class_name and claim_storage_class_name != storage_class_name:
                log.debug(
                    "Storage class of [%s] has changed from [%s] to [%s]. Pod needs "
                    "replacement",
                    member.pod_name,
                    claim_storage_class_name,
                    storage_class_name,
                )
                replacement_needed = True
            rotation_needed = is_claim_file_system_resize_pending(claim)

            if replacement_needed:
                if group not in _STORAGE_CLASS_CHANGE_GROUPS:
                    create_event(
                        new_cannot_change_storage_class_event(
                            api_object, member.id, group.as_role(), "Not supported"
                        )
                    )
                    continue
                # Only 1 change at a time
                return create_replace_member_plan(
                    member, group, "Storage class has changed"
                )
            if rotation_needed:
                return create_rotate_member_plan(
                    member, group, "Filesystem resize pending"
                )

    return Plan()


def _read_claim(
    api_object: Optional[dict],
    group: ServerGroup,
    member: MemberStatus,
    get_claim: ClaimGetter,
    create_event: EventSink,
) -> Optional[dict]:
    """Read the claim of a member, reporting failures instead of raising"""
    claim_name = member.persistent_volume_claim_name
    try:
        claim = get_claim(claim_name)
        cause = "Claim not found"
    except Exception as err:  # pylint: disable=broad-except
        claim = None
        cause = str(err) or type(err).__name__
    if claim is None:
        log.warning(
            "Failed to get claim [%s] of [%s/%s]: %s",
            claim_name,
            group.as_role(),
            member.id,
            cause,
        )
        create_event(
            new_storage_claim_read_failed_event(
                api_object, member.id, group.as_role(), claim_name, cause
            )
        )
    return claim
