"""
This module holds the top-level plan builder. It decides which single change
a deployment needs next and leaves the execution to the executor.
"""

# Standard
from typing import Optional, Tuple

# First Party
import alog

# Local
from ..action import ActionType, MemberID, Plan, new_action
from ..claims import ClaimGetter
from ..events import EventSink
from ..spec import DeploymentMode, DeploymentSpec, ServerGroup
from ..status import ConditionType, DeploymentStatus, MemberPhase
from .plan_builder_scale import create_scale_plan
from .plan_builder_storage import create_rotate_server_storage_plan

log = alog.use_channel("PLANR")


def create_plan(  # pylint: disable=too-many-arguments
    api_object: Optional[dict],
    current_plan: Plan,
    spec: DeploymentSpec,
    status: DeploymentStatus,
    get_claim: ClaimGetter,
    create_event: EventSink,
) -> Tuple[Plan, bool]:
    """Create a plan that moves the status one step towards the spec

    The concerns are looked at in a fixed order: failed members, cleaned out
    DBServers, scaling and storage. The first concern that yields any action
    produces the plan.

    Args:
        api_object:  Optional[dict]
            The deployment resource, referenced by emitted events
        current_plan:  Plan
            The plan currently being executed
        spec:  DeploymentSpec
            The normalized spec
        status:  DeploymentStatus
            The status snapshot. It is only read.
        get_claim:  ClaimGetter
            Reads a claim by name
        create_event:  EventSink
            Receives incidents that could not be turned into a plan

    Returns:
        plan:  Plan
            The plan to execute
        changed:  bool
            False if the current plan was kept because it is not finished
    """
    if current_plan:
        log.debug2("Plan of %d action(s) is still running", len(current_plan))
        return current_plan, False

    with alog.ContextTimer(log.debug2, "Plan creation duration: "):
        plan = _create_failed_member_plan(status)
        if not plan:
            plan = _create_cleaned_out_member_plan(status)
        if not plan:
            plan = _create_scale_plan(spec, status)
        if not plan:
            plan = create_rotate_server_storage_plan(
                api_object, spec, status, get_claim, create_event
            )

    if plan:
        log.info("Created plan: %s", [str(action) for action in plan])
    return plan, True


def _create_failed_member_plan(status: DeploymentStatus) -> Plan:
    """Replace the first failed member"""
    for group, members in status.members.iter_groups():
        for member in members:
            if member.phase != MemberPhase.FAILED:
                continue
            # Agents cannot be replaced with new ids
            new_id = (
                MemberID.concrete(member.id)
                if group == ServerGroup.AGENTS
                else MemberID.new()
            )
            return Plan(
                [
                    new_action(
                        ActionType.REMOVE_MEMBER,
                        group,
                        MemberID.concrete(member.id),
                        "Member failed",
                    ),
                    new_action(ActionType.ADD_MEMBER, group, new_id, "Member failed"),
                ]
            )
    return Plan()


def _create_cleaned_out_member_plan(status: DeploymentStatus) -> Plan:
    """Remove the first DBServer that was cleaned out but is still running"""
    for member in status.members.dbservers:
        if member.phase == MemberPhase.CREATED and member.conditions.is_true(
            ConditionType.CLEANED_OUT
        ):
            member_id = MemberID.concrete(member.id)
            return Plan(
                [
                    new_action(
                        ActionType.SHUTDOWN_MEMBER,
                        ServerGroup.DBSERVERS,
                        member_id,
                        "Member cleaned out",
                    ),
                    new_action(
                        ActionType.REMOVE_MEMBER,
                        ServerGroup.DBSERVERS,
                        member_id,
                        "Member cleaned out",
                    ),
                ]
            )
    return Plan()


def _create_scale_plan(spec: DeploymentSpec, status: DeploymentStatus) -> Plan:
    """Scale the scalable groups of the deployment's mode. Single servers and
    agents never scale.
    """
    mode = spec.get_mode()
    if mode == DeploymentMode.SINGLE:
        return Plan()
    if mode == DeploymentMode.RESILIENT_SINGLE:
        groups = [ServerGroup.SINGLE]
    else:
        groups = [ServerGroup.DBSERVERS, ServerGroup.COORDINATORS]
        if spec.sync.is_enabled():
            groups.extend([ServerGroup.SYNCMASTERS, ServerGroup.SYNCWORKERS])

    for group in groups:
        plan = create_scale_plan(
            status.members.members_of_group(group),
            group,
            spec.get_server_group_spec(group).get_count(),
        )
        if plan:
            return plan
    return Plan()
