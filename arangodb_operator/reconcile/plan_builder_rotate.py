"""
Plans that restart or replace a single member
"""

# First Party
import alog

# Local
from ..action import ActionType, MemberID, Plan, new_action
from ..exceptions import assert_cluster
from ..spec import ServerGroup
from ..status import MemberStatus

log = alog.use_channel("PLANR")


def create_rotate_member_plan(
    member: MemberStatus,
    group: ServerGroup,
    reason: str,
) -> Plan:
    """Create a plan that restarts the given member in place and waits for it
    to come back

    Args:
        member:  MemberStatus
            The member to rotate
        group:  ServerGroup
            The group of the member
        reason:  str
            Why the member is rotated

    Returns:
        plan:  Plan
            RotateMember followed by WaitForMemberUp
    """
    log.debug("Creating rotation plan for [%s/%s]: %s", group.value, member.id, reason)
    member_id = MemberID.concrete(member.id)
    return Plan(
        [
            new_action(ActionType.ROTATE_MEMBER, group, member_id, reason),
            new_action(ActionType.WAIT_FOR_MEMBER_UP, group, member_id),
        ]
    )


def create_replace_member_plan(
    member: MemberStatus,
    group: ServerGroup,
    reason: str,
) -> Plan:
    """Create a plan that replaces the given member with a fresh one

    Scalable groups first add a new member and wait for it, so that capacity
    never drops. DBServers then move their data off the old member before it is
    shut down. Agents cannot grow the agency, so the old agent is shut down and
    removed first and then added back under its own id.

    Args:
        member:  MemberStatus
            The member to replace
        group:  ServerGroup
            The group of the member. Must not be the single group.
        reason:  str
            Why the member is replaced

    Returns:
        plan:  Plan
            The ordered replacement steps

    Raises:
        ClusterError: If asked to replace a single server
    """
    assert_cluster(group != ServerGroup.SINGLE, "Single servers cannot be replaced")
    log.debug(
        "Creating replacement plan for [%s/%s]: %s", group.value, member.id, reason
    )
    old_id = MemberID.concrete(member.id)
    plan = Plan()
    if group != ServerGroup.AGENTS:
        # Scale up, so we're sure that a new member is available
        plan.append(new_action(ActionType.ADD_MEMBER, group, MemberID.new(), reason))
        plan.append(
            new_action(
                ActionType.WAIT_FOR_MEMBER_UP, group, MemberID.from_previous_action()
            )
        )
    if group == ServerGroup.DBSERVERS:
        plan.append(new_action(ActionType.CLEAN_OUT_MEMBER, group, old_id, reason))
    plan.append(new_action(ActionType.SHUTDOWN_MEMBER, group, old_id, reason))
    plan.append(new_action(ActionType.REMOVE_MEMBER, group, old_id, reason))
    if group == ServerGroup.AGENTS:
        # Add the removed agent back with its old id
        plan.append(new_action(ActionType.ADD_MEMBER, group, old_id, reason))
        plan.append(new_action(ActionType.WAIT_FOR_MEMBER_UP, group, old_id))
    return plan
