"""
Plan builder that brings the number of members of a group to its spec count
"""

# First Party
import alog

# Local
from ..action import ActionType, MemberID, Plan, new_action
from ..spec import ServerGroup
from ..status import MemberStatusList

log = alog.use_channel("PLANR")


def create_scale_plan(
    members: MemberStatusList,
    group: ServerGroup,
    count: int,
) -> Plan:
    """Create a plan to scale the given group to the given count. When
    scaling down only a single member is removed per plan.

    Args:
        members:  MemberStatusList
            Current members of the group
        group:  ServerGroup
            The group to scale
        count:  int
            Desired number of members

    Returns:
        plan:  Plan
            AddMember steps when scaling up, the removal of one member when
            scaling down, otherwise empty
    """
    plan = Plan()
    if len(members) < count:
        to_add = count - len(members)
        log.debug("Scaling up [%s] by %d member(s)", group.value, to_add)
        for _ in range(to_add):
            plan.append(
                new_action(ActionType.ADD_MEMBER, group, MemberID.new(), "Scale up")
            )
    elif len(members) > count:
        member = members.select_member_to_remove()
        log.debug("Scaling down [%s] by removing [%s]", group.value, member.id)
        member_id = MemberID.concrete(member.id)
        if group == ServerGroup.DBSERVERS:
            plan.append(
                new_action(ActionType.CLEAN_OUT_MEMBER, group, member_id, "Scale down")
            )
        plan.append(
            new_action(ActionType.SHUTDOWN_MEMBER, group, member_id, "Scale down")
        )
        plan.append(
            new_action(ActionType.REMOVE_MEMBER, group, member_id, "Scale down")
        )
    return plan
