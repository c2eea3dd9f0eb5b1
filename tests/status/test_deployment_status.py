"""
Tests for the deployment status model
"""

# Third Party
import pytest

# Local
from arangodb_operator.action import ActionType, MemberID, Plan, new_action
from arangodb_operator.exceptions import ClusterError
from arangodb_operator.spec import ALL_SERVER_GROUPS, ServerGroup
from arangodb_operator.status import DeploymentStatus, MemberPhase
from arangodb_operator.test_helpers.helpers import (
    configure_logging,
    make_member,
    make_spec,
    make_status,
)

configure_logging()


def test_foreach_server_group_order():
    """Make sure groups are visited in the fixed order"""
    status = make_status(
        {
            ServerGroup.DBSERVERS: [make_member("d1")],
            ServerGroup.AGENTS: [make_member("a1")],
        }
    )
    visited = []
    status.members.foreach_server_group(
        lambda group, members: visited.append((group, [m.id for m in members]))
    )
    assert [group for group, _ in visited] == ALL_SERVER_GROUPS
    assert visited[1] == (ServerGroup.AGENTS, ["a1"])
    assert visited[2] == (ServerGroup.DBSERVERS, ["d1"])


def test_foreach_server_group_propagates_errors():
    """Make sure an error from the callback stops the iteration"""
    visited = []

    def callback(group, _):
        visited.append(group)
        if group == ServerGroup.AGENTS:
            raise ClusterError("stop")

    with pytest.raises(ClusterError):
        make_status().members.foreach_server_group(callback)
    assert visited == [ServerGroup.SINGLE, ServerGroup.AGENTS]


def test_element_by_id():
    """Make sure members are found across groups"""
    status = make_status({ServerGroup.COORDINATORS: [make_member("c1")]})
    member, group = status.members.element_by_id("c1")
    assert member.id == "c1"
    assert group == ServerGroup.COORDINATORS
    assert status.members.element_by_id("nope") == (None, None)


def test_update_member():
    """Make sure a member is replaced in place"""
    status = make_status({ServerGroup.AGENTS: [make_member("a1"), make_member("a2")]})
    updated = make_member("a2", phase=MemberPhase.FAILED)
    status.members.update(updated, ServerGroup.AGENTS)
    assert status.members.agents[1].phase == MemberPhase.FAILED

    with pytest.raises(ClusterError):
        status.members.update(make_member("a3"), ServerGroup.AGENTS)


def test_status_round_trip():
    """Make sure a realistic status survives being stored and read back"""
    status = make_status(
        {
            ServerGroup.AGENTS: [make_member("a1", claim_name="a1-claim")],
            ServerGroup.DBSERVERS: [make_member("d1", ready=False)],
        },
        plan=Plan(
            [
                new_action(
                    ActionType.WAIT_FOR_MEMBER_UP,
                    ServerGroup.DBSERVERS,
                    MemberID.from_previous_action(),
                )
            ]
        ),
        accepted_spec=make_spec(),
        version=3,
    )
    stored = status.to_dict()
    assert set(stored["members"]) == {"agents", "dbservers"}
    assert stored["plan"][0]["memberID"] == "@previous"
    assert DeploymentStatus.from_dict(stored) == status


def test_status_from_empty():
    """Make sure a missing status reads as empty"""
    status = DeploymentStatus.from_dict(None)
    assert not status.plan
    assert status.accepted_spec is None
    assert status.version == 0
    assert all(not members for _, members in status.members.iter_groups())
