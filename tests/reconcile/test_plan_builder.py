"""
Tests for the top-level plan builder
"""

# Local
from arangodb_operator.action import ActionType, MemberID, Plan, new_action
from arangodb_operator.reconcile import create_plan
from arangodb_operator.spec import ServerGroup
from arangodb_operator.status import Condition, ConditionType, MemberPhase
from arangodb_operator.test_helpers.helpers import (
    ClaimStore,
    configure_logging,
    make_claim,
    make_member,
    make_spec,
    make_status,
)

configure_logging()

## Helpers #####################################################################


def full_cluster(dbservers=3, coordinators=3, overrides=None):
    """A status matching the default cluster spec. Every member with storage
    has a claim on the "fast" class.
    """
    members = {
        ServerGroup.AGENTS: [
            make_member(f"a{idx}", claim_name=f"a{idx}-claim") for idx in range(3)
        ],
        ServerGroup.DBSERVERS: [
            make_member(f"d{idx}", claim_name=f"d{idx}-claim")
            for idx in range(dbservers)
        ],
        ServerGroup.COORDINATORS: [
            make_member(f"c{idx}") for idx in range(coordinators)
        ],
    }
    members.update(overrides or {})
    return make_status(members)


def fast_claims(status):
    return ClaimStore(
        *[
            make_claim(member.persistent_volume_claim_name, "fast")
            for _, members in status.members.iter_groups()
            for member in members
            if member.persistent_volume_claim_name
        ]
    )


def plan_for(spec, status, api_object, event_recorder, current_plan=None):
    return create_plan(
        api_object,
        current_plan or Plan(),
        spec,
        status,
        fast_claims(status),
        event_recorder,
    )


## Tests #######################################################################


def test_nothing_to_do(api_object, event_recorder):
    """Make sure a converged deployment gets an empty plan"""
    plan, changed = plan_for(make_spec(), full_cluster(), api_object, event_recorder)
    assert changed
    assert not plan


def test_running_plan_is_kept(api_object, event_recorder):
    """Make sure an unfinished plan is returned untouched"""
    current = Plan(
        [
            new_action(
                ActionType.WAIT_FOR_MEMBER_UP,
                ServerGroup.DBSERVERS,
                MemberID.concrete("d0"),
            )
        ]
    )
    plan, changed = plan_for(
        make_spec(), full_cluster(dbservers=1), api_object, event_recorder, current
    )
    assert not changed
    assert plan is current


def test_failed_member_replaced(api_object, event_recorder):
    """Make sure a failed coordinator is removed and a new one added"""
    status = full_cluster(
        overrides={
            ServerGroup.COORDINATORS: [
                make_member("c0"),
                make_member("c1", phase=MemberPhase.FAILED),
                make_member("c2"),
            ]
        }
    )
    plan, _ = plan_for(make_spec(), status, api_object, event_recorder)
    assert plan.action_types() == [ActionType.REMOVE_MEMBER, ActionType.ADD_MEMBER]
    assert plan[0].member_id == MemberID.concrete("c1")
    assert plan[1].member_id == MemberID.new()


def test_failed_agent_keeps_id(api_object, event_recorder):
    """Make sure a failed agent is added back under its own id"""
    status = full_cluster(
        overrides={
            ServerGroup.AGENTS: [
                make_member("a0", claim_name="a0-claim"),
                make_member("a1", claim_name="a1-claim", phase=MemberPhase.FAILED),
                make_member("a2", claim_name="a2-claim"),
            ]
        }
    )
    plan, _ = plan_for(make_spec(), status, api_object, event_recorder)
    assert plan.action_types() == [ActionType.REMOVE_MEMBER, ActionType.ADD_MEMBER]
    assert plan[1].member_id == MemberID.concrete("a1")


def test_cleaned_out_dbserver_removed(api_object, event_recorder):
    """Make sure a DBServer that was cleaned out is shut down and removed"""
    cleaned_out = make_member(
        "d3",
        claim_name="d3-claim",
        conditions=[Condition(ConditionType.CLEANED_OUT, True)],
    )
    status = full_cluster(dbservers=3)
    status.members.dbservers.append(cleaned_out)
    plan, _ = plan_for(make_spec(), status, api_object, event_recorder)
    assert plan.action_types() == [
        ActionType.SHUTDOWN_MEMBER,
        ActionType.REMOVE_MEMBER,
    ]
    assert plan[0].member_id == MemberID.concrete("d3")


def test_scale_up(api_object, event_recorder):
    """Make sure missing DBServers are added"""
    plan, _ = plan_for(
        make_spec(), full_cluster(dbservers=2), api_object, event_recorder
    )
    assert plan.action_types() == [ActionType.ADD_MEMBER]
    assert plan.groups() == [ServerGroup.DBSERVERS]


def test_scale_down(api_object, event_recorder):
    """Make sure extra coordinators are removed one at a time"""
    plan, _ = plan_for(
        make_spec(coordinators={"count": 2}),
        full_cluster(coordinators=4),
        api_object,
        event_recorder,
    )
    assert plan.action_types() == [
        ActionType.SHUTDOWN_MEMBER,
        ActionType.REMOVE_MEMBER,
    ]
    assert plan[0].member_id == MemberID.concrete("c3")


def test_sync_groups_scaled_when_enabled(api_object, event_recorder):
    """Make sure sync groups are only scaled with sync enabled"""
    plan, _ = plan_for(
        make_spec(sync={"enabled": True}), full_cluster(), api_object, event_recorder
    )
    assert plan.groups() == [ServerGroup.SYNCMASTERS] * 3


def test_resilient_single_scaled(api_object, event_recorder):
    """Make sure the single group of a resilient single deployment scales"""
    status = make_status(
        {
            ServerGroup.SINGLE: [make_member("s0")],
            ServerGroup.AGENTS: [make_member(f"a{idx}") for idx in range(3)],
        }
    )
    plan, _ = plan_for(
        make_spec(mode="ResilientSingle"), status, api_object, event_recorder
    )
    assert plan.action_types() == [ActionType.ADD_MEMBER]
    assert plan.groups() == [ServerGroup.SINGLE]


def test_single_mode_never_scales(api_object, event_recorder):
    """Make sure single server deployments get no scale plan"""
    status = make_status(
        {ServerGroup.SINGLE: [make_member("s0"), make_member("s1")]}
    )
    plan, _ = plan_for(make_spec(mode="Single"), status, api_object, event_recorder)
    assert not plan


def test_storage_plan_after_scaling(api_object, event_recorder):
    """Make sure storage is only looked at once the sizes match"""
    spec = make_spec(dbservers={"storageClassName": "slow"})
    plan, _ = plan_for(spec, full_cluster(dbservers=2), api_object, event_recorder)
    assert plan.action_types() == [ActionType.ADD_MEMBER]

    plan, _ = plan_for(spec, full_cluster(), api_object, event_recorder)
    assert ActionType.CLEAN_OUT_MEMBER in plan.action_types()
    assert plan[2].member_id == MemberID.concrete("d0")
