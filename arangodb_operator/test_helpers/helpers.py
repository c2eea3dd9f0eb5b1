"""
This module holds common helper functions and fakes for making testing easy
"""

# Standard
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional, Union
import copy
import os

# First Party
import aconfig
import alog

# Local
from arangodb_operator import constants
from arangodb_operator.config import library_config as config_detail_dict
from arangodb_operator.exceptions import ClusterError
from arangodb_operator.resilience import AgencyClient, AgentState, ResilienceContext
from arangodb_operator.spec import DeploymentSpec, ServerGroup
from arangodb_operator.status import (
    Condition,
    ConditionList,
    ConditionType,
    DeploymentStatus,
    MemberPhase,
    MemberStatus,
)

log = alog.use_channel("TEST")


def configure_logging():
    alog.configure(
        os.environ.get("LOG_LEVEL", "off"),
        os.environ.get("LOG_FILTERS", ""),
        formatter="json"
        if os.environ.get("LOG_JSON", "").lower() == "true"
        else "pretty",
        thread_id=os.environ.get("LOG_THREAD_ID", "").lower() == "true",
    )


configure_logging()

TEST_DEPLOYMENT_NAME = "test-deployment"
TEST_NAMESPACE = "test"


@contextmanager
def library_config(**config_overrides):
    """This context manager sets library config values temporarily and reverts
    them on completion. Nested sections are merged, so only the given keys of a
    section change.
    """
    old_vals = {}
    for key, val in config_overrides.items():
        if key in config_detail_dict:
            old_vals[key] = config_detail_dict[key]
            if isinstance(val, dict):
                merged = copy.deepcopy(dict(config_detail_dict[key]))
                merged.update(val)
                val = merged
        if isinstance(val, dict):
            val = aconfig.Config(val, override_env_vars=False)
        config_detail_dict[key] = val

    yield

    for key in config_overrides:
        if key in old_vals:
            config_detail_dict[key] = old_vals[key]
        else:
            del config_detail_dict[key]


## Builders ####################################################################


def make_api_object(name: str = TEST_DEPLOYMENT_NAME) -> dict:
    return {
        "apiVersion": "database.arangodb.com/v1alpha",
        "kind": "ArangoDeployment",
        "metadata": {
            "name": name,
            "namespace": TEST_NAMESPACE,
            "uid": "12345678-1234-1234-1234-123456789012",
        },
    }


def make_spec(
    deployment_name: str = TEST_DEPLOYMENT_NAME,
    defaults: bool = True,
    **spec_dict,
) -> DeploymentSpec:
    """Build a spec from its wire form, defaulted unless told otherwise"""
    spec = DeploymentSpec.from_dict(spec_dict)
    if defaults:
        spec.set_defaults(deployment_name)
    return spec


def make_member(
    member_id: str,
    phase: MemberPhase = MemberPhase.CREATED,
    claim_name: Optional[str] = None,
    ready: Optional[bool] = True,
    ready_since: Optional[datetime] = None,
    conditions: Optional[List[Condition]] = None,
    recent_terminations: Optional[List[datetime]] = None,
) -> MemberStatus:
    """Build a member status. Unless ready is None, a Ready condition is set."""
    member_conditions = ConditionList(conditions or [])
    if ready is not None and member_conditions.get(ConditionType.READY) is None:
        member_conditions.append(
            Condition(ConditionType.READY, ready, ready_since or datetime.now())
        )
    return MemberStatus(
        id=member_id,
        phase=phase,
        pod_name=f"{TEST_DEPLOYMENT_NAME}-{member_id}",
        persistent_volume_claim_name=claim_name or "",
        conditions=member_conditions,
        recent_terminations=list(recent_terminations or []),
    )


def make_status(
    members: Optional[Dict[ServerGroup, List[MemberStatus]]] = None,
    **kwargs,
) -> DeploymentStatus:
    status = DeploymentStatus(**kwargs)
    for group, group_members in (members or {}).items():
        status.members.members_of_group(group).extend(group_members)
    return status


def make_claim(
    name: str,
    storage_class_name: Optional[str] = None,
    resize_pending: bool = False,
) -> dict:
    """Build a claim resource the way the platform returns it"""
    claim = {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {"name": name},
        "spec": {},
        "status": {},
    }
    if storage_class_name is not None:
        claim["spec"]["storageClassName"] = storage_class_name
    if resize_pending:
        claim["status"]["conditions"] = [
            {
                "type": constants.CLAIM_CONDITION_FILE_SYSTEM_RESIZE_PENDING,
                "status": "True",
            }
        ]
    return claim


## Fakes #######################################################################


class ClaimStore:
    """Callable claim getter backed by a dict. Names listed in failing raise a
    ClusterError; unknown names return None.
    """

    def __init__(self, *claims: dict, failing: Optional[List[str]] = None):
        self.claims = {claim["metadata"]["name"]: claim for claim in claims}
        self.failing = set(failing or [])
        self.requested = []

    def __call__(self, name: str) -> Optional[dict]:
        self.requested.append(name)
        if name in self.failing:
            raise ClusterError(f"Failed to read claim {name}")
        return copy.deepcopy(self.claims.get(name))


class EventRecorder:
    """Callable event sink that keeps every event it receives"""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        log.debug("Recorded event: %s", event)
        self.events.append(event)

    @property
    def reasons(self) -> List[str]:
        return [event.reason for event in self.events]


class FakeAgencyClient(AgencyClient):
    """Agency client answering with a fixed leader, or failing"""

    def __init__(
        self,
        member_id: str,
        leader_id: str = "agent-1",
        fail: Union[bool, Exception] = False,
    ):
        self._member_id = member_id
        self.leader_id = leader_id
        self.fail = fail

    @property
    def member_id(self) -> str:
        return self._member_id

    def get_agent_state(self, timeout: float) -> AgentState:
        if isinstance(self.fail, Exception):
            raise self.fail
        if self.fail:
            raise ClusterError(f"Agent {self._member_id} is unreachable")
        return AgentState(member_id=self._member_id, leader_id=self.leader_id)


class FakeResilienceContext(ResilienceContext):
    """In-memory context. Every read returns a deep copy so that callers work
    on snapshots, and every write bumps the status version.
    """

    def __init__(
        self,
        spec: Optional[DeploymentSpec] = None,
        status: Optional[DeploymentStatus] = None,
        agency_clients: Optional[List[AgencyClient]] = None,
        agency_error: Optional[Exception] = None,
    ):
        self.spec = spec or make_spec()
        self.status = status or DeploymentStatus()
        self.agency_clients = list(agency_clients or [])
        self.agency_error = agency_error
        self.status_updates = []
        self.agency_predicates = []

    def get_spec(self) -> DeploymentSpec:
        return copy.deepcopy(self.spec)

    def get_status(self) -> DeploymentStatus:
        return copy.deepcopy(self.status)

    def update_status(self, status: DeploymentStatus, force: bool = False):
        new_status = copy.deepcopy(status)
        new_status.version = self.status.version + 1
        self.status = new_status
        self.status_updates.append((new_status, force))

    def get_agency_clients(self, predicate=None) -> List[AgencyClient]:
        self.agency_predicates.append(predicate)
        if self.agency_error is not None:
            raise self.agency_error
        return [
            client
            for client in self.agency_clients
            if predicate is None or predicate(client.member_id)
        ]
