"""
Tests for the agency health check
"""

# Third Party
import pytest

# Local
from arangodb_operator.exceptions import AgencyHealthError, ClusterError
from arangodb_operator.resilience import are_agents_healthy
from arangodb_operator.test_helpers.helpers import FakeAgencyClient, configure_logging

configure_logging()


def make_agency(*leaders):
    return [
        FakeAgencyClient(f"agent-{idx + 1}", leader_id=leader)
        for idx, leader in enumerate(leaders)
    ]


def test_healthy_agency():
    """Make sure agents following the same leader are healthy"""
    are_agents_healthy(make_agency("agent-1", "agent-1", "agent-1"))


def test_no_agents():
    """Make sure an empty agency is not healthy"""
    with pytest.raises(AgencyHealthError):
        are_agents_healthy([])


def test_leader_disagreement():
    """Make sure agents following different leaders are not healthy"""
    with pytest.raises(AgencyHealthError, match="agree"):
        are_agents_healthy(make_agency("agent-1", "agent-2", "agent-1"))


def test_no_leader():
    """Make sure an agent without a leader is not healthy"""
    with pytest.raises(AgencyHealthError, match="no leader"):
        are_agents_healthy(make_agency("agent-1", "", "agent-1"))


def test_unreachable_agent():
    """Make sure a connection failure is not mistaken for an unhealthy agency"""
    agency = make_agency("agent-1", "agent-1")
    agency.append(FakeAgencyClient("agent-3", fail=True))
    with pytest.raises(ClusterError):
        are_agents_healthy(agency)
