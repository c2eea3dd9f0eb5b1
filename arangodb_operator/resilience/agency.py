"""
Interface to the members of the agency, the consensus store that holds the
authoritative cluster metadata
"""

# Standard
from dataclasses import dataclass
from typing import List, Optional
import abc

# First Party
import alog

# Local
from .. import config
from ..exceptions import AgencyHealthError

log = alog.use_channel("AGNCY")


@dataclass(frozen=True)
class AgentState:
    """What a single agent reports about the agency"""

    member_id: str
    leader_id: str
    commit_index: int = 0


class AgencyClient(abc.ABC):
    """A connection to a single agent"""

    @property
    @abc.abstractmethod
    def member_id(self) -> str:
        """The member id of the agent this client talks to"""

    @abc.abstractmethod
    def get_agent_state(self, timeout: float) -> AgentState:
        """Ask the agent for its view of the agency

        Args:
            timeout:  float
                Seconds to wait for an answer

        Returns:
            state:  AgentState
                The agent's current view

        Raises:
            ClusterError: If the agent cannot be reached
        """


def are_agents_healthy(
    clients: List[AgencyClient],
    timeout: Optional[float] = None,
):
    """Check that the given agents form a healthy agency: every agent answers
    and all of them follow the same leader.

    Args:
        clients:  List[AgencyClient]
            The agents to check
        timeout:  Optional[float]
            Seconds to wait for each agent. Defaults to the
            resilience.agency_timeout_seconds config

    Raises:
        AgencyHealthError: If the agents are reachable but not healthy
        ClusterError: If an agent cannot be reached
    """
    if timeout is None:
        timeout = config.resilience.agency_timeout_seconds
    if not clients:
        raise AgencyHealthError("No agents available")

    leaders = set()
    for client in clients:
        state = client.get_agent_state(timeout)
        log.debug3("Agent [%s] reports %s", client.member_id, state)
        if not state.leader_id:
            raise AgencyHealthError(f"Agent {client.member_id} has no leader")
        leaders.add(state.leader_id)

    if len(leaders) > 1:
        raise AgencyHealthError(
            f"Agents do not agree on a leader: {sorted(leaders)}"
        )
    log.debug2("Agency of %d agents is healthy", len(clients))
