"""
Cluster-aware checks and the context through which they reach the deployment
"""

# Local
from .agency import AgencyClient, AgentState, are_agents_healthy
from .context import MemberPredicate, ResilienceContext
from .member_failure import Resilience
