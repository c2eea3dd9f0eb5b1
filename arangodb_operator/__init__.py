"""
Package exports
"""

# Local
from . import config, reconcile, resilience, spec, status
from .action import Action, ActionType, MemberID, Plan
from .events import Event
from .exceptions import (
    AgencyHealthError,
    ClusterError,
    ConfigError,
    ImmutableFieldError,
    ValidationError,
    assert_cluster,
    assert_valid,
)
from .reconcile import Reconciler, create_plan, create_rotate_server_storage_plan
from .resilience import AgencyClient, Resilience, ResilienceContext
from .spec import DeploymentSpec, ServerGroup
from .status import DeploymentStatus, MemberPhase, MemberStatus
