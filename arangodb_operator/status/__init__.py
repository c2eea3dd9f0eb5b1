"""
Observed-state model of a deployment
"""

# Local
from .deployment import DeploymentStatus, DeploymentStatusMembers
from .member import (
    Condition,
    ConditionList,
    ConditionType,
    MemberPhase,
    MemberStatus,
    MemberStatusList,
)
