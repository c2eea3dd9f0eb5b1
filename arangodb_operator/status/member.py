"""
Observed state of the individual members of a deployment
"""

# Standard
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

# Local
from ..utils import format_timestamp, parse_timestamp, prune_none


class MemberPhase(Enum):
    """Lifecycle phase of a member"""

    NONE = ""
    PENDING = "Pending"
    CREATING = "Creating"
    CREATED = "Created"
    FAILED = "Failed"
    CLEAN_OUT = "CleanOut"
    SHUTTING_DOWN = "ShuttingDown"
    ROTATING = "Rotating"
    UPGRADING = "Upgrading"

    def is_failed(self) -> bool:
        return self == MemberPhase.FAILED

    def is_created(self) -> bool:
        return self == MemberPhase.CREATED


class ConditionType(Enum):
    """Conditions that may be reported on a member"""

    READY = "Ready"
    TERMINATED = "Terminated"
    CLEANED_OUT = "CleanedOut"


@dataclass
class Condition:
    """A single observed condition with the time it last changed"""

    type: ConditionType
    status: bool
    last_transition_time: Optional[datetime] = None
    reason: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Condition":
        status = data.get("status", False)
        if isinstance(status, str):
            status = status == "True"
        return cls(
            type=ConditionType(data["type"]),
            status=status,
            last_transition_time=parse_timestamp(data.get("lastTransitionTime")),
            reason=data.get("reason", ""),
            message=data.get("message", ""),
        )

    def to_dict(self) -> dict:
        return prune_none(
            {
                "type": self.type.value,
                "status": "True" if self.status else "False",
                "lastTransitionTime": format_timestamp(self.last_transition_time),
                "reason": self.reason or None,
                "message": self.message or None,
            }
        )


class ConditionList(list):
    """List of member conditions with at most one entry per type"""

    def get(self, condition_type: ConditionType) -> Optional[Condition]:
        for condition in self:
            if condition.type == condition_type:
                return condition
        return None

    def is_true(self, condition_type: ConditionType) -> bool:
        condition = self.get(condition_type)
        return condition is not None and condition.status

    def update(
        self,
        condition_type: ConditionType,
        status: bool,
        reason: str = "",
        message: str = "",
        now: Optional[datetime] = None,
    ) -> bool:
        """Set the given condition. The transition time only moves when the
        status flips.

        Returns:
            changed:  bool
                True if anything about the condition changed
        """
        now = now or datetime.now()
        condition = self.get(condition_type)
        if condition is None:
            self.append(Condition(condition_type, status, now, reason, message))
            return True
        if condition.status != status:
            condition.status = status
            condition.last_transition_time = now
            condition.reason = reason
            condition.message = message
            return True
        if condition.reason != reason or condition.message != message:
            condition.reason = reason
            condition.message = message
            return True
        return False


@dataclass
class MemberStatus:  # pylint: disable=too-many-instance-attributes
    """The status of a single member of a group"""

    id: str
    phase: MemberPhase = MemberPhase.NONE
    pod_name: str = ""
    persistent_volume_claim_name: str = ""
    created_at: Optional[datetime] = None
    conditions: ConditionList = field(default_factory=ConditionList)
    recent_terminations: List[datetime] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.conditions, ConditionList):
            self.conditions = ConditionList(self.conditions)

    @classmethod
    def from_dict(cls, data: dict) -> "MemberStatus":
        return cls(
            id=data["id"],
            phase=MemberPhase(data.get("phase", "")),
            pod_name=data.get("podName", ""),
            persistent_volume_claim_name=data.get("persistentVolumeClaimName", ""),
            created_at=parse_timestamp(data.get("createdAt")),
            conditions=ConditionList(
                Condition.from_dict(cond) for cond in data.get("conditions") or []
            ),
            recent_terminations=[
                parse_timestamp(ts) for ts in data.get("recentTerminations") or []
            ],
        )

    def to_dict(self) -> dict:
        return prune_none(
            {
                "id": self.id,
                "phase": self.phase.value,
                "podName": self.pod_name or None,
                "persistentVolumeClaimName": self.persistent_volume_claim_name
                or None,
                "createdAt": format_timestamp(self.created_at),
                "conditions": [cond.to_dict() for cond in self.conditions] or None,
                "recentTerminations": [
                    format_timestamp(ts) for ts in self.recent_terminations
                ]
                or None,
            }
        )

    def recent_terminations_since(self, timestamp: datetime) -> int:
        """Count the terminations recorded after the given time"""
        return sum(1 for ts in self.recent_terminations if ts >= timestamp)


class MemberStatusList(list):
    """Ordered list of the members of one group"""

    @classmethod
    def from_list(cls, data: Optional[List[dict]]) -> "MemberStatusList":
        return cls(MemberStatus.from_dict(entry) for entry in data or [])

    def to_list(self) -> List[dict]:
        return [member.to_dict() for member in self]

    def contains_id(self, member_id: str) -> bool:
        return any(member.id == member_id for member in self)

    def element_by_id(self, member_id: str) -> Optional[MemberStatus]:
        for member in self:
            if member.id == member_id:
                return member
        return None

    def select_member_to_remove(self) -> Optional[MemberStatus]:
        """Pick the member to remove when scaling down. Members that are not
        ready are preferred, otherwise the most recently added member is used.

        Returns:
            member:  Optional[MemberStatus]
                The selected member, or None for an empty list
        """
        if not self:
            return None
        for member in self:
            if not member.conditions.is_true(ConditionType.READY):
                return member
        return self[-1]
