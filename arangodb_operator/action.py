"""
Planned steps handed from the plan builders to the executor
"""

# Standard
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
import uuid

# Local
from .exceptions import assert_valid
from .spec.types import ServerGroup
from .utils import format_timestamp, parse_timestamp, prune_none


class ActionType(Enum):
    """The kind of step to take"""

    ADD_MEMBER = "AddMember"
    REMOVE_MEMBER = "RemoveMember"
    RECREATE_MEMBER = "RecreateMember"
    CLEAN_OUT_MEMBER = "CleanOutMember"
    SHUTDOWN_MEMBER = "ShutdownMember"
    ROTATE_MEMBER = "RotateMember"
    UPGRADE_MEMBER = "UpgradeMember"
    WAIT_FOR_MEMBER_UP = "WaitForMemberUp"
    RENEW_TLS_CERTIFICATE = "RenewTLSCertificate"


class MemberIDKind(Enum):
    CONCRETE = "concrete"
    NEW = "new"
    PREVIOUS_ACTION = "previous-action"


# Wire value used for "the member produced by the preceding action"
MEMBER_ID_PREVIOUS_ACTION_WIRE = "@previous"


@dataclass(frozen=True)
class MemberID:
    """The member an action targets. Besides a concrete id, an action can ask
    the executor to generate a new id, or to use the id produced by the
    immediately preceding action in the plan. Only the executor resolves the
    latter two.
    """

    kind: MemberIDKind
    value: str = ""

    @classmethod
    def concrete(cls, member_id: str) -> "MemberID":
        assert_valid(bool(member_id), "A concrete member id must not be empty")
        return cls(MemberIDKind.CONCRETE, member_id)

    @classmethod
    def new(cls) -> "MemberID":
        return cls(MemberIDKind.NEW)

    @classmethod
    def from_previous_action(cls) -> "MemberID":
        return cls(MemberIDKind.PREVIOUS_ACTION)

    def is_concrete(self) -> bool:
        return self.kind == MemberIDKind.CONCRETE

    def is_from_previous_action(self) -> bool:
        return self.kind == MemberIDKind.PREVIOUS_ACTION

    @classmethod
    def parse(cls, value: Optional[str]) -> "MemberID":
        if not value:
            return cls.new()
        if value == MEMBER_ID_PREVIOUS_ACTION_WIRE:
            return cls.from_previous_action()
        return cls.concrete(value)

    def to_wire(self) -> str:
        if self.kind == MemberIDKind.PREVIOUS_ACTION:
            return MEMBER_ID_PREVIOUS_ACTION_WIRE
        return self.value

    def __str__(self):
        return self.to_wire() or "<new>"


@dataclass
class Action:
    """One planned step targeting a member of a group"""

    type: ActionType
    group: ServerGroup
    member_id: MemberID
    reason: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    creation_time: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        return cls(
            type=ActionType(data["type"]),
            group=ServerGroup(data["group"]),
            member_id=MemberID.parse(data.get("memberID")),
            reason=data.get("reason", ""),
            id=data["id"],
            creation_time=parse_timestamp(data.get("creationTime")),
        )

    def to_dict(self) -> dict:
        return prune_none(
            {
                "id": self.id,
                "type": self.type.value,
                "group": self.group.value,
                "memberID": self.member_id.to_wire() or None,
                "reason": self.reason or None,
                "creationTime": format_timestamp(self.creation_time),
            }
        )

    def __str__(self):
        return f"{self.type.value}({self.group.value}/{self.member_id})"


def new_action(
    action_type: ActionType,
    group: ServerGroup,
    member_id: MemberID,
    reason: str = "",
) -> Action:
    """Create a new action with a fresh id"""
    return Action(type=action_type, group=group, member_id=member_id, reason=reason)


class Plan(list):
    """Ordered list of actions. An empty plan means nothing to do."""

    @classmethod
    def from_list(cls, data: Optional[List[dict]]) -> "Plan":
        return cls(Action.from_dict(entry) for entry in data or [])

    def to_list(self) -> List[dict]:
        return [action.to_dict() for action in self]

    def action_types(self) -> List[ActionType]:
        return [action.type for action in self]

    def groups(self) -> List[ServerGroup]:
        return [action.group for action in self]
