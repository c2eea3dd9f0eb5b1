"""
Observed state of a whole deployment
"""

# Standard
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Tuple

# Local
from ..action import Plan
from ..exceptions import assert_cluster
from ..spec import ALL_SERVER_GROUPS, DeploymentSpec, ServerGroup
from .member import MemberStatus, MemberStatusList


@dataclass
class DeploymentStatusMembers:  # pylint: disable=too-many-instance-attributes
    """Members of a deployment, one list per group"""

    single: MemberStatusList = field(default_factory=MemberStatusList)
    agents: MemberStatusList = field(default_factory=MemberStatusList)
    dbservers: MemberStatusList = field(default_factory=MemberStatusList)
    coordinators: MemberStatusList = field(default_factory=MemberStatusList)
    syncmasters: MemberStatusList = field(default_factory=MemberStatusList)
    syncworkers: MemberStatusList = field(default_factory=MemberStatusList)

    def __post_init__(self):
        for group in ALL_SERVER_GROUPS:
            members = getattr(self, group.value)
            if not isinstance(members, MemberStatusList):
                setattr(self, group.value, MemberStatusList(members))

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DeploymentStatusMembers":
        data = data or {}
        return cls(
            **{
                group.value: MemberStatusList.from_list(data.get(group.value))
                for group in ALL_SERVER_GROUPS
            }
        )

    def to_dict(self) -> dict:
        return {
            group.value: self.members_of_group(group).to_list()
            for group in ALL_SERVER_GROUPS
            if self.members_of_group(group)
        }

    def members_of_group(self, group: ServerGroup) -> MemberStatusList:
        return getattr(self, group.value)

    def foreach_server_group(
        self, callback: Callable[[ServerGroup, MemberStatusList], None]
    ):
        """Call the callback for every group, in the fixed group order, with
        the members of that group. Errors raised by the callback propagate.
        """
        for group in ALL_SERVER_GROUPS:
            callback(group, self.members_of_group(group))

    def iter_groups(self) -> Iterator[Tuple[ServerGroup, MemberStatusList]]:
        """Iterate (group, members) pairs in the fixed group order"""
        for group in ALL_SERVER_GROUPS:
            yield group, self.members_of_group(group)

    def element_by_id(
        self, member_id: str
    ) -> Tuple[Optional[MemberStatus], Optional[ServerGroup]]:
        for group, members in self.iter_groups():
            member = members.element_by_id(member_id)
            if member is not None:
                return member, group
        return None, None

    def update(self, member: MemberStatus, group: ServerGroup):
        """Replace the member with the same id in the given group

        Raises:
            ClusterError: If no member with that id exists in the group
        """
        members = self.members_of_group(group)
        for idx, current in enumerate(members):
            if current.id == member.id:
                members[idx] = member
                return
        assert_cluster(False, f"Member {member.id} not found in group {group.value}")


@dataclass
class DeploymentStatus:
    """The status of a deployment as owned by the controller. The version is
    bumped by the writer each time the status is stored.
    """

    members: DeploymentStatusMembers = field(default_factory=DeploymentStatusMembers)
    plan: Plan = field(default_factory=Plan)
    accepted_spec: Optional[DeploymentSpec] = None
    version: int = 0

    def __post_init__(self):
        if not isinstance(self.plan, Plan):
            self.plan = Plan(self.plan)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DeploymentStatus":
        data = data or {}
        accepted_spec = data.get("acceptedSpec")
        return cls(
            members=DeploymentStatusMembers.from_dict(data.get("members")),
            plan=Plan.from_list(data.get("plan")),
            accepted_spec=DeploymentSpec.from_dict(accepted_spec)
            if accepted_spec is not None
            else None,
            version=data.get("version", 0),
        )

    def to_dict(self) -> dict:
        result = {
            "members": self.members.to_dict(),
            "plan": self.plan.to_list(),
            "version": self.version,
        }
        if self.accepted_spec is not None:
            result["acceptedSpec"] = self.accepted_spec.to_dict()
        return result
