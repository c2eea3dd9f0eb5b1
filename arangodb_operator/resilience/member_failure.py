"""
Detection of members that should be marked as failed so that the plan
builder replaces them
"""

# Standard
from datetime import datetime, timedelta
from typing import Optional, Tuple

# First Party
import alog

# Local
from .. import config
from ..exceptions import AgencyHealthError
from ..spec import ServerGroup
from ..status import ConditionType, DeploymentStatus, MemberPhase, MemberStatus
from .agency import are_agents_healthy
from .context import ResilienceContext

log = alog.use_channel("RESIL")

# Phases that only exist while a plan is being executed
_PLAN_ONLY_PHASES = (MemberPhase.ROTATING, MemberPhase.UPGRADING, MemberPhase.CLEAN_OUT)


class Resilience:
    """Runs the resilience checks of a single deployment"""

    def __init__(self, context: ResilienceContext):
        self._context = context

    def check_member_failure(self, now: Optional[datetime] = None) -> bool:
        """Mark members as failed when they are stuck or crash-looping and it
        is safe to give up on them. The status is only written when at least
        one member changed.

        Args:
            now:  Optional[datetime]
                The current time. Defaults to datetime.now()

        Returns:
            updated:  bool
                True if the status was written

        Raises:
            ClusterError: If the agency cannot be reached or the status cannot
                be written
        """
        now = now or datetime.now()
        status = self._context.get_status()
        not_ready_threshold = timedelta(
            seconds=config.resilience.not_ready_threshold_seconds
        )
        terminations_since = now - timedelta(
            seconds=config.resilience.recent_terminations_window_seconds
        )
        termination_threshold = config.resilience.recent_terminations_threshold

        update_needed = False
        for group, members in status.members.iter_groups():
            for member in members:
                if member.phase in _PLAN_ONLY_PHASES and not status.plan:
                    log.warning(
                        "No plan but member [%s/%s] is in phase %s. Marking as failed",
                        group.value,
                        member.id,
                        member.phase.value,
                    )
                    member.phase = MemberPhase.FAILED
                    update_needed = True
                    continue

                if member.phase != MemberPhase.CREATED:
                    continue

                failure_reason = None
                ready_cond = member.conditions.get(ConditionType.READY)
                if (
                    ready_cond is not None
                    and not ready_cond.status
                    and ready_cond.last_transition_time is not None
                    and now - ready_cond.last_transition_time > not_ready_threshold
                ):
                    failure_reason = "not ready for too long"
                elif (
                    member.recent_terminations_since(terminations_since)
                    >= termination_threshold
                ):
                    failure_reason = "too many recent terminations"
                if failure_reason is None:
                    continue

                acceptable, reason = self.is_member_failure_acceptable(
                    status, group, member
                )
                if not acceptable:
                    log.warning(
                        "Member [%s/%s] is %s, but it is not safe to mark it as "
                        "failed: %s",
                        group.value,
                        member.id,
                        failure_reason,
                        reason,
                    )
                    continue
                log.info(
                    "Marking member [%s/%s] as failed: %s",
                    group.value,
                    member.id,
                    failure_reason,
                )
                member.phase = MemberPhase.FAILED
                update_needed = True

        if update_needed:
            self._context.update_status(status)
        return update_needed

    def is_member_failure_acceptable(
        self,
        status: DeploymentStatus,  # pylint: disable=unused-argument
        group: ServerGroup,
        member: MemberStatus,
    ) -> Tuple[bool, str]:
        """Decide whether the given member may be declared failed

        Agents may only fail while the remaining agents still form a healthy
        agency. DBServers need a healthy agency to move their data. Other
        groups can be replaced at will.

        Returns:
            acceptable:  bool
                True if the member may be marked as failed
            reason:  str
                Why not, when acceptable is False

        Raises:
            ClusterError: If the agency cannot be reached
        """
        if group == ServerGroup.AGENTS:
            clients = self._context.get_agency_clients(
                lambda member_id: member_id != member.id
            )
            return _agency_health(clients)
        if group == ServerGroup.DBSERVERS:
            return _agency_health(self._context.get_agency_clients())
        if group in (
            ServerGroup.COORDINATORS,
            ServerGroup.SYNCMASTERS,
            ServerGroup.SYNCWORKERS,
        ):
            return True, ""
        return False, f"Members of group {group.value} cannot be replaced"


def _agency_health(clients) -> Tuple[bool, str]:
    try:
        are_agents_healthy(clients)
    except AgencyHealthError as err:
        return False, str(err)
    return True, ""
