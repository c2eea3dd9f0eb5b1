"""
One reconciliation pass of a single deployment: normalize the spec, run the
resilience checks and store the next plan for the executor.
"""

# Standard
from datetime import datetime
from typing import Optional

# Third Party
from deepdiff import DeepDiff

# First Party
import alog

# Local
from ..action import Plan
from ..claims import ClaimGetter
from ..events import EventSink, new_immutable_fields_reset_event
from ..resilience import Resilience, ResilienceContext
from ..spec import inspect_spec_change
from ..utils import nested_get
from .plan_builder import create_plan

log = alog.use_channel("RECON")


class Reconciler:
    """Runs reconciliation passes for one deployment. The caller must not run
    two passes of the same deployment at the same time.
    """

    def __init__(
        self,
        context: ResilienceContext,
        get_claim: ClaimGetter,
        create_event: EventSink,
        api_object: Optional[dict] = None,
        immutable_policy: Optional[str] = None,
    ):
        """Construct with the collaborators of the deployment

        Args:
            context:  ResilienceContext
                Access to the spec, status and agency of the deployment
            get_claim:  ClaimGetter
                Reads a storage claim by name
            create_event:  EventSink
                Receives incidents
            api_object:  Optional[dict]
                The deployment resource. Its metadata.name is used to derive
                default secret names.
            immutable_policy:  Optional[str]
                "heal" or "reject". Defaults to the immutable_fields.policy
                config
        """
        self._context = context
        self._get_claim = get_claim
        self._create_event = create_event
        self._api_object = api_object
        self._immutable_policy = immutable_policy
        self._resilience = Resilience(context)

    @property
    def deployment_name(self) -> str:
        return nested_get(self._api_object or {}, "metadata.name", "")

    def reconcile(self, now: Optional[datetime] = None) -> Plan:
        """Run a single reconciliation pass

        Args:
            now:  Optional[datetime]
                The current time, used by the resilience checks

        Returns:
            plan:  Plan
                The plan stored in the status for the executor

        Raises:
            ValidationError: If the spec is invalid. Nothing is planned.
            ImmutableFieldError: If the policy rejects an immutable edit
            ClusterError: If the agency or the status store fails
        """
        log.debug("Reconciling deployment [%s]", self.deployment_name)
        self._resilience.check_member_failure(now)

        # Take the snapshot after the resilience checks so their changes are
        # visible to the planners
        status = self._context.get_status()
        before = status.to_dict()

        spec, reset_fields = inspect_spec_change(
            status.accepted_spec,
            self._context.get_spec(),
            self.deployment_name,
            self._immutable_policy,
        )
        if reset_fields:
            self._create_event(
                new_immutable_fields_reset_event(self._api_object, reset_fields)
            )
        status.accepted_spec = spec

        plan, changed = create_plan(
            self._api_object,
            status.plan,
            spec,
            status,
            self._get_claim,
            self._create_event,
        )
        if changed:
            status.plan = plan

        if DeepDiff(before, status.to_dict()):
            log.debug("Found meaningful change. Updating status")
            self._context.update_status(status)
        return status.plan
