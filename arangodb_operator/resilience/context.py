"""
This defines the capability surface the resilience checks and the plan
builders use to reach the deployment they work on. It is implemented by the
controller that owns the deployment.
"""

# Standard
from typing import Callable, List, Optional
import abc

# Local
from ..spec import DeploymentSpec
from ..status import DeploymentStatus
from .agency import AgencyClient

# Predicate over agent member ids used to filter agency connections
MemberPredicate = Callable[[str], bool]


class ResilienceContext(abc.ABC):
    """
    Base class for the context handed to resilience checks and plan builders.
    A context belongs to exactly one deployment, and only one reconciliation
    pass of that deployment may use it at a time.
    """

    @abc.abstractmethod
    def get_spec(self) -> DeploymentSpec:
        """Get the spec of the deployment as of the start of the pass

        Returns:
            spec:  DeploymentSpec
                A snapshot that does not change while the pass runs
        """

    @abc.abstractmethod
    def get_status(self) -> DeploymentStatus:
        """Get the status of the deployment as of the start of the pass

        Returns:
            status:  DeploymentStatus
                A snapshot that the caller may modify freely. Modifications
                only take effect through update_status.
        """

    @abc.abstractmethod
    def update_status(self, status: DeploymentStatus, force: bool = False):
        """Replace the status of the deployment with the given status

        Args:
            status:  DeploymentStatus
                The complete new status
            force:  bool
                If True, write even when the stored status changed since the
                snapshot was taken. Only used for corrections that must apply.

        Raises:
            ClusterError: If the status could not be written
        """

    @abc.abstractmethod
    def get_agency_clients(
        self,
        predicate: Optional[MemberPredicate] = None,
    ) -> List[AgencyClient]:
        """Get a client connection for every agent of the deployment

        Args:
            predicate:  Optional[MemberPredicate]
                If given, only agents whose id satisfies the predicate are
                included

        Returns:
            clients:  List[AgencyClient]
                One client per included agent

        Raises:
            ClusterError: If a connection could not be established. Failing
                connections are never reported as an empty list.
        """
