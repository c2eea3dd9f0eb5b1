"""
This module implements custom exceptions
"""

# Standard
from typing import List, Optional

## Base Error ##################################################################


class OperatorError(Exception):
    """Base class for all arangodb_operator exceptions"""

    def __init__(self, message: str, is_fatal_error: bool):
        """Construct with a flag indicating whether this is a fatal error. This
        will be a static property of all children.
        """
        super().__init__(message)
        self._is_fatal_error = is_fatal_error

    @property
    def is_fatal_error(self):
        """Property indicating whether or not this error should stop the
        reconciliation of the deployment until something outside the operator
        changes
        """
        return self._is_fatal_error


## Fatal Errors ################################################################


class OperatorFatalError(OperatorError):
    """An OperatorFatalError is one that will not resolve itself by running
    another reconciliation pass against the same inputs.
    """

    def __init__(self, message: str = ""):
        super().__init__(message=message, is_fatal_error=True)


class ValidationError(OperatorFatalError):
    """Exception indicating that a deployment spec violates an invariant. The
    user must correct the spec before planning can proceed.
    """


class ConfigError(OperatorFatalError):
    """Exception caused by invalid library configuration values"""


class ClusterError(OperatorFatalError):
    """Exception caused when an operation against the cluster (platform reads,
    agency connections) fails in an unexpected way.
    """


## Expected Errors #############################################################


class OperatorExpectedError(OperatorError):
    """An OperatorExpectedError is one that indicates an expected failure
    condition that should cause a reconciliation to terminate, but is expected
    to resolve in a subsequent reconciliation.
    """

    def __init__(self, message: str = ""):
        super().__init__(message=message, is_fatal_error=False)


class ImmutableFieldError(OperatorExpectedError):
    """Exception raised when a spec edit touches immutable fields and the
    configured policy is to reject such edits
    """

    def __init__(self, message: str = "", reset_fields: Optional[List[str]] = None):
        self.reset_fields = list(reset_fields or [])
        super().__init__(message)


class AgencyHealthError(OperatorExpectedError):
    """Exception indicating that the agency is reachable but not in a healthy,
    agreed-upon state
    """


## Assertions ##################################################################


def assert_valid(condition: bool, message: str = ""):
    """Replacement for assert() which will throw a ValidationError. This
    should be used when validating user-provided spec values.
    """
    if not condition:
        raise ValidationError(message)


def assert_cluster(condition: bool, message: str = ""):
    """Replacement for assert() which will throw a ClusterError. This should
    be used when an operation in the cluster (such as reading a claim or
    connecting to an agent) must succeed.
    """
    if not condition:
        raise ClusterError(message)
