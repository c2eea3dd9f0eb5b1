"""
Declarative desired-state model of a deployment
"""

# Local
from .admission import inspect_spec_change
from .authentication import AuthenticationSpec
from .bootstrap import (
    PASSWORD_SECRET_NAME_AUTO,
    PASSWORD_SECRET_NAME_NONE,
    BootstrapSpec,
    PasswordSecretName,
    PasswordSecretNameList,
)
from .deployment import DeploymentSpec, SyncSpec
from .server_group import ServerGroupSpec, get_min_count
from .tls import DEFAULT_TLS_TTL, TLSSpec
from .types import ALL_SERVER_GROUPS, DeploymentMode, Environment, ServerGroup
