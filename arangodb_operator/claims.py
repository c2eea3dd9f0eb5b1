"""
Helpers for reading persistent volume claims as returned by the platform
"""

# Standard
from typing import Callable

# Local
from . import constants
from .utils import nested_get

# Signature of the collaborator that reads a claim by name. It returns the
# claim resource as a dict, or None if it does not exist. Any error it raises
# is reported against the member and does not stop planning.
ClaimGetter = Callable[[str], dict]


def get_claim_storage_class_name(claim: dict) -> str:
    """Get the storage class a claim was created with. An unset class is
    returned as the empty string, meaning the platform default class.
    """
    return nested_get(claim, "spec.storageClassName") or ""


def is_claim_file_system_resize_pending(claim: dict) -> bool:
    """Check whether the claim has been resized but the filesystem on it has
    not been grown yet. This needs a restart of the pod using the claim.
    """
    conditions = nested_get(claim, "status.conditions") or []
    return any(
        cond.get("type") == constants.CLAIM_CONDITION_FILE_SYSTEM_RESIZE_PENDING
        and str(cond.get("status")) == "True"
        for cond in conditions
    )
