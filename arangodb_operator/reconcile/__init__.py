"""
Plan builders and the reconciliation pass that drives them
"""

# Local
from .plan_builder import create_plan
from .plan_builder_rotate import create_replace_member_plan, create_rotate_member_plan
from .plan_builder_scale import create_scale_plan
from .plan_builder_storage import create_rotate_server_storage_plan
from .reconciler import Reconciler
