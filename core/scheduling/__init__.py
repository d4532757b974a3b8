"""
Scheduling package entrypoints.
"""

from .allocation import (
    VmAllocationPolicy,
    VmAllocationPolicyBestFit,
    VmAllocationPolicyFirstFit,
    VmAllocationPolicySimple,
)
from .cloudlet_scheduler import (
    CloudletExecution,
    CloudletScheduler,
    CloudletSchedulerSpaceShared,
    CloudletSchedulerTimeShared,
)
from .vm_scheduler import VmScheduler, VmSchedulerSpaceShared, VmSchedulerTimeShared

__all__ = [
    "VmAllocationPolicy",
    "VmAllocationPolicySimple",
    "VmAllocationPolicyFirstFit",
    "VmAllocationPolicyBestFit",
    "VmScheduler",
    "VmSchedulerTimeShared",
    "VmSchedulerSpaceShared",
    "CloudletExecution",
    "CloudletScheduler",
    "CloudletSchedulerTimeShared",
    "CloudletSchedulerSpaceShared",
]
