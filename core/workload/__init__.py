"""
Workload modeling utilities.
"""

from .cloudlet import (
    Cloudlet,
    CloudletStatus,
    UtilizationModel,
    UtilizationModelDynamic,
    UtilizationModelFull,
    UtilizationModelStochastic,
)

__all__ = [
    "Cloudlet",
    "CloudletStatus",
    "UtilizationModel",
    "UtilizationModelDynamic",
    "UtilizationModelFull",
    "UtilizationModelStochastic",
]
