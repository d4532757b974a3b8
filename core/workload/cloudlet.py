"""
离散事件仿真用到的 Cloudlet（工作负载）原语与利用率模型。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, Union
import random

if TYPE_CHECKING:
    from core.cluster.vm import Vm


class CloudletStatus(Enum):
    INSTANTIATED = auto()
    QUEUED = auto()
    INEXEC = auto()
    SUCCESS = auto()
    FAILED = auto()


class UtilizationModel:
    """给定仿真时刻返回 [0, 1] 的资源利用率。"""

    def get_utilization(self, time: float) -> float:
        raise NotImplementedError


class UtilizationModelFull(UtilizationModel):
    """始终使用 100% 的资源。"""

    def get_utilization(self, time: float) -> float:
        return 1.0


class UtilizationModelDynamic(UtilizationModel):
    def __init__(self, initial_utilization: float = 0.0):
        if not 0.0 <= initial_utilization <= 1.0:
            raise ValueError(f"利用率必须位于 [0, 1]: {initial_utilization}")
        self.initial_utilization = initial_utilization

    def get_utilization(self, time: float) -> float:
        return self.initial_utilization


class UtilizationModelStochastic(UtilizationModel):
    """按时刻缓存的均匀随机利用率，同一时刻多次查询结果一致。"""

    def __init__(self, seed: Union[int, str, None] = None):
        self._rng = random.Random(seed)
        self._history: dict = {}

    def get_utilization(self, time: float) -> float:
        if time not in self._history:
            self._history[time] = self._rng.random()
        return self._history[time]


@dataclass
class Cloudlet:
    """提交给 VM 的单个计算单元；length 为每个 PE 需要执行的指令数 (MI)。"""
    cloudlet_id: int
    length: float
    pes: int
    file_size: int = 0
    output_size: int = 0
    utilization_model_cpu: UtilizationModel = field(default_factory=UtilizationModelFull)
    utilization_model_ram: UtilizationModel = field(default_factory=UtilizationModelFull)
    utilization_model_bw: UtilizationModel = field(default_factory=UtilizationModelFull)
    status: CloudletStatus = CloudletStatus.INSTANTIATED
    submission_time: Optional[float] = None
    start_time: Optional[float] = None
    finish_time: Optional[float] = None
    vm: Optional["Vm"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError(f"Cloudlet 长度必须大于0: {self.length}")
        if self.pes <= 0:
            raise ValueError(f"Cloudlet PE 数必须大于0: {self.pes}")

    @property
    def start_wait_time(self) -> float:
        """从提交到开始执行的等待时间。"""
        if self.start_time is None or self.submission_time is None:
            return 0.0
        return self.start_time - self.submission_time

    @property
    def total_execution_time(self) -> float:
        if self.start_time is None or self.finish_time is None:
            return 0.0
        return self.finish_time - self.start_time
