"""
虚拟机模型：每台 VM 持有一个独占的 CloudletScheduler。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from core.cluster.host import Host
    from core.scheduling.cloudlet_scheduler import CloudletScheduler


@dataclass
class Vm:
    vm_id: int
    mips: float
    pes: int
    ram: int
    bw: int
    size: int
    cloudlet_scheduler: Optional["CloudletScheduler"] = None
    host: Optional["Host"] = field(default=None, repr=False)
    # 主机调度器为该 VM 分配的 PE 编号
    allocated_pe_ids: List[int] = field(default_factory=list)

    @property
    def is_created(self) -> bool:
        return self.host is not None
