"""
物理主机模型。

主机由若干同频 PE 组成，VM 能否落在某台主机上由资源余量与主机级
VmScheduler 共同决定。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from core.cluster.datacenter import Datacenter
    from core.cluster.vm import Vm
    from core.scheduling.vm_scheduler import VmScheduler


@dataclass
class ProcessingElement:
    """单个处理核心，记录容量与已分配的 MIPS。"""
    pe_id: int
    mips: float
    allocated_mips: float = 0.0

    @property
    def free_mips(self) -> float:
        return self.mips - self.allocated_mips

    def is_busy(self) -> bool:
        return self.allocated_mips > 0


@dataclass
class Host:
    """聚合 PE/RAM/带宽/存储，并持有一个独占的 VmScheduler 实例。"""
    host_id: int
    pes: List[ProcessingElement]
    ram: int
    bw: int
    storage: int
    vm_scheduler: Optional["VmScheduler"] = None
    vm_list: List["Vm"] = field(default_factory=list)
    datacenter: Optional["Datacenter"] = field(default=None, repr=False)

    @classmethod
    def create(
        cls,
        host_id: int,
        pes_number: int,
        mips: float,
        ram: int,
        bw: int,
        storage: int,
        vm_scheduler: "VmScheduler",
    ) -> "Host":
        pes = [ProcessingElement(pe_id=i, mips=mips) for i in range(pes_number)]
        return cls(host_id=host_id, pes=pes, ram=ram, bw=bw, storage=storage, vm_scheduler=vm_scheduler)

    @property
    def working_pes_number(self) -> int:
        return len(self.pes)

    @property
    def busy_pes_number(self) -> int:
        return sum(1 for pe in self.pes if pe.is_busy())

    def available_resources(self) -> Dict[str, int]:
        return {
            "ram": self.ram - sum(vm.ram for vm in self.vm_list),
            "bw": self.bw - sum(vm.bw for vm in self.vm_list),
            "storage": self.storage - sum(vm.size for vm in self.vm_list),
        }

    def is_suitable_for_vm(self, vm: "Vm") -> bool:
        """RAM/带宽/存储余量足够，且主机调度器能为其分配 PE。"""
        available = self.available_resources()
        if vm.ram > available["ram"] or vm.bw > available["bw"] or vm.size > available["storage"]:
            return False
        if self.vm_scheduler is None:
            return False
        return self.vm_scheduler.is_suitable_for_vm(self, vm)

    def create_vm(self, vm: "Vm") -> bool:
        if not self.is_suitable_for_vm(vm):
            return False
        self.vm_scheduler.allocate_pes_for_vm(self, vm)
        self.vm_list.append(vm)
        vm.host = self
        return True
