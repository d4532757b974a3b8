"""
VM 放置策略：决定每台 VM 落在哪台主机上。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from core.cluster.host import Host
from core.cluster.vm import Vm

if TYPE_CHECKING:
    from core.cluster.datacenter import Datacenter


class VmAllocationPolicy:
    """放置策略基类：子类只需实现 find_host_for_vm。"""

    def __init__(self) -> None:
        self.datacenter: Optional["Datacenter"] = None

    @property
    def hosts(self) -> List[Host]:
        return self.datacenter.hosts if self.datacenter else []

    def find_host_for_vm(self, vm: Vm) -> Optional[Host]:
        raise NotImplementedError

    def allocate_host_for_vm(self, vm: Vm) -> bool:
        """选主机并在其上创建 VM，找不到合适主机时返回 False。"""
        host = self.find_host_for_vm(vm)
        if host is None:
            return False
        return host.create_vm(vm)


class VmAllocationPolicySimple(VmAllocationPolicy):
    """选择忙碌 PE 最少的主机（最空闲优先），实现负载均摊。"""

    def find_host_for_vm(self, vm: Vm) -> Optional[Host]:
        candidates = [host for host in self.hosts if host.is_suitable_for_vm(vm)]
        if not candidates:
            return None
        return min(candidates, key=lambda host: host.busy_pes_number)


class VmAllocationPolicyFirstFit(VmAllocationPolicy):
    def find_host_for_vm(self, vm: Vm) -> Optional[Host]:
        for host in self.hosts:
            if host.is_suitable_for_vm(vm):
                return host
        return None


class VmAllocationPolicyBestFit(VmAllocationPolicy):
    """选择忙碌 PE 最多、但仍能容纳该 VM 的主机，尽量压紧。"""

    def find_host_for_vm(self, vm: Vm) -> Optional[Host]:
        candidates = [host for host in self.hosts if host.is_suitable_for_vm(vm)]
        if not candidates:
            return None
        return max(candidates, key=lambda host: host.busy_pes_number)
