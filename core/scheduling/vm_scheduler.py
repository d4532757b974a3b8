"""
主机级调度器：在同一主机的多台 VM 之间分配 PE。
"""

from __future__ import annotations

from typing import List

from core.cluster.host import Host, ProcessingElement
from core.cluster.vm import Vm


class VmScheduler:
    def select_pes(self, host: Host, vm: Vm) -> List[ProcessingElement]:
        """返回可分配给 VM 的 PE 列表，不足 vm.pes 个时返回空列表。"""
        raise NotImplementedError

    def mips_per_pe(self, pe: ProcessingElement, vm: Vm) -> float:
        raise NotImplementedError

    def is_suitable_for_vm(self, host: Host, vm: Vm) -> bool:
        return bool(self.select_pes(host, vm))

    def allocate_pes_for_vm(self, host: Host, vm: Vm) -> bool:
        pes = self.select_pes(host, vm)
        if not pes:
            return False
        for pe in pes:
            pe.allocated_mips += self.mips_per_pe(pe, vm)
        vm.allocated_pe_ids = [pe.pe_id for pe in pes]
        return True


class VmSchedulerTimeShared(VmScheduler):
    """按 MIPS 切分 PE：多台 VM 可共享同一个 PE，只要其剩余 MIPS 足够。"""

    def select_pes(self, host: Host, vm: Vm) -> List[ProcessingElement]:
        candidates = [pe for pe in host.pes if pe.free_mips >= vm.mips]
        if len(candidates) < vm.pes:
            return []
        # 剩余 MIPS 多的 PE 优先
        candidates.sort(key=lambda pe: pe.free_mips, reverse=True)
        return candidates[: vm.pes]

    def mips_per_pe(self, pe: ProcessingElement, vm: Vm) -> float:
        return vm.mips


class VmSchedulerSpaceShared(VmScheduler):
    """PE 独占：VM 只能使用完全空闲的 PE，且占满整个 PE。"""

    def select_pes(self, host: Host, vm: Vm) -> List[ProcessingElement]:
        candidates = [pe for pe in host.pes if not pe.is_busy() and pe.mips >= vm.mips]
        if len(candidates) < vm.pes:
            return []
        return candidates[: vm.pes]

    def mips_per_pe(self, pe: ProcessingElement, vm: Vm) -> float:
        return pe.mips
