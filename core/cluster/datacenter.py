"""
数据中心：聚合主机并持有 VM 放置策略。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from .host import Host

if TYPE_CHECKING:
    from core.scheduling.allocation import VmAllocationPolicy


@dataclass
class Datacenter:
    hosts: List[Host]
    vm_allocation_policy: "VmAllocationPolicy"

    def __post_init__(self) -> None:
        for host in self.hosts:
            host.datacenter = self
        self.vm_allocation_policy.datacenter = self
