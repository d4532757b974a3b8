"""
数据中心代理：负责 VM 放置请求与 Cloudlet 的绑定/提交。
"""

from __future__ import annotations

import logging
from typing import List

from core.cluster.datacenter import Datacenter
from core.cluster.vm import Vm
from core.workload.cloudlet import Cloudlet

logger = logging.getLogger(__name__)


class DatacenterBroker:
    """按提交顺序放置 VM，再把 Cloudlet 轮询绑定到已创建的 VM 上。"""

    def __init__(self, datacenter: Datacenter):
        self.datacenter = datacenter
        self.vm_waiting_list: List[Vm] = []
        self.vm_created_list: List[Vm] = []
        self.vm_failed_list: List[Vm] = []
        self.cloudlet_waiting_list: List[Cloudlet] = []
        self.cloudlet_submitted_list: List[Cloudlet] = []
        self.cloudlet_finished_list: List[Cloudlet] = []

    def submit_vm_list(self, vms: List[Vm]) -> None:
        self.vm_waiting_list.extend(vms)

    def submit_cloudlet_list(self, cloudlets: List[Cloudlet]) -> None:
        self.cloudlet_waiting_list.extend(cloudlets)

    def create_vms(self) -> None:
        policy = self.datacenter.vm_allocation_policy
        for vm in self.vm_waiting_list:
            if policy.allocate_host_for_vm(vm):
                vm.cloudlet_scheduler.vm = vm
                self.vm_created_list.append(vm)
            else:
                logger.warning("VM %s 无可用主机，放置失败", vm.vm_id)
                self.vm_failed_list.append(vm)
        self.vm_waiting_list = []

    def submit_cloudlets(self, current_time: float) -> None:
        """轮询绑定：第 i 个 Cloudlet 交给第 i % N 台已创建 VM。"""
        if not self.vm_created_list:
            if self.cloudlet_waiting_list:
                logger.warning("没有成功创建的 VM，%d 个 Cloudlet 未提交", len(self.cloudlet_waiting_list))
            return
        for index, cloudlet in enumerate(self.cloudlet_waiting_list):
            vm = self.vm_created_list[index % len(self.vm_created_list)]
            cloudlet.vm = vm
            vm.cloudlet_scheduler.cloudlet_submit(cloudlet, current_time)
            self.cloudlet_submitted_list.append(cloudlet)
        self.cloudlet_waiting_list = []

    def start(self, current_time: float = 0.0) -> None:
        self.create_vms()
        self.submit_cloudlets(current_time)

    def record_finished(self, cloudlets: List[Cloudlet]) -> None:
        self.cloudlet_finished_list.extend(cloudlets)
