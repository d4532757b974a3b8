"""
离散事件仿真引擎，实现“放置 VM → 提交 Cloudlet → 推进到下一次完成”的循环。
"""

from __future__ import annotations

import logging
from typing import List, Optional

from core.cluster.vm import Vm
from core.workload.cloudlet import Cloudlet

from .broker import DatacenterBroker
from .config import SimulationConfig

logger = logging.getLogger(__name__)


class SimulationEngine:
    """同步执行一次完整仿真；run() 返回时所有可完成的 Cloudlet 均已结束。"""
    def __init__(self, broker: DatacenterBroker, config: Optional[SimulationConfig] = None):
        self.broker = broker
        self.config = config or SimulationConfig()
        self.clock = 0.0

    def _active_vms(self) -> List[Vm]:
        return [vm for vm in self.broker.vm_created_list if vm.cloudlet_scheduler.has_work()]

    def _next_event_time(self, vms: List[Vm]) -> Optional[float]:
        delays = []
        for vm in vms:
            delay = vm.cloudlet_scheduler.next_finish_delay(self.clock)
            if delay is not None:
                delays.append(delay)
        if not delays:
            return None
        return self.clock + min(delays)

    def run(self) -> List[Cloudlet]:
        """执行完整仿真并返回完成列表（按完成顺序）。"""
        self.broker.start(self.clock)
        while True:
            vms = self._active_vms()
            next_time = self._next_event_time(vms)
            if next_time is None:
                break
            if next_time > self.config.duration:
                logger.warning("仿真时钟超过上限 %.1f，提前结束", self.config.duration)
                break
            for vm in vms:
                finished = vm.cloudlet_scheduler.update_processing(self.clock, next_time)
                self.broker.record_finished(finished)
            self.clock = next_time

        unfinished = len(self.broker.cloudlet_submitted_list) - len(self.broker.cloudlet_finished_list)
        if unfinished:
            logger.warning("%d 个 Cloudlet 未能完成", unfinished)
        logger.debug("仿真结束于 t=%.2f", self.clock)
        return self.broker.cloudlet_finished_list
