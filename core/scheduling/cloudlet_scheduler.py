"""
VM 级调度器：在同一台 VM 的多个 Cloudlet 之间仲裁 PE 算力。

每个 Cloudlet 开始执行时，按“独享 VM 全部标称算力”计算一个预期完成时间；
实际完成时间晚于它即视为发生了超额订阅 (oversubscription)。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from core.workload.cloudlet import Cloudlet, CloudletStatus

if TYPE_CHECKING:
    from core.cluster.vm import Vm

# 小于该值的延迟视为浮点误差
OVERSUBSCRIPTION_TOLERANCE = 1e-6
FINISH_EPSILON = 1e-9


@dataclass
class CloudletExecution:
    """调度器内部的执行记录：剩余工作量、预期完成时间与超额订阅延迟。"""
    cloudlet: Cloudlet
    remaining_length: float
    expected_finish_time: float = 0.0
    oversubscription_delay: float = 0.0

    @property
    def cloudlet_id(self) -> int:
        return self.cloudlet.cloudlet_id

    @property
    def actual_finish_time(self) -> Optional[float]:
        return self.cloudlet.finish_time

    def has_oversubscription(self) -> bool:
        return self.oversubscription_delay > 0


class CloudletScheduler:
    """维护 exec / waiting / finished 三个列表并推进执行进度。"""

    def __init__(self) -> None:
        self.vm: Optional["Vm"] = None
        self.exec_list: List[CloudletExecution] = []
        self.waiting_list: List[CloudletExecution] = []
        self.finished_list: List[CloudletExecution] = []

    def can_execute(self, execution: CloudletExecution) -> bool:
        raise NotImplementedError

    def mips_per_pe(self, execution: CloudletExecution) -> float:
        """该 Cloudlet 每个 PE 当前获得的 MIPS（不含利用率）。"""
        raise NotImplementedError

    def processing_rate(self, execution: CloudletExecution, current_time: float) -> float:
        utilization = execution.cloudlet.utilization_model_cpu.get_utilization(current_time)
        return self.mips_per_pe(execution) * utilization

    def cloudlet_submit(self, cloudlet: Cloudlet, current_time: float) -> None:
        cloudlet.submission_time = current_time
        execution = CloudletExecution(cloudlet=cloudlet, remaining_length=cloudlet.length)
        if self.can_execute(execution):
            self._start(execution, current_time)
        else:
            cloudlet.status = CloudletStatus.QUEUED
            self.waiting_list.append(execution)

    def _start(self, execution: CloudletExecution, current_time: float) -> None:
        cloudlet = execution.cloudlet
        cloudlet.status = CloudletStatus.INEXEC
        cloudlet.start_time = current_time
        # 标称条件：每个请求的 PE 都拿到 VM 的全部 MIPS
        execution.expected_finish_time = current_time + cloudlet.length / self.vm.mips
        self.exec_list.append(execution)

    def has_work(self) -> bool:
        return bool(self.exec_list or self.waiting_list)

    def next_finish_delay(self, current_time: float) -> Optional[float]:
        """距离下一个 Cloudlet 完成还需多久；没有可推进的任务时返回 None。"""
        delays = []
        for execution in self.exec_list:
            rate = self.processing_rate(execution, current_time)
            if rate > 0:
                delays.append(execution.remaining_length / rate)
        return min(delays) if delays else None

    def update_processing(self, previous_time: float, current_time: float) -> List[Cloudlet]:
        """按区间起点的速率推进 [previous_time, current_time]，返回本次完成的 Cloudlet。"""
        elapsed = current_time - previous_time
        rates = [self.processing_rate(execution, previous_time) for execution in self.exec_list]
        for execution, rate in zip(self.exec_list, rates):
            execution.remaining_length -= rate * elapsed

        done = [
            execution
            for execution in self.exec_list
            if execution.remaining_length <= FINISH_EPSILON * execution.cloudlet.length
        ]
        for execution in done:
            self._finish(execution, current_time)

        for execution in list(self.waiting_list):
            if self.can_execute(execution):
                self.waiting_list.remove(execution)
                self._start(execution, current_time)
        return [execution.cloudlet for execution in done]

    def _finish(self, execution: CloudletExecution, current_time: float) -> None:
        self.exec_list.remove(execution)
        execution.remaining_length = 0.0
        cloudlet = execution.cloudlet
        cloudlet.finish_time = current_time
        cloudlet.status = CloudletStatus.SUCCESS
        delay = current_time - execution.expected_finish_time
        execution.oversubscription_delay = delay if delay > OVERSUBSCRIPTION_TOLERANCE else 0.0
        self.finished_list.append(execution)


class CloudletSchedulerTimeShared(CloudletScheduler):
    """所有 Cloudlet 同时执行；请求 PE 总数超过 VM PE 时按比例摊薄每个 PE 的 MIPS。"""

    def can_execute(self, execution: CloudletExecution) -> bool:
        return True

    def requested_pes(self) -> int:
        return sum(execution.cloudlet.pes for execution in self.exec_list)

    def mips_per_pe(self, execution: CloudletExecution) -> float:
        requested = self.requested_pes()
        if requested <= self.vm.pes:
            return self.vm.mips
        return self.vm.mips * self.vm.pes / requested


class CloudletSchedulerSpaceShared(CloudletScheduler):
    """PE 独占：空闲 PE 不足时 Cloudlet 进入 FIFO 等待队列。"""

    def _pes_needed(self, execution: CloudletExecution) -> int:
        return min(execution.cloudlet.pes, self.vm.pes)

    def used_pes(self) -> int:
        return sum(self._pes_needed(execution) for execution in self.exec_list)

    def can_execute(self, execution: CloudletExecution) -> bool:
        return self._pes_needed(execution) <= self.vm.pes - self.used_pes()

    def mips_per_pe(self, execution: CloudletExecution) -> float:
        # 请求 PE 多于 VM PE 时只能占满整台 VM，速度按比例下降
        if execution.cloudlet.pes <= self.vm.pes:
            return self.vm.mips
        return self.vm.mips * self.vm.pes / execution.cloudlet.pes
