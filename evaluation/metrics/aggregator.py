"""
单次运行的指标汇总：makespan、吞吐、负载离散度与超额订阅统计。
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from statistics import mean, pstdev
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from configurations.shortcodes import REGISTRY, UNKNOWN, StrategyFamily, StrategyRegistry
from core.cluster.datacenter import Datacenter
from core.cluster.vm import Vm
from core.workload.cloudlet import Cloudlet

from evaluation.metrics.oversubscription import OversubscriptionEntry, defined_increases


@dataclass(frozen=True)
class StrategyLabels:
    """一次运行所用三类策略的简写。"""
    allocation_policy: str = UNKNOWN
    vm_scheduler: str = UNKNOWN
    cloudlet_scheduler: str = UNKNOWN

    @classmethod
    def from_cluster(
        cls,
        datacenter: Optional[Datacenter],
        vm_list: Sequence[Vm],
        registry: StrategyRegistry = REGISTRY,
    ) -> "StrategyLabels":
        """按运行时类型反查：放置策略取自数据中心，调度器取自第一台 VM。"""
        policy = datacenter.vm_allocation_policy if datacenter is not None else None
        first_vm = vm_list[0] if vm_list else None
        host = first_vm.host if first_vm is not None else None
        return cls(
            allocation_policy=registry.short_code_for_instance(StrategyFamily.PLACEMENT_POLICY, policy),
            vm_scheduler=registry.short_code_for_instance(
                StrategyFamily.HOST_SCHEDULER, host.vm_scheduler if host is not None else None
            ),
            cloudlet_scheduler=registry.short_code_for_instance(
                StrategyFamily.VM_SCHEDULER, first_vm.cloudlet_scheduler if first_vm is not None else None
            ),
        )


@dataclass
class RunMetrics:
    """Aggregated metrics of a single simulation run."""

    run_id: int
    allocation_policy: str
    vm_scheduler: str
    cloudlet_scheduler: str
    makespan: float
    throughput: float
    host_load_std: float
    vm_load_std: float
    oversubscribed_count: int
    avg_percentage_increase: float
    total_completed: int


def makespan(cloudlets: Iterable[Cloudlet]) -> float:
    finish_times = [cloudlet.finish_time for cloudlet in cloudlets if cloudlet.finish_time is not None]
    return max(finish_times) if finish_times else 0.0


def throughput(count: int, span: float) -> float:
    # makespan 为 0 时吞吐无定义
    if span == 0:
        return math.nan
    return count / span


def load_std(loads: Iterable[float]) -> float:
    """总体标准差（除以 N）；没有分组时为 0。"""
    values = list(loads)
    if not values:
        return 0.0
    return pstdev(values)


def group_loads(cloudlets: Iterable[Cloudlet], key: Callable[[Cloudlet], object]) -> Dict[object, int]:
    """按 key 分组累加 Cloudlet 请求的 PE 数；没有完成任务的主机/VM 不出现。"""
    loads: Dict[object, int] = defaultdict(int)
    for cloudlet in cloudlets:
        group = key(cloudlet)
        if group is None:
            continue
        loads[group] += cloudlet.pes
    return dict(loads)


def _host_key(cloudlet: Cloudlet):
    if cloudlet.vm is None or cloudlet.vm.host is None:
        return None
    return cloudlet.vm.host.host_id


def _vm_key(cloudlet: Cloudlet):
    return cloudlet.vm.vm_id if cloudlet.vm is not None else None


def aggregate(
    run_id: int,
    finished: Sequence[Cloudlet],
    entries: Dict[int, OversubscriptionEntry],
    labels: StrategyLabels,
) -> RunMetrics:
    finished_list: List[Cloudlet] = list(finished)
    span = makespan(finished_list)
    increases = defined_increases(entries)
    return RunMetrics(
        run_id=run_id,
        allocation_policy=labels.allocation_policy,
        vm_scheduler=labels.vm_scheduler,
        cloudlet_scheduler=labels.cloudlet_scheduler,
        makespan=span,
        throughput=throughput(len(finished_list), span),
        host_load_std=load_std(group_loads(finished_list, _host_key).values()),
        vm_load_std=load_std(group_loads(finished_list, _vm_key).values()),
        oversubscribed_count=len(entries),
        avg_percentage_increase=mean(increases) if increases else 0.0,
        total_completed=len(finished_list),
    )


def describe(metrics: RunMetrics) -> str:
    return (
        f"Run {metrics.run_id} [{metrics.allocation_policy}/{metrics.vm_scheduler}/{metrics.cloudlet_scheduler}]  "
        f"Makespan={metrics.makespan:.2f}  Throughput={metrics.throughput:.3f}  "
        f"HostStd={metrics.host_load_std:.2f}  VMStd={metrics.vm_load_std:.2f}  "
        f"Oversub={metrics.oversubscribed_count} (+{metrics.avg_percentage_increase:.2f}%)  "
        f"Completed={metrics.total_completed}"
    )
