"""
CSV 报告写入：明细表（每个 Cloudlet 一行）与汇总表（每次运行一行）。

多次运行追加到同一文件时，表头只写一次。表头状态由 ReportWriter 实例持有，
进程内创建一次并传给每次运行。
"""

from __future__ import annotations

import csv
import logging
import math
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from configurations.errors import ReportWriteError
from configurations.shortcodes import REGISTRY, StrategyFamily, StrategyRegistry
from core.workload.cloudlet import Cloudlet
from evaluation.metrics.aggregator import RunMetrics
from evaluation.metrics.oversubscription import OversubscriptionEntry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DETAIL_HEADER = [
    "Run ID", "Vm Allocation Policy", "Vm Scheduler", "Cloudlet Scheduler",
    "Cloudlet ID", "Host Id", "Host PEs", "VM ID", "VM PEs",
    "Status", "ExecTime", "StartTime", "FinishTime", "StartWaitTime", "ExpectedFinishTime",
]

SUMMARY_HEADER = [
    "Run ID", "Vm Allocation Policy", "Vm Scheduler", "Cloudlet Scheduler",
    "Makespan", "Throughput", "HostLoadStdDev", "VMLoadStdDev", "OversubscribedCount",
    "AvgPercentageIncreaseInCloudletExecTime", "TotalCompletedTasks",
]


def format_number(value: Optional[float], digits: int) -> str:
    if value is None or math.isnan(value):
        return "NaN"
    return f"{value:.{digits}f}"


class ReportWriter:
    """按路径记录表头是否已写，并串行化同一路径的追加写入。"""

    def __init__(self) -> None:
        self._header_written: Dict[str, bool] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    @staticmethod
    def _key(path: PathLike) -> str:
        return str(Path(path).resolve())

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(key, threading.Lock())

    def header_written(self, path: PathLike) -> bool:
        return self._header_written.get(self._key(path), False)

    def _append(self, path: PathLike, header: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
        key = self._key(path)
        with self._lock_for(key):
            write_header = not self._header_written.get(key, False)
            try:
                with open(key, "a", newline="", encoding="utf-8") as fh:
                    writer = csv.writer(fh)
                    if write_header:
                        writer.writerow(header)
                    writer.writerows(rows)
            except OSError as e:
                raise ReportWriteError(f"写入报告失败: {key}: {e}") from e
            if write_header:
                self._header_written[key] = True
                logger.debug("已写入表头: %s", key)

    def append_detail_rows(self, path: PathLike, rows: Iterable[Sequence[str]]) -> None:
        self._append(path, DETAIL_HEADER, rows)

    def append_summary_row(self, path: PathLike, row: Sequence[str]) -> None:
        self._append(path, SUMMARY_HEADER, [row])


def detail_rows(
    run_id: int,
    finished: Iterable[Cloudlet],
    entries: Dict[int, OversubscriptionEntry],
    registry: StrategyRegistry = REGISTRY,
) -> List[List[str]]:
    """每个完成的 Cloudlet 一行；策略简写取自该 Cloudlet 自身所在的 VM/主机/数据中心。"""
    rows: List[List[str]] = []
    for cloudlet in finished:
        vm = cloudlet.vm
        host = vm.host
        entry = entries.get(cloudlet.cloudlet_id)
        expected = entry.expected_finish_time if entry is not None else math.nan
        rows.append([
            str(run_id),
            registry.short_code_for_instance(
                StrategyFamily.PLACEMENT_POLICY, host.datacenter.vm_allocation_policy if host.datacenter else None
            ),
            registry.short_code_for_instance(StrategyFamily.HOST_SCHEDULER, host.vm_scheduler),
            registry.short_code_for_instance(StrategyFamily.VM_SCHEDULER, vm.cloudlet_scheduler),
            str(cloudlet.cloudlet_id),
            str(host.host_id),
            str(host.working_pes_number),
            str(vm.vm_id),
            str(vm.pes),
            cloudlet.status.name,
            format_number(cloudlet.total_execution_time, 1),
            format_number(cloudlet.start_time, 1),
            format_number(cloudlet.finish_time, 1),
            format_number(cloudlet.start_wait_time, 1),
            format_number(expected, 1),
        ])
    return rows


def summary_row(metrics: RunMetrics) -> List[str]:
    return [
        str(metrics.run_id),
        metrics.allocation_policy,
        metrics.vm_scheduler,
        metrics.cloudlet_scheduler,
        format_number(metrics.makespan, 2),
        format_number(metrics.throughput, 2),
        format_number(metrics.host_load_std, 2),
        format_number(metrics.vm_load_std, 2),
        str(metrics.oversubscribed_count),
        format_number(metrics.avg_percentage_increase, 2),
        str(metrics.total_completed),
    ]
