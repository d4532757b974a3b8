"""
超额订阅检测：比对 Cloudlet 的预期完成时间与实际完成时间。
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, TextIO

from core.cluster.vm import Vm


@dataclass
class OversubscriptionEntry:
    cloudlet_id: int
    expected_finish_time: float
    actual_finish_time: float
    percentage_increase: Optional[float]  # expected <= 0 时无定义


def percentage_increase(expected: float, actual: float) -> Optional[float]:
    if expected <= 0:
        return None
    return (actual - expected) / expected * 100


def detect(
    vm_list: Iterable[Vm],
    display: bool = False,
    stream: Optional[TextIO] = None,
) -> Dict[int, OversubscriptionEntry]:
    """
    遍历每台 VM 调度器的完成列表，收集引擎标记为超额订阅的执行记录。

    结果按 VM 列表顺序、再按各 VM 完成列表的插入顺序排列；display=True 时
    按同样顺序打印明细表。
    """
    entries: Dict[int, OversubscriptionEntry] = {}
    for vm in vm_list:
        if vm.cloudlet_scheduler is None:
            continue
        for execution in vm.cloudlet_scheduler.finished_list:
            if not execution.has_oversubscription():
                continue
            expected = execution.expected_finish_time
            actual = execution.actual_finish_time
            entries[execution.cloudlet_id] = OversubscriptionEntry(
                cloudlet_id=execution.cloudlet_id,
                expected_finish_time=expected,
                actual_finish_time=actual,
                percentage_increase=percentage_increase(expected, actual),
            )

    if display and entries:
        print_table(entries.values(), stream)
    return entries


def print_table(entries: Iterable[OversubscriptionEntry], stream: Optional[TextIO] = None) -> None:
    out = stream if stream is not None else sys.stdout
    print("Oversubscribed Cloudlets Details:", file=out)
    print(f"{'CloudletID':<10} {'ExpectedTimeToComplete':<22} {'ActualTime':<20} {'PercentageIncrease':<20}", file=out)
    for entry in entries:
        increase = entry.percentage_increase
        increase_text = f"{increase:<20.2f}" if increase is not None else f"{'NaN':<20}"
        print(
            f"{entry.cloudlet_id:<10d} {entry.expected_finish_time:<22.2f} "
            f"{entry.actual_finish_time:<20.2f} {increase_text}".rstrip(),
            file=out,
        )


def defined_increases(entries: Dict[int, OversubscriptionEntry]):
    return [
        entry.percentage_increase
        for entry in entries.values()
        if entry.percentage_increase is not None and not math.isnan(entry.percentage_increase)
    ]
