"""
超额订阅检测测试：百分比计算、过滤条件、遍历顺序与明细表输出。
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import io
import math

from core.cluster.vm import Vm
from core.scheduling.cloudlet_scheduler import CloudletExecution, CloudletSchedulerTimeShared
from core.workload.cloudlet import Cloudlet
from evaluation.metrics.oversubscription import (
    OversubscriptionEntry,
    defined_increases,
    detect,
    percentage_increase,
)


def finished_execution(cloudlet_id, expected, actual):
    cloudlet = Cloudlet(cloudlet_id=cloudlet_id, length=1000, pes=1)
    cloudlet.finish_time = actual
    delay = actual - expected
    return CloudletExecution(
        cloudlet=cloudlet,
        remaining_length=0.0,
        expected_finish_time=expected,
        oversubscription_delay=delay if delay > 0 else 0.0,
    )


def vm_with(vm_id, *executions):
    vm = Vm(vm_id=vm_id, mips=1000, pes=1, ram=512, bw=100, size=1000,
            cloudlet_scheduler=CloudletSchedulerTimeShared())
    vm.cloudlet_scheduler.finished_list.extend(executions)
    return vm


def test_percentage_increase():
    assert percentage_increase(10.0, 15.0) == 50.0
    assert percentage_increase(0.0, 15.0) is None
    assert percentage_increase(-1.0, 15.0) is None


def test_detect_flags_only_late_cloudlets():
    vm = vm_with(0, finished_execution(1, 10.0, 15.0), finished_execution(2, 10.0, 10.0))
    entries = detect([vm])
    assert list(entries) == [1]
    entry = entries[1]
    assert entry.expected_finish_time == 10.0
    assert entry.actual_finish_time == 15.0
    assert entry.percentage_increase == 50.0


def test_detect_undefined_increase_for_zero_expected():
    vm = vm_with(0, finished_execution(7, 0.0, 3.0))
    entries = detect([vm])
    assert entries[7].percentage_increase is None
    assert defined_increases(entries) == []


def test_detect_preserves_vm_then_finish_order():
    vm_a = vm_with(0, finished_execution(5, 1.0, 2.0), finished_execution(3, 1.0, 3.0))
    vm_b = vm_with(1, finished_execution(0, 1.0, 4.0))
    entries = detect([vm_a, vm_b])
    assert list(entries) == [5, 3, 0]


def test_detect_without_oversubscription_is_empty():
    stream = io.StringIO()
    vm = vm_with(0, finished_execution(1, 10.0, 9.0))
    assert detect([vm], display=True, stream=stream) == {}
    assert stream.getvalue() == ""


def test_display_prints_table():
    stream = io.StringIO()
    vm = vm_with(0, finished_execution(1, 10.0, 15.0), finished_execution(2, 0.0, 1.0))
    detect([vm], display=True, stream=stream)
    lines = stream.getvalue().splitlines()
    assert lines[0] == "Oversubscribed Cloudlets Details:"
    assert lines[1].split() == ["CloudletID", "ExpectedTimeToComplete", "ActualTime", "PercentageIncrease"]
    assert lines[2].split() == ["1", "10.00", "15.00", "50.00"]
    assert lines[3].split() == ["2", "0.00", "1.00", "NaN"]


def test_defined_increases_skips_nan():
    entries = {
        1: OversubscriptionEntry(1, 10.0, 12.0, 20.0),
        2: OversubscriptionEntry(2, 0.0, 12.0, None),
        3: OversubscriptionEntry(3, 10.0, 12.0, math.nan),
    }
    assert defined_increases(entries) == [20.0]
