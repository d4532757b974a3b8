"""
指标汇总测试：makespan、吞吐、负载离散度与策略标签。
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import math

import pytest

from configurations.shortcodes import UNKNOWN
from core.cluster.datacenter import Datacenter
from core.cluster.host import Host
from core.cluster.vm import Vm
from core.scheduling.allocation import VmAllocationPolicyFirstFit
from core.scheduling.cloudlet_scheduler import CloudletSchedulerSpaceShared
from core.scheduling.vm_scheduler import VmSchedulerTimeShared
from core.workload.cloudlet import Cloudlet
from evaluation.metrics.aggregator import (
    StrategyLabels,
    aggregate,
    describe,
    load_std,
    makespan,
    throughput,
)
from evaluation.metrics.oversubscription import OversubscriptionEntry


def placed_cluster():
    hosts = [
        Host.create(host_id=i, pes_number=4, mips=1000, ram=4096, bw=1000, storage=10000,
                    vm_scheduler=VmSchedulerTimeShared())
        for i in range(2)
    ]
    datacenter = Datacenter(hosts=hosts, vm_allocation_policy=VmAllocationPolicyFirstFit())
    vms = [
        Vm(vm_id=i, mips=1000, pes=2, ram=512, bw=10, size=100, cloudlet_scheduler=CloudletSchedulerSpaceShared())
        for i in range(3)
    ]
    for vm in vms:
        assert datacenter.vm_allocation_policy.allocate_host_for_vm(vm)
    return datacenter, vms


def finished_cloudlet(cloudlet_id, vm, pes, finish_time):
    cloudlet = Cloudlet(cloudlet_id=cloudlet_id, length=100, pes=pes)
    cloudlet.vm = vm
    cloudlet.start_time = 0.0
    cloudlet.finish_time = finish_time
    return cloudlet


def test_makespan_and_throughput():
    datacenter, vms = placed_cluster()
    cloudlets = [finished_cloudlet(i, vms[0], 1, t) for i, t in enumerate([3.0, 7.5, 5.0])]
    assert makespan(cloudlets) == 7.5
    assert makespan([]) == 0.0
    assert throughput(3, 7.5) == 3 / 7.5
    assert math.isnan(throughput(0, 0.0))


def test_load_std_is_population_std():
    assert load_std([4, 4]) == 0.0
    assert load_std([7]) == 0.0
    assert load_std([]) == 0.0
    assert load_std([2, 4]) == pytest.approx(1.0)


def test_aggregate_groups_by_host_and_vm():
    datacenter, vms = placed_cluster()
    # vm0、vm1 在 host0，vm2 在 host1
    assert [vm.host.host_id for vm in vms] == [0, 0, 1]
    finished = [
        finished_cloudlet(0, vms[0], 2, 4.0),
        finished_cloudlet(1, vms[1], 2, 6.0),
        finished_cloudlet(2, vms[2], 4, 8.0),
        finished_cloudlet(3, vms[0], 2, 2.0),
    ]
    entries = {
        1: OversubscriptionEntry(1, 4.0, 6.0, 50.0),
        2: OversubscriptionEntry(2, 0.0, 8.0, None),
        3: OversubscriptionEntry(3, 1.0, 2.0, 100.0),
    }
    labels = StrategyLabels.from_cluster(datacenter, vms)
    metrics = aggregate(9, finished, entries, labels)

    assert metrics.run_id == 9
    assert (metrics.allocation_policy, metrics.vm_scheduler, metrics.cloudlet_scheduler) == ("FF", "TS", "SS")
    assert metrics.makespan == 8.0
    assert metrics.throughput == 4 / 8.0
    # host 负载 [6, 4]，VM 负载 [4, 2, 4]
    assert metrics.host_load_std == pytest.approx(1.0)
    assert metrics.vm_load_std == pytest.approx(math.sqrt(8 / 9))
    assert metrics.oversubscribed_count == 3
    assert metrics.avg_percentage_increase == pytest.approx(75.0)
    assert metrics.total_completed == 4
    assert "Run 9 [FF/TS/SS]" in describe(metrics)


def test_aggregate_empty_run():
    metrics = aggregate(1, [], {}, StrategyLabels())
    assert metrics.makespan == 0.0
    assert math.isnan(metrics.throughput)
    assert metrics.host_load_std == 0.0
    assert metrics.vm_load_std == 0.0
    assert metrics.avg_percentage_increase == 0.0
    assert metrics.total_completed == 0


def test_labels_unknown_without_vms():
    labels = StrategyLabels.from_cluster(None, [])
    assert labels == StrategyLabels(UNKNOWN, UNKNOWN, UNKNOWN)
