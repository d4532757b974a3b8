"""
实验共用的构建/运行辅助模块。

一个 TopologyShape 描述主机/VM/Cloudlet 的生成规则；ExperimentRunner 按
该描述与配置段构建集群并同步运行一次仿真。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, TypeVar

from configurations.config_loader import ConfigLoader
from configurations.errors import ClusterConsistencyError
from configurations.shortcodes import REGISTRY, StrategyFamily, StrategyRegistry
from core.cluster.datacenter import Datacenter
from core.cluster.host import Host
from core.cluster.vm import Vm
from core.simulation.broker import DatacenterBroker
from core.simulation.config import SimulationConfig
from core.simulation.engine import SimulationEngine
from core.workload.cloudlet import (
    Cloudlet,
    UtilizationModelDynamic,
    UtilizationModelFull,
    UtilizationModelStochastic,
)


@dataclass(frozen=True)
class HostSpec:
    pes: int
    mips: float
    ram: int
    bw: int
    storage: int


@dataclass(frozen=True)
class VmSpec:
    pes: int
    mips: float
    ram: int
    bw: int
    size: int


@dataclass(frozen=True)
class CloudletSpec:
    pes: int
    length: float
    file_size: int
    output_size: int


T = TypeVar("T")


def expand(tiers: Sequence[Tuple[int, T]]) -> List[T]:
    """[(数量, 规格), ...] 展开为按顺序排列的规格列表。"""
    specs: List[T] = []
    for count, spec in tiers:
        specs.extend([spec] * count)
    return specs


@dataclass
class TopologyShape:
    """封装单个拓扑形态的规格表、配置段名与输出文件名。"""
    name: str
    section: str
    label: str
    hosts: List[Tuple[int, HostSpec]]
    vms: List[Tuple[int, VmSpec]]
    cloudlets: List[Tuple[int, CloudletSpec]]
    detailed_csv: str
    metrics_csv: str
    simulation: SimulationConfig = field(default_factory=SimulationConfig)


@dataclass
class Cluster:
    datacenter: Datacenter
    vms: List[Vm]
    cloudlets: List[Cloudlet]

    @property
    def hosts(self) -> List[Host]:
        return self.datacenter.hosts


@dataclass
class RunResult:
    run_id: int
    cluster: Cluster
    finished: List[Cloudlet]
    submitted: int
    failed_vms: int
    clock: float


class ExperimentRunner:
    """按拓扑形态构建集群 → 交给仿真引擎 → 取回完成列表。"""

    def __init__(self, shape: TopologyShape, config_loader: ConfigLoader, registry: StrategyRegistry = REGISTRY):
        self.shape = shape
        self.config_loader = config_loader
        self.registry = registry

    def _strategy(self, family: StrategyFamily):
        return self.config_loader.create_instance(self.shape.section, family)

    def create_datacenter(self) -> Datacenter:
        # 每台主机一个新的调度器实例，不共享
        hosts = [
            Host.create(
                host_id=idx,
                pes_number=spec.pes,
                mips=spec.mips,
                ram=spec.ram,
                bw=spec.bw,
                storage=spec.storage,
                vm_scheduler=self._strategy(StrategyFamily.HOST_SCHEDULER),
            )
            for idx, spec in enumerate(expand(self.shape.hosts))
        ]
        return Datacenter(hosts=hosts, vm_allocation_policy=self._strategy(StrategyFamily.PLACEMENT_POLICY))

    def create_vms(self) -> List[Vm]:
        return [
            Vm(
                vm_id=idx,
                mips=spec.mips,
                pes=spec.pes,
                ram=spec.ram,
                bw=spec.bw,
                size=spec.size,
                cloudlet_scheduler=self._strategy(StrategyFamily.VM_SCHEDULER),
            )
            for idx, spec in enumerate(expand(self.shape.vms))
        ]

    def create_cloudlets(self, run_id: int) -> List[Cloudlet]:
        seed = self.shape.simulation.seed
        return [
            Cloudlet(
                cloudlet_id=idx,
                length=spec.length,
                pes=spec.pes,
                file_size=spec.file_size,
                output_size=spec.output_size,
                utilization_model_cpu=UtilizationModelFull(),
                utilization_model_ram=UtilizationModelDynamic(0.25),
                utilization_model_bw=UtilizationModelStochastic(seed=f"{seed}-{run_id}-{idx}"),
            )
            for idx, spec in enumerate(expand(self.shape.cloudlets))
        ]

    @staticmethod
    def check_uniform_strategies(datacenter: Datacenter, vms: Sequence[Vm]) -> None:
        """汇总表只按第一台 VM 标注策略，因此同一集群内调度器类型必须一致。"""
        host_types = {type(host.vm_scheduler) for host in datacenter.hosts}
        if len(host_types) > 1:
            raise ClusterConsistencyError(f"主机调度器类型不一致: {sorted(t.__name__ for t in host_types)}")
        vm_types = {type(vm.cloudlet_scheduler) for vm in vms}
        if len(vm_types) > 1:
            raise ClusterConsistencyError(f"VM 调度器类型不一致: {sorted(t.__name__ for t in vm_types)}")

    def build_cluster(self, run_id: int = 0) -> Cluster:
        self.config_loader.validate_section(self.shape.section)
        datacenter = self.create_datacenter()
        vms = self.create_vms()
        cloudlets = self.create_cloudlets(run_id)
        self.check_uniform_strategies(datacenter, vms)
        return Cluster(datacenter=datacenter, vms=vms, cloudlets=cloudlets)

    def run_once(self, run_id: int) -> RunResult:
        """构建集群并同步执行一次仿真。"""
        cluster = self.build_cluster(run_id)
        broker = DatacenterBroker(cluster.datacenter)
        broker.submit_vm_list(cluster.vms)
        broker.submit_cloudlet_list(cluster.cloudlets)
        engine = SimulationEngine(broker, self.shape.simulation)
        finished = engine.run()
        return RunResult(
            run_id=run_id,
            cluster=cluster,
            finished=list(finished),
            submitted=len(broker.cloudlet_submitted_list),
            failed_vms=len(broker.vm_failed_list),
            clock=engine.clock,
        )
