"""
策略简写注册表。

把 "S" / "FF" / "TS" 这类简写映射到完整的策略类路径，并支持反查
（报告里只写简写）。正向表、反向表与工厂表都由同一份 STRATEGIES 派生，
保证三者始终一致。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from core.scheduling.allocation import (
    VmAllocationPolicyBestFit,
    VmAllocationPolicyFirstFit,
    VmAllocationPolicySimple,
)
from core.scheduling.cloudlet_scheduler import (
    CloudletSchedulerSpaceShared,
    CloudletSchedulerTimeShared,
)
from core.scheduling.vm_scheduler import VmSchedulerSpaceShared, VmSchedulerTimeShared

from .errors import UnknownMnemonic

UNKNOWN = "UNKNOWN"


class StrategyFamily(Enum):
    """三类可替换策略；value 即配置文件中的键名。"""
    PLACEMENT_POLICY = "vmAllocationPolicy"
    HOST_SCHEDULER = "vmScheduler"
    VM_SCHEDULER = "cloudletScheduler"

    @classmethod
    def of(cls, family: Union["StrategyFamily", str]) -> "StrategyFamily":
        """接受枚举本身或配置键名。"""
        if isinstance(family, cls):
            return family
        return cls(family)


def class_path(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True)
class StrategyEntry:
    family: StrategyFamily
    code: str
    factory: Callable[[], object]

    @property
    def identifier(self) -> str:
        return class_path(self.factory)


STRATEGIES = (
    StrategyEntry(StrategyFamily.PLACEMENT_POLICY, "S", VmAllocationPolicySimple),
    StrategyEntry(StrategyFamily.PLACEMENT_POLICY, "FF", VmAllocationPolicyFirstFit),
    StrategyEntry(StrategyFamily.PLACEMENT_POLICY, "BF", VmAllocationPolicyBestFit),
    StrategyEntry(StrategyFamily.HOST_SCHEDULER, "TS", VmSchedulerTimeShared),
    StrategyEntry(StrategyFamily.HOST_SCHEDULER, "SS", VmSchedulerSpaceShared),
    StrategyEntry(StrategyFamily.VM_SCHEDULER, "TS", CloudletSchedulerTimeShared),
    StrategyEntry(StrategyFamily.VM_SCHEDULER, "SS", CloudletSchedulerSpaceShared),
)


class StrategyRegistry:
    """封闭的策略表：简写 ↔ 标识符 ↔ 零参构造函数。"""

    def __init__(self, entries: Iterable[StrategyEntry] = STRATEGIES):
        forward: Dict[StrategyFamily, Dict[str, str]] = {family: {} for family in StrategyFamily}
        reverse: Dict[StrategyFamily, Dict[str, str]] = {family: {} for family in StrategyFamily}
        factories: Dict[StrategyFamily, Dict[str, Callable[[], object]]] = {family: {} for family in StrategyFamily}
        for entry in entries:
            if entry.code in forward[entry.family]:
                raise ValueError(f"重复的简写: {entry.family.value}/{entry.code}")
            forward[entry.family][entry.code] = entry.identifier
            reverse[entry.family][entry.identifier] = entry.code
            factories[entry.family][entry.identifier] = entry.factory
        self._forward = {family: MappingProxyType(codes) for family, codes in forward.items()}
        self._reverse = {family: MappingProxyType(ids) for family, ids in reverse.items()}
        # 按类别隔离：放置策略的标识符不能出现在调度器槽位上
        self._factories = {family: MappingProxyType(table) for family, table in factories.items()}

    def forward(self, family: Union[StrategyFamily, str]) -> Mapping[str, str]:
        return self._forward[StrategyFamily.of(family)]

    def mnemonics(self, family: Union[StrategyFamily, str]) -> List[str]:
        return list(self.forward(family))

    def resolve_mnemonic(self, family: Union[StrategyFamily, str], code: str) -> str:
        family = StrategyFamily.of(family)
        try:
            return self._forward[family][code]
        except KeyError:
            raise UnknownMnemonic(family.value, code) from None

    def resolve_identifier(self, family: Union[StrategyFamily, str], identifier: str) -> str:
        """反查简写；未登记的标识符返回 UNKNOWN，报告流程不能因此中断。"""
        return self._reverse[StrategyFamily.of(family)].get(identifier, UNKNOWN)

    def short_code_for_instance(self, family: Union[StrategyFamily, str], instance: Optional[object]) -> str:
        if instance is None:
            return UNKNOWN
        return self.resolve_identifier(family, class_path(type(instance)))

    def factory_for(self, family: Union[StrategyFamily, str], identifier: str) -> Optional[Callable[[], object]]:
        """该类别下标识符对应的零参构造函数；不属于该类别时返回 None。"""
        return self._factories[StrategyFamily.of(family)].get(identifier)

    def is_known(self, family: Union[StrategyFamily, str], identifier: str) -> bool:
        return identifier in self._factories[StrategyFamily.of(family)]


REGISTRY = StrategyRegistry()

VM_ALLOCATION_POLICIES = REGISTRY.forward(StrategyFamily.PLACEMENT_POLICY)
VM_SCHEDULERS = REGISTRY.forward(StrategyFamily.HOST_SCHEDULER)
CLOUDLET_SCHEDULERS = REGISTRY.forward(StrategyFamily.VM_SCHEDULER)
