"""
策略简写注册表测试：正反查一致性、未知值处理与只读约束。
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import pytest

from configurations.errors import UnknownMnemonic
from configurations.shortcodes import (
    CLOUDLET_SCHEDULERS,
    REGISTRY,
    UNKNOWN,
    VM_ALLOCATION_POLICIES,
    VM_SCHEDULERS,
    StrategyEntry,
    StrategyFamily,
    StrategyRegistry,
)
from core.scheduling.allocation import VmAllocationPolicyBestFit, VmAllocationPolicySimple
from core.scheduling.cloudlet_scheduler import CloudletSchedulerSpaceShared
from core.scheduling.vm_scheduler import VmSchedulerTimeShared


def test_round_trip_for_every_family():
    """简写 → 标识符 → 简写 必须回到原值。"""
    for family in StrategyFamily:
        for code in REGISTRY.mnemonics(family):
            identifier = REGISTRY.resolve_mnemonic(family, code)
            assert REGISTRY.resolve_identifier(family, identifier) == code


def test_known_mnemonics():
    assert list(VM_ALLOCATION_POLICIES) == ["S", "FF", "BF"]
    assert list(VM_SCHEDULERS) == ["TS", "SS"]
    assert list(CLOUDLET_SCHEDULERS) == ["TS", "SS"]
    assert VM_ALLOCATION_POLICIES["S"] == "core.scheduling.allocation.VmAllocationPolicySimple"
    assert CLOUDLET_SCHEDULERS["SS"] == "core.scheduling.cloudlet_scheduler.CloudletSchedulerSpaceShared"


def test_unknown_identifier_returns_sentinel():
    assert REGISTRY.resolve_identifier(StrategyFamily.PLACEMENT_POLICY, "org.example.Nope") == UNKNOWN
    # 同一个类在别的类别里同样未登记
    scheduler_id = REGISTRY.resolve_mnemonic(StrategyFamily.HOST_SCHEDULER, "TS")
    assert REGISTRY.resolve_identifier(StrategyFamily.PLACEMENT_POLICY, scheduler_id) == UNKNOWN


def test_unknown_mnemonic_raises():
    with pytest.raises(UnknownMnemonic) as info:
        REGISTRY.resolve_mnemonic(StrategyFamily.HOST_SCHEDULER, "FF")
    assert info.value.code == "FF"
    assert isinstance(info.value, KeyError)


def test_family_accepts_config_key():
    assert REGISTRY.resolve_mnemonic("vmAllocationPolicy", "BF").endswith("VmAllocationPolicyBestFit")
    assert StrategyFamily.of("cloudletScheduler") is StrategyFamily.VM_SCHEDULER


def test_forward_map_is_read_only():
    with pytest.raises(TypeError):
        VM_ALLOCATION_POLICIES["X"] = "something"


def test_short_code_for_instance_uses_runtime_type():
    assert REGISTRY.short_code_for_instance(StrategyFamily.PLACEMENT_POLICY, VmAllocationPolicyBestFit()) == "BF"
    assert REGISTRY.short_code_for_instance(StrategyFamily.HOST_SCHEDULER, VmSchedulerTimeShared()) == "TS"
    assert REGISTRY.short_code_for_instance(StrategyFamily.VM_SCHEDULER, CloudletSchedulerSpaceShared()) == "SS"
    assert REGISTRY.short_code_for_instance(StrategyFamily.VM_SCHEDULER, None) == UNKNOWN

    class CustomPolicy(VmAllocationPolicySimple):
        pass

    assert REGISTRY.short_code_for_instance(StrategyFamily.PLACEMENT_POLICY, CustomPolicy()) == UNKNOWN


def test_factory_builds_fresh_instances():
    identifier = REGISTRY.resolve_mnemonic(StrategyFamily.HOST_SCHEDULER, "TS")
    factory = REGISTRY.factory_for(StrategyFamily.HOST_SCHEDULER, identifier)
    first, second = factory(), factory()
    assert isinstance(first, VmSchedulerTimeShared)
    assert first is not second
    assert REGISTRY.factory_for(StrategyFamily.HOST_SCHEDULER, "org.example.Nope") is None
    # 同一标识符在其他类别下不可用
    assert REGISTRY.factory_for(StrategyFamily.PLACEMENT_POLICY, identifier) is None
    assert not REGISTRY.is_known(StrategyFamily.VM_SCHEDULER, identifier)
    assert REGISTRY.is_known("vmScheduler", identifier)


def test_duplicate_code_rejected():
    with pytest.raises(ValueError):
        StrategyRegistry([
            StrategyEntry(StrategyFamily.PLACEMENT_POLICY, "S", VmAllocationPolicySimple),
            StrategyEntry(StrategyFamily.PLACEMENT_POLICY, "S", VmAllocationPolicyBestFit),
        ])
