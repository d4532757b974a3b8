"""
动态策略配置

从 config.json 读取各拓扑形态 (homogeneous / heterogeneous) 选用的策略
标识符，允许运行前覆盖，并在构建集群时把标识符实例化为新的策略对象。
标识符只在实例化时校验：错误会在每次运行开始构建集群时立即暴露。
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from .errors import ConfigNotFound, ConfigParseError, StrategyResolutionError
from .shortcodes import REGISTRY, StrategyFamily, StrategyRegistry

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.json"


class ConfigLoader:
    """持有按拓扑形态划分的策略配置，并负责策略实例化。"""

    def __init__(self, path: Union[str, Path, None] = None, registry: StrategyRegistry = REGISTRY):
        self.path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        self.registry = registry
        self._config: Dict[str, Dict[str, str]] = self._read(self.path)

    @classmethod
    def load(cls, path: Union[str, Path, None] = None, registry: StrategyRegistry = REGISTRY) -> "ConfigLoader":
        return cls(path, registry)

    @staticmethod
    def _read(path: Path) -> Dict[str, Dict[str, str]]:
        """读取并校验 JSON 结构：顶层与每个 section 都必须是对象。"""
        if not path.is_file():
            raise ConfigNotFound(f"配置文件不存在: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (IOError, OSError) as e:
            raise ConfigParseError(f"读取配置文件失败: {path}: {e}") from e
        except ValueError as e:
            raise ConfigParseError(f"配置文件格式错误: {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigParseError(f"配置文件顶层必须是对象: {path}")
        for name, section in data.items():
            if not isinstance(section, dict):
                raise ConfigParseError(f"配置段 {name} 必须是对象")
        return data

    def sections(self) -> List[str]:
        return list(self._config)

    def section(self, shape: str) -> Dict[str, str]:
        if shape not in self._config:
            raise KeyError(f"未知配置段: {shape}")
        return copy.deepcopy(self._config[shape])

    def update_section(self, shape: str, overrides: Mapping[str, str]) -> None:
        """替换或新增配置段中的键值；不在此处校验标识符。"""
        section = self._config.setdefault(shape, {})
        for key, value in overrides.items():
            if isinstance(key, StrategyFamily):
                key = key.value
            section[key] = str(value)
        logger.debug("更新配置段 %s: %s", shape, dict(overrides))

    def identifier(self, shape: str, family: Union[StrategyFamily, str]) -> str:
        try:
            key = StrategyFamily.of(family).value
        except ValueError:
            raise StrategyResolutionError(f"未知策略类别: {family}") from None
        section = self._config.get(shape)
        if section is None:
            raise StrategyResolutionError(f"未知配置段: {shape}")
        if key not in section:
            raise StrategyResolutionError(f"配置段 {shape} 缺少 {key}")
        return section[key]

    def is_valid_identifier(self, family: Union[StrategyFamily, str], identifier: str) -> bool:
        return self.registry.is_known(family, identifier)

    def create_instance(self, shape: str, family: Union[StrategyFamily, str]) -> object:
        """按配置段与类别实例化一个全新的策略对象；标识符必须属于该类别。"""
        identifier = self.identifier(shape, family)
        factory = self.registry.factory_for(family, identifier)
        if factory is None:
            raise StrategyResolutionError(
                f"无法解析 {shape}/{StrategyFamily.of(family).value} 的策略: {identifier}"
            )
        try:
            return factory()
        except Exception as e:
            raise StrategyResolutionError(f"实例化 {identifier} 失败: {e}") from e

    def validate_section(self, shape: str, families: Optional[List[StrategyFamily]] = None) -> None:
        """对配置段的每个类别试做一次实例化，失败即抛出 StrategyResolutionError。"""
        for family in families or list(StrategyFamily):
            self.create_instance(shape, family)
