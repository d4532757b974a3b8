"""
配置、策略解析与报告写入相关的异常。
"""


class ConfigError(Exception):
    """配置类错误的基类。"""


class ConfigNotFound(ConfigError):
    pass


class ConfigParseError(ConfigError):
    pass


class StrategyResolutionError(ConfigError):
    """策略标识符无法解析或无法实例化；每次运行都会以同样方式失败，不重试。"""


class UnknownMnemonic(KeyError):
    def __init__(self, family: str, code: str):
        super().__init__(f"{family} 不支持的简写: {code}")
        self.family = family
        self.code = code


class ClusterConsistencyError(RuntimeError):
    """同一次运行中主机或 VM 使用了不同的调度器类型。"""


class ReportWriteError(IOError):
    pass
