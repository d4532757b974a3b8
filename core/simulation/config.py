"""
仿真主循环的关键参数：时长上限与随机种子。
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SimulationConfig:
    """统一描述主循环的终止条件与随机利用率模型的种子。"""
    duration: float = 1_000_000.0  # 仿真时钟上限 (秒)
    seed: int = 2025
