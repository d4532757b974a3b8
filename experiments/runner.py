"""
运行已定义拓扑形态的辅助入口：仿真 → 超额订阅检测 → 指标汇总 → 写报告。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Union

from configurations.config_loader import ConfigLoader
from configurations.errors import ReportWriteError
from configurations.shortcodes import REGISTRY, StrategyRegistry
from evaluation.metrics.aggregator import RunMetrics, StrategyLabels, aggregate, describe
from evaluation.metrics.oversubscription import detect
from evaluation.reports.writer import ReportWriter, detail_rows, summary_row
from experiments.base import ExperimentRunner, TopologyShape
from experiments.heterogeneous.scenario import SHAPE as HETEROGENEOUS
from experiments.homogeneous.scenario import SHAPE as HOMOGENEOUS

logger = logging.getLogger(__name__)


SHAPES: Dict[str, TopologyShape] = {
    HOMOGENEOUS.name: HOMOGENEOUS,
    HETEROGENEOUS.name: HETEROGENEOUS,
}


def get_shape(name: str) -> TopologyShape:
    shape = SHAPES.get(name)
    if shape is None:
        raise KeyError(f"未知拓扑形态: {name}")
    return shape


def run_once(
    shape_name: str,
    run_id: int,
    config_loader: ConfigLoader,
    writer: ReportWriter,
    display_oversubscription: bool = False,
    output_dir: Union[str, Path] = ".",
    registry: StrategyRegistry = REGISTRY,
) -> RunMetrics:
    """执行一次运行并追加明细/汇总两张表；写文件失败只记录告警，不影响返回的指标。"""
    shape = get_shape(shape_name)
    result = ExperimentRunner(shape, config_loader, registry).run_once(run_id)
    if len(result.finished) < result.submitted:
        logger.warning(
            "Run %d: 仅完成 %d/%d 个 Cloudlet", run_id, len(result.finished), result.submitted
        )

    entries = detect(result.cluster.vms, display=display_oversubscription)
    labels = StrategyLabels.from_cluster(result.cluster.datacenter, result.cluster.vms, registry)
    metrics = aggregate(run_id, result.finished, entries, labels)

    output = Path(output_dir)
    try:
        writer.append_detail_rows(output / shape.detailed_csv, detail_rows(run_id, result.finished, entries, registry))
    except ReportWriteError as exc:
        logger.warning("Run %d 明细写入失败: %s", run_id, exc)
    try:
        writer.append_summary_row(output / shape.metrics_csv, summary_row(metrics))
    except ReportWriteError as exc:
        logger.warning("Run %d 汇总写入失败: %s", run_id, exc)

    logger.info(describe(metrics))
    return metrics


def run_batch(
    shape_name: str,
    runs: int,
    config_loader: ConfigLoader,
    writer: ReportWriter,
    display_oversubscription: bool = False,
    output_dir: Union[str, Path] = ".",
    registry: StrategyRegistry = REGISTRY,
) -> List[RunMetrics]:
    """顺序执行 1..runs 次独立运行。"""
    shape = get_shape(shape_name)
    results: List[RunMetrics] = []
    for run_id in range(1, runs + 1):
        print(f"Running {shape.label} System - Run {run_id}")
        results.append(
            run_once(
                shape_name,
                run_id,
                config_loader,
                writer,
                display_oversubscription=display_oversubscription,
                output_dir=output_dir,
                registry=registry,
            )
        )
    return results
