"""
汇总表可视化：按策略组合求各指标均值并绘制柱状图。
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Union

DEFAULT_METRICS = (
    "Makespan",
    "Throughput",
    "HostLoadStdDev",
    "VMLoadStdDev",
    "AvgPercentageIncreaseInCloudletExecTime",
)

LABEL_COLUMNS = ["Vm Allocation Policy", "Vm Scheduler", "Cloudlet Scheduler"]
COLORS = ["#4F81BD", "#C0504D", "#9BBB59", "#8064A2", "#4BACC6"]


def load_summary(csv_path: Union[str, Path]):
    """读取汇总 CSV；跨进程追加产生的重复表头行会被剔除。"""
    import pandas as pd

    df = pd.read_csv(csv_path, dtype=str)
    df = df[df["Run ID"] != "Run ID"].copy()
    for column in df.columns:
        if column not in LABEL_COLUMNS:
            df[column] = pd.to_numeric(df[column], errors="coerce")
    df["strategy"] = df[LABEL_COLUMNS].agg("/".join, axis=1)
    return df


def summarize_by_strategy(df, metrics: Sequence[str] = DEFAULT_METRICS):
    return df.groupby("strategy")[list(metrics)].mean()


def plot_summary(
    csv_path: Union[str, Path],
    output_path: Union[str, Path],
    metrics: Sequence[str] = DEFAULT_METRICS,
):
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as exc:  # pragma: no cover - only triggered without matplotlib
        raise SystemExit(f"需要 matplotlib 才能绘图，请先安装: {exc}") from exc

    df = load_summary(csv_path)
    grouped = summarize_by_strategy(df, metrics)

    fig, axes = plt.subplots(1, len(metrics), figsize=(3.2 * len(metrics), 4), squeeze=False)
    for idx, (ax, metric) in enumerate(zip(axes[0], metrics)):
        ax.bar(grouped.index, grouped[metric], color=COLORS[idx % len(COLORS)])
        ax.set_title(metric, fontsize=9)
        ax.tick_params(axis="x", labelrotation=45, labelsize=8)
        ax.grid(True, axis="y", linestyle="--", alpha=0.4)
    fig.suptitle(f"Mean over {len(df)} runs")
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return grouped
