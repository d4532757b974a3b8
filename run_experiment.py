#!/usr/bin/env python3
"""
统一的 cloudsim-compare 命令行入口：默认命令按所选拓扑形态与策略组合
重复运行仿真并追加 CSV 报告；plot / strategies 子命令提供扩展功能。
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from configurations.config_loader import ConfigLoader
from configurations.errors import ClusterConsistencyError, ConfigError, UnknownMnemonic
from configurations.shortcodes import REGISTRY, StrategyFamily
from evaluation.reports.writer import ReportWriter
from experiments.runner import SHAPES, get_shape, run_batch

logger = logging.getLogger("run_experiment")

DEFAULT_RUNS = 100
DEFAULT_SHAPE = "heterogeneous"

LOG_LEVELS = {
    "ALL": logging.DEBUG,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "OFF": logging.CRITICAL + 1,
}

FAMILY_OPTIONS = {
    StrategyFamily.PLACEMENT_POLICY: "allocation",
    StrategyFamily.HOST_SCHEDULER: "vm_scheduler",
    StrategyFamily.VM_SCHEDULER: "cloudlet_scheduler",
}

FAMILY_PROMPTS = {
    StrategyFamily.PLACEMENT_POLICY: "Enter VM Allocation Policy",
    StrategyFamily.HOST_SCHEDULER: "Enter VM Scheduler",
    StrategyFamily.VM_SCHEDULER: "Enter Cloudlet Scheduler",
}


def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=LOG_LEVELS[level_name.upper()],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"需要正整数: {value}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"需要正整数: {value}")
    return number


# ---------------------------------------------------------------------------
# 交互式输入


InputFn = Callable[[str], str]


def prompt_mnemonic(family: StrategyFamily, input_fn: InputFn = input) -> str:
    """反复提示直到输入合法简写。"""
    codes = REGISTRY.mnemonics(family)
    while True:
        code = input_fn(f"{FAMILY_PROMPTS[family]}: [{', '.join(codes)}]\n").strip().upper()
        try:
            REGISTRY.resolve_mnemonic(family, code)
            return code
        except UnknownMnemonic:
            print("Invalid input! Please try again.")


def prompt_runs(default: int = DEFAULT_RUNS, input_fn: InputFn = input) -> int:
    while True:
        text = input_fn(f"Enter the number of simulation runs (default: {default}):\n").strip()
        if not text:
            print(f"Using default number of runs: {default}")
            return default
        try:
            return positive_int(text)
        except argparse.ArgumentTypeError:
            print("Invalid input! Please enter a positive integer.")


def prompt_shape(default: str = DEFAULT_SHAPE, input_fn: InputFn = input) -> str:
    names = list(SHAPES)
    options = "  ".join(f"[{idx + 1}] {name}" for idx, name in enumerate(names))
    while True:
        text = input_fn(f"Select Configuration Type: {options}\n").strip().lower()
        if not text:
            return default
        if text.isdigit() and 1 <= int(text) <= len(names):
            return names[int(text) - 1]
        if text in SHAPES:
            return text
        print("Invalid input! Please enter a valid option.")


def prompt_yes_no(question: str, default: bool = False, input_fn: InputFn = input) -> bool:
    while True:
        text = input_fn(f"{question} [yes/no]\n").strip().lower()
        if not text:
            return default
        if text in {"yes", "y"}:
            return True
        if text in {"no", "n"}:
            return False
        print("Invalid input! Please enter a valid option (e.g., yes or no).")


def fill_interactive(args: argparse.Namespace, input_fn: InputFn = input) -> argparse.Namespace:
    """只为命令行未给出的参数弹出提示。"""
    if args.runs is None:
        args.runs = prompt_runs(DEFAULT_RUNS, input_fn)
    if args.shape is None:
        args.shape = prompt_shape(DEFAULT_SHAPE, input_fn)
    for family, option in FAMILY_OPTIONS.items():
        if getattr(args, option) is None:
            setattr(args, option, prompt_mnemonic(family, input_fn))
    if not args.display_oversubscription:
        args.display_oversubscription = prompt_yes_no("Display oversubscription table?", False, input_fn)
    return args


# ---------------------------------------------------------------------------
# 默认（运行）命令


def build_run_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="按拓扑形态与策略组合重复运行仿真并输出 CSV 报告")
    parser.add_argument("--config", help="策略配置 JSON（默认使用内置 config.json）")
    parser.add_argument("--shape", choices=sorted(SHAPES), help=f"拓扑形态（默认 {DEFAULT_SHAPE}）")
    parser.add_argument(
        "--allocation", type=str.upper, choices=REGISTRY.mnemonics(StrategyFamily.PLACEMENT_POLICY),
        help="VM 放置策略简写",
    )
    parser.add_argument(
        "--vm-scheduler", type=str.upper, choices=REGISTRY.mnemonics(StrategyFamily.HOST_SCHEDULER),
        help="主机级调度器简写",
    )
    parser.add_argument(
        "--cloudlet-scheduler", type=str.upper, choices=REGISTRY.mnemonics(StrategyFamily.VM_SCHEDULER),
        help="VM 级调度器简写",
    )
    parser.add_argument("--runs", type=positive_int, help=f"运行次数（默认 {DEFAULT_RUNS}）")
    parser.add_argument("--display-oversubscription", action="store_true", help="打印超额订阅明细表")
    parser.add_argument("--output-dir", default=".", help="CSV 输出目录")
    parser.add_argument("--log-level", default="WARN", type=str.upper, choices=sorted(LOG_LEVELS))
    parser.add_argument("--interactive", action="store_true", help="为未指定的参数逐项提示输入")
    return parser


def strategy_overrides(args: argparse.Namespace) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for family, option in FAMILY_OPTIONS.items():
        code = getattr(args, option)
        if code is not None:
            overrides[family.value] = REGISTRY.resolve_mnemonic(family, code)
    return overrides


def cmd_run(args: argparse.Namespace, input_fn: InputFn = input) -> int:
    configure_logging(args.log_level)
    loader = ConfigLoader.load(args.config)
    print(f"Loaded configuration from: {loader.path}")

    if args.interactive:
        fill_interactive(args, input_fn)
    shape = get_shape(args.shape or DEFAULT_SHAPE)
    runs = args.runs if args.runs is not None else DEFAULT_RUNS

    loader.update_section(shape.section, strategy_overrides(args))
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    writer = ReportWriter()
    results = run_batch(
        shape.name,
        runs,
        loader,
        writer,
        display_oversubscription=args.display_oversubscription,
        output_dir=output_dir,
    )
    print(f"[ok] {len(results)} runs finished")
    print(f"[ok] Detailed CSV: {output_dir / shape.detailed_csv}")
    print(f"[ok] Metrics CSV: {output_dir / shape.metrics_csv}")
    return 0


# ---------------------------------------------------------------------------
# plot 子命令


def cmd_plot(args: argparse.Namespace) -> int:
    from evaluation.reports.plot import plot_summary

    grouped = plot_summary(args.input, args.output)
    print(grouped.to_string())
    print(f"Saved plot to {args.output}")
    return 0


# ---------------------------------------------------------------------------
# strategies 子命令


def cmd_strategies(args: argparse.Namespace) -> int:
    for family in StrategyFamily:
        print(f"{family.value}:")
        for code, identifier in REGISTRY.forward(family).items():
            print(f"  {code:<3} {identifier}")
    return 0


# ---------------------------------------------------------------------------
# 子命令解析

SUBCOMMANDS = {"plot", "strategies"}


def build_subcommand_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="cloudsim-compare 扩展命令集合")
    sub = parser.add_subparsers(dest="command", required=True)

    p_plot = sub.add_parser("plot", help="按策略组合绘制汇总表各指标均值")
    p_plot.add_argument("--input", default="Showcase_Heterogeneous_Metrics.csv", help="汇总 CSV")
    p_plot.add_argument("--output", default="metrics_summary.png")
    p_plot.set_defaults(func=cmd_plot)

    p_strategies = sub.add_parser("strategies", help="列出全部策略简写")
    p_strategies.set_defaults(func=cmd_strategies)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv: List[str] = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] in SUBCOMMANDS:
        args = build_subcommand_parser().parse_args(argv)
        return args.func(args)

    args = build_run_parser().parse_args(argv)
    try:
        return cmd_run(args)
    except (ConfigError, ClusterConsistencyError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
