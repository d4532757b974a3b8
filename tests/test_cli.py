"""
命令行入口测试：参数解析、交互式补全与子命令。
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import argparse
import csv

import pytest

import run_experiment
from evaluation.reports.writer import ReportWriter, summary_row
from evaluation.metrics.aggregator import RunMetrics


def scripted(*answers):
    replies = iter(answers)
    return lambda prompt: next(replies)


def test_main_runs_homogeneous(tmp_path, capsys):
    code = run_experiment.main([
        "--shape", "homogeneous",
        "--allocation", "ff",
        "--vm-scheduler", "TS",
        "--cloudlet-scheduler", "SS",
        "--runs", "2",
        "--output-dir", str(tmp_path),
    ])
    assert code == 0
    with open(tmp_path / "Showcase_Homogeneous_Metrics.csv", newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    assert [row[:4] for row in rows[1:]] == [["1", "FF", "TS", "SS"], ["2", "FF", "TS", "SS"]]
    out = capsys.readouterr().out
    assert "Loaded configuration from:" in out
    assert "[ok] 2 runs finished" in out


def test_main_reports_missing_config(tmp_path):
    assert run_experiment.main(["--config", str(tmp_path / "absent.json"), "--runs", "1"]) == 1


def test_invalid_mnemonic_rejected_by_parser():
    with pytest.raises(SystemExit):
        run_experiment.build_run_parser().parse_args(["--allocation", "XX"])
    with pytest.raises(SystemExit):
        run_experiment.build_run_parser().parse_args(["--runs", "0"])


def test_fill_interactive_prompts_for_missing_values(capsys):
    args = run_experiment.build_run_parser().parse_args(["--vm-scheduler", "SS"])
    run_experiment.fill_interactive(args, scripted("", "2", "XX", "bf", "ts", "maybe", "y"))

    assert args.runs == run_experiment.DEFAULT_RUNS
    assert args.shape == "heterogeneous"
    assert args.allocation == "BF"
    assert args.vm_scheduler == "SS"
    assert args.cloudlet_scheduler == "TS"
    assert args.display_oversubscription is True
    out = capsys.readouterr().out
    assert "Invalid input! Please try again." in out


def test_prompt_runs_retries_until_positive():
    assert run_experiment.prompt_runs(5, scripted("abc", "-3", "7")) == 7
    assert run_experiment.prompt_runs(5, scripted("")) == 5


def test_prompt_shape_accepts_name():
    assert run_experiment.prompt_shape(input_fn=scripted("homogeneous")) == "homogeneous"


def test_strategy_overrides_resolve_mnemonics():
    args = argparse.Namespace(allocation="S", vm_scheduler=None, cloudlet_scheduler="SS")
    assert run_experiment.strategy_overrides(args) == {
        "vmAllocationPolicy": "core.scheduling.allocation.VmAllocationPolicySimple",
        "cloudletScheduler": "core.scheduling.cloudlet_scheduler.CloudletSchedulerSpaceShared",
    }


def test_strategies_subcommand(capsys):
    assert run_experiment.main(["strategies"]) == 0
    out = capsys.readouterr().out
    assert "vmAllocationPolicy:" in out
    assert "core.scheduling.allocation.VmAllocationPolicyBestFit" in out


def test_plot_subcommand(tmp_path, capsys):
    pytest.importorskip("matplotlib")
    pytest.importorskip("pandas")
    path = tmp_path / "metrics.csv"
    for run_id, makespan in [(1, 10.0), (2, 20.0)]:
        # 两个独立 writer 追加到同一文件，会产生重复表头
        ReportWriter().append_summary_row(path, summary_row(RunMetrics(
            run_id, "S", "TS", "TS", makespan, 50 / makespan, 1.0, 0.5, 10, 25.0, 50,
        )))
    output = tmp_path / "plot.png"
    assert run_experiment.main(["plot", "--input", str(path), "--output", str(output)]) == 0
    assert output.exists()
    assert "S/TS/TS" in capsys.readouterr().out
