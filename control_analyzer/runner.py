#!/usr/bin/env python3
"""
Command-line runner for the Control System Analyzer.

This script is the text-mode shell around the analysis engine. It handles
argument parsing and configuration loading, sets the model, optionally tunes
the controller and prints the analysis report.

Usage:
    python -m control_analyzer.runner --kind second_order --wn 2 --zeta 0.7
    python -m control_analyzer.runner --kind pid --tune imc --index itae
    python -m control_analyzer.runner --compare second_order:zeta=0.3 --compare second_order:zeta=0.7
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from control_analyzer.core.exceptions import ControlAnalysisError
from control_analyzer.core.system_model import ModelParameters, SystemModel
from control_analyzer.core.simulation.performance_analyzer import PerformanceIndex
from control_analyzer.core.simulation.time_domain_simulator import SimulationConfig
from control_analyzer.control_design.controller_tuner import TuningRule
from control_analyzer.control_design.design_requirements import DesignRequirements
from control_analyzer.engine import AnalysisEngine, AnalysisSnapshot, AnalyzerConfig
from control_analyzer.logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "analyzer_defaults.json"
PARAM_NAMES = ("k", "tau", "wn", "zeta", "kp", "ki", "kd")


def load_defaults_config(config_path: Optional[Path] = None) -> dict:
    """Load default model settings from the JSON config file."""
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not path.exists():
        if config_path is not None:
            raise FileNotFoundError(f"Configuration file not found: {path}")
        logger.info("No config file at %s, using built-in defaults", path)
        return {}

    try:
        with open(path, 'r') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse JSON config at {path}: {e}") from e


def parse_compare_spec(spec: str, base: ModelParameters) -> SystemModel:
    """
    Parse 'KIND[:name=value,...]' into a model, e.g. 'second_order:wn=2,zeta=0.3'.
    """
    kind, _, assignments = spec.partition(":")
    overrides: Dict[str, float] = {}
    for item in filter(None, (a.strip() for a in assignments.split(","))):
        name, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"Expected name=value in comparison spec, got {item!r}")
        overrides[name.strip()] = value.strip()
    return SystemModel.create(kind, ModelParameters.from_mapping(overrides, base=base))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Step response, frequency response, root locus and stability analysis "
                    "of first-order, second-order and PID-controlled models."
    )
    parser.add_argument("--config", type=Path, default=None,
                        help=f"JSON defaults file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--kind", default=None,
                        help="Model kind: first_order, second_order or pid")
    for name in PARAM_NAMES:
        parser.add_argument(f"--{name}", type=float, default=None, help=f"Model parameter {name}")
    parser.add_argument("--tune", nargs="?", const=True, default=None, metavar="RULE",
                        help="Replace PID gains before analysis using RULE "
                             f"({', '.join(r.value for r in TuningRule)}); "
                             "without RULE the config file's tuning_rule is used")
    parser.add_argument("--index", default=None, choices=[i.value for i in PerformanceIndex],
                        help="Performance index to highlight")
    parser.add_argument("--compare", action="append", default=[], metavar="KIND:name=value,...",
                        help="Add a model to the comparison set (repeatable)")
    parser.add_argument("--csv", type=Path, default=None,
                        help="Write the step response to a CSV file")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def resolve_settings(args: argparse.Namespace, config: dict) -> Tuple[str, ModelParameters, SimulationConfig]:
    model_cfg = config.get("model", {})
    kind = args.kind or model_cfg.get("kind", "second_order")

    params = ModelParameters.from_mapping(model_cfg.get("params", {}))
    overrides = {name: getattr(args, name) for name in PARAM_NAMES if getattr(args, name) is not None}
    params = ModelParameters.from_mapping(overrides, base=params)

    sim_cfg = config.get("simulation", {})
    simulation = SimulationConfig(
        dt=float(sim_cfg.get("dt", SimulationConfig.dt)),
        t_final=float(sim_cfg.get("t_final", SimulationConfig.t_final)),
    )
    return kind, params, simulation


def format_report(snapshot: AnalysisSnapshot, index: PerformanceIndex,
                  requirements: DesignRequirements, engine: AnalysisEngine) -> str:
    """Assemble the full text report."""
    model = snapshot.model
    lines: List[str] = []
    lines.append("=" * 70)
    lines.append("CONTROL SYSTEM ANALYSIS REPORT")
    lines.append("=" * 70)
    lines.append(f"Model: {model.kind.value}")
    lines.append("  " + "  ".join(f"{k}={v:g}" for k, v in model.params.to_dict().items()))
    lines.append("")

    lines.append(engine.performance_analyzer.generate_report(snapshot.performance, snapshot.indices))
    lines.append(f"  Selected index ({index.value.upper()}): {snapshot.indices.value(index):.4f}")
    lines.append("")

    shown = snapshot.stability.formatted()
    lines.append("STABILITY:")
    lines.append(f"  Classification:        {shown['classification']}")
    lines.append(f"  Stable:                {'YES' if snapshot.stability.is_stable else 'NO'}")
    lines.append(f"  Gain Margin:           {shown['gain_margin_db']} dB")
    lines.append(f"  Phase Margin:          {shown['phase_margin_deg']} deg")
    lines.append("")

    lines.append("DESIGN GUIDANCE:")
    for item in requirements.assess(snapshot.stability, model):
        lines.append(f"  - {item.message}")
    lines.append("")

    lines.append("FREQUENCY / LOCUS DATA:")
    lines.append(f"  Bode points:           {len(snapshot.bode)}")
    lines.append(f"  Nyquist points:        {len(snapshot.nyquist)}")
    lines.append(f"  Root locus points:     {len(snapshot.root_locus)}")

    entries = engine.comparison.entries
    if entries:
        lines.append("")
        lines.append("COMPARISON:")
        final = engine.comparison.series[-1]
        for entry in entries:
            lines.append(f"  {entry.label:<10} [{entry.color}] {entry.model.kind.value:<13} "
                         f"final output {final[entry.key]:.4f}")

    lines.append("=" * 70)
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_defaults_config(args.config)
        kind, params, simulation = resolve_settings(args, config)
        index = PerformanceIndex.parse(args.index or config.get("performance_index", "iae"))

        engine = AnalysisEngine(AnalyzerConfig(simulation=simulation))
        engine.set_model(kind, params)
        if args.tune is not None:
            rule = config.get("tuning_rule", TuningRule.ZIEGLER_NICHOLS.value) if args.tune is True else args.tune
            engine.tune_controller(TuningRule.parse(rule))

        for spec in args.compare:
            engine.add_to_comparison(parse_compare_spec(spec, engine.model.params))

        snapshot = engine.refresh()
    except (ControlAnalysisError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_report(snapshot, index, DesignRequirements(), engine))

    if args.csv is not None:
        snapshot.step_response.to_dataframe().to_csv(args.csv, index=False)
        print(f"Step response written to {args.csv}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
