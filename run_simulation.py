"""CLI to run replications of the M/M/c/K queueing system."""

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from configs import load_with_defaults
from flowsim import SimulationEngine, SimulationProfile, build_run_strategy
from flowsim.core.result import SimulationResult
from flowsim.modeling import QueueingSystem
from flowsim.statistics import MemoryTracer
from flowsim.utils.io import save_json, save_results_csv
from flowsim.utils.logger import set_log_level, setup_logger

logger = setup_logger("run_simulation")


def run_replication(
    config: Dict[str, Any],
    seed: int,
    tracer: Optional[MemoryTracer] = None,
) -> Tuple[SimulationResult, QueueingSystem]:
    """Build and run one replication.

    Args:
        config: Full configuration
        seed: Base seed of this replication
        tracer: Optional tracer collecting event records

    Returns:
        Run result and the model, for further inspection
    """
    model = QueueingSystem.from_config(config['model'], seed=seed)
    profile = SimulationProfile(
        model=model,
        run_strategy=build_run_strategy(config['run_strategy']),
        name=f"{config['simulation'].get('name', model.name)}-seed{seed}",
        tracer=tracer,
    )
    result = SimulationEngine(profile).run()
    return result, model


def aggregate(results: List[SimulationResult]) -> Dict[str, Any]:
    """Mean and standard deviation of every numeric metric across runs."""
    keys = sorted({k for r in results for k, v in r.metrics.items() if isinstance(v, (int, float))})
    summary = {}
    for key in keys:
        values = np.array([r.metrics.get(key, 0.0) for r in results], dtype=float)
        summary[key] = {
            'mean': float(values.mean()),
            'std': float(values.std(ddof=1)) if len(values) > 1 else 0.0,
        }
    return summary


def trace_csv_path(args: argparse.Namespace) -> Optional[Path]:
    """Where the trace CSV goes: ``--trace-csv``, or next to ``--output``/``--csv``."""
    if args.trace_csv:
        return Path(args.trace_csv)
    for target in (args.output, args.csv):
        if target:
            path = Path(target)
            return path.with_name(f"{path.stem}_trace.csv")
    return None


def main(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    parser = argparse.ArgumentParser(description="Run flowsim M/M/c/K simulations.")
    parser.add_argument("--config", help="YAML config merged over configs/default.yaml.")
    parser.add_argument("--replications", type=int, help="Number of independent runs.")
    parser.add_argument("--seed", type=int, help="Base seed; replication i uses seed + 100 * i.")
    parser.add_argument("--output", help="Write JSON results to this path.")
    parser.add_argument("--csv", help="Write one CSV row per replication to this path.")
    parser.add_argument("--plot-dir", help="Write occupancy plots of the first replication here.")
    parser.add_argument("--trace", action="store_true", help="Record an event trace of the first replication.")
    parser.add_argument("--trace-csv", help="Write the event trace to this CSV path.")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args(argv)

    if args.log_level:
        set_log_level(args.log_level)

    if args.config and not Path(args.config).exists():
        raise FileNotFoundError(f"Config not found: {args.config}")
    config = load_with_defaults(args.config)

    sim_cfg = config.setdefault('simulation', {})
    replications = args.replications or sim_cfg.get('replications', 1)
    base_seed = args.seed if args.seed is not None else sim_cfg.get('seed', 42)
    if args.plot_dir:
        config['model']['record_history'] = True

    trace_enabled = args.trace or bool(args.trace_csv) or config.get('output', {}).get('trace', False)

    results: List[SimulationResult] = []
    first_model = None
    first_tracer = None
    for i in tqdm(range(replications), desc="Replications", disable=replications == 1):
        tracer = MemoryTracer() if trace_enabled and i == 0 else None
        result, model = run_replication(config, base_seed + 100 * i, tracer)
        results.append(result)
        if i == 0:
            first_model, first_tracer = model, tracer

    output = {
        'config': config,
        'runs': [r.to_dict() for r in results],
        'aggregate': aggregate(results),
    }

    if first_tracer is not None:
        output['trace'] = [record.to_dict(encode_json=True) for record in first_tracer.records]
        logger.info(f"Recorded {len(first_tracer)} trace records in the first replication")
        trace_path = trace_csv_path(args)
        if trace_path is not None:
            trace_path.parent.mkdir(parents=True, exist_ok=True)
            first_tracer.to_dataframe().to_csv(trace_path, index=False)
            logger.info(f"Trace written to {trace_path}")

    if args.output:
        save_json(output, args.output)
        logger.info(f"Results written to {args.output}")
    if args.csv:
        save_results_csv(results, args.csv)
        logger.info(f"CSV written to {args.csv}")
    if args.plot_dir and first_model is not None:
        from flowsim.utils.visualization import plot_results

        metrics = {}
        if first_model.queue is not None:
            metrics['queue'] = first_model.queue.occupancy_metric
        for observer in first_model.server_observers:
            metrics[f"{observer.server.name}_busy"] = observer.busy_units_metric
        plot_results(results[0].metrics, metrics, Path(args.plot_dir))
        logger.info(f"Plots written to {args.plot_dir}")

    for result in results:
        print(result)
    print("Simulation results:", json.dumps(output['aggregate'], indent=2, default=str))
    return output


if __name__ == "__main__":
    main()
