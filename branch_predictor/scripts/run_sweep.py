#!/usr/bin/env python3
"""
Configuration sweep runner.

Simulates a grid of predictor configurations over one trace in parallel
and prints a ranked comparison.

Usage:
    python run_sweep.py --trace traces/gcc_trace.txt --configs sweep.yaml
    python run_sweep.py -t traces/gcc_trace.txt -c sweep.yaml -o results/ -j 4

Example sweep.yaml:
    configs:
      - scheme: bimodal
        m2: [6, 8, 10, 12]
      - scheme: gshare
        m1: [10, 12]
        n: [4, 8]
      - scheme: hybrid
        k: 8
        m1: 12
        n: 8
        m2: 10
"""

import sys
import time
import argparse
import logging
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bpsim.cli import non_negative_int
from bpsim.exceptions import BPSimError
from bpsim.simulation.metrics import ResultsExporter
from bpsim.simulation.simulator import ComparativeSimulator, SimulationConfig
from bpsim.utils.helpers import load_sweep_configs, save_results, setup_logging


logger = logging.getLogger("bpsim.sweep")


def main():
    parser = argparse.ArgumentParser(description='Sweep predictor configurations over a trace')
    parser.add_argument('--trace', '-t', type=str, required=True,
                        help='Branch trace file')
    parser.add_argument('--configs', '-c', type=str, required=True,
                        help='YAML file with a configs list')
    parser.add_argument('--max-branches', '-n', type=non_negative_int, default=None,
                        help='Branches per run (default: whole trace)')
    parser.add_argument('--workers', '-j', type=int, default=None,
                        help='Number of parallel workers (default: CPU count - 1)')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Directory for JSON and CSV results')
    parser.add_argument('--permissive', action='store_true',
                        help='Treat any outcome other than t as not taken')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else "INFO")

    try:
        configs = load_sweep_configs(args.configs)
    except (BPSimError, FileNotFoundError) as e:
        logger.error("%s", e)
        sys.exit(1)

    sim_config = SimulationConfig(
        max_branches=args.max_branches,
        strict=not args.permissive
    )
    sweeper = ComparativeSimulator(sim_config, num_workers=args.workers)

    start_time = time.time()
    try:
        results = sweeper.run_sweep(args.trace, configs)
    except (BPSimError, FileNotFoundError) as e:
        logger.error("%s", e)
        sys.exit(1)
    elapsed = time.time() - start_time

    print(ResultsExporter.to_comparison_table(results))
    print(f"\nCompleted {len(results)} runs in {elapsed:.1f}s")

    if args.output:
        output_dir = Path(args.output)
        paths = save_results(
            {'trace': args.trace, 'runs': [r.to_dict() for r in results]},
            output_dir, name="sweep"
        )
        csv_path = paths['json'].with_suffix('.csv')
        ResultsExporter.to_csv(results, str(csv_path))
        print(f"Results saved to: {paths['json']} and {csv_path}")


if __name__ == '__main__':
    main()
