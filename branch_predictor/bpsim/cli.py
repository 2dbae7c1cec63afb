"""
Command line entry point.

Usage:
    sim_bp bimodal <M2> <tracefile>
    sim_bp gshare <M1> <N> <tracefile>
    sim_bp hybrid <K> <M1> <N> <M2> <tracefile>
    sim_bp run --config predictor.yaml <tracefile>
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import PredictorConfig, SCHEME_PARAMS
from .exceptions import BPSimError
from .simulation.metrics import ResultsExporter, format_report
from .simulation.simulator import BranchSimulator, SimulationConfig
from .utils.helpers import create_predictor, load_predictor_config, setup_logging


logger = logging.getLogger(__name__)

PROG = "sim_bp"


def non_negative_int(value: str) -> int:
    """argparse type for table widths and branch limits."""
    try:
        number = int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--permissive', action='store_true',
                        help='Treat any outcome other than t as not taken '
                             'instead of rejecting the trace')
    common.add_argument('--max-branches', type=non_negative_int, default=None,
                        help='Stop after this many branches')
    common.add_argument('--json', type=str, default=None, metavar='PATH',
                        help='Also write results as JSON')
    common.add_argument('--progress', action='store_true',
                        help='Show a progress bar')
    common.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')

    parser = argparse.ArgumentParser(
        prog=PROG, description='Trace-driven branch predictor simulator')
    subparsers = parser.add_subparsers(dest='scheme', metavar='scheme')
    subparsers.required = True

    for scheme, params in SCHEME_PARAMS.items():
        sub = subparsers.add_parser(scheme, parents=[common],
                                    help=f'Simulate a {scheme} predictor')
        for name in params:
            sub.add_argument(name, type=non_negative_int, metavar=name.upper())
        sub.add_argument('tracefile', type=str, help='Branch trace file')

    run = subparsers.add_parser('run', parents=[common],
                                help='Simulate a predictor described in a YAML file')
    run.add_argument('--config', '-c', type=str, required=True,
                     help='YAML file with scheme and widths')
    run.add_argument('tracefile', type=str, help='Branch trace file')

    return parser


def config_from_args(args: argparse.Namespace) -> PredictorConfig:
    if args.scheme == 'run':
        return load_predictor_config(args.config)
    widths = {name: getattr(args, name) for name in SCHEME_PARAMS[args.scheme]}
    return PredictorConfig(scheme=args.scheme, **widths).validate()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        config = config_from_args(args)
        predictor = create_predictor(config)

        sim_config = SimulationConfig(
            max_branches=args.max_branches,
            strict=not args.permissive,
            verbose=args.progress
        )
        simulator = BranchSimulator(predictor, sim_config)
        results = simulator.run(args.tracefile,
                                command=f"{PROG} {config} {args.tracefile}")
    except (BPSimError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    print(format_report(results))

    if args.json:
        json_path = Path(args.json)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        ResultsExporter.to_json(results, str(json_path))
        logger.info("Results saved to %s", json_path)

    return 0


if __name__ == '__main__':
    sys.exit(main())
