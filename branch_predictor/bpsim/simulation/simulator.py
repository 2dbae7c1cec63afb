"""
Branch Prediction Simulator

Main simulation engine: folds a branch trace through one predictor.
"""

import logging
import multiprocessing
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from tqdm import tqdm

from ..config import PredictorConfig
from ..exceptions import ConfigurationError
from ..predictors.base import BasePredictor
from ..trace.formats import BranchRecord
from ..trace.parser import TraceParser
from ..utils.helpers import create_predictor
from .metrics import SimulationResults


logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for simulation run. log_interval=0 disables progress logging."""
    max_branches: Optional[int] = None
    skip_branches: int = 0
    strict: bool = True
    verbose: bool = False
    log_interval: int = 100000

    def __post_init__(self):
        if self.max_branches is not None and self.max_branches < 0:
            raise ConfigurationError(f"max_branches must be non-negative, got {self.max_branches}")
        if self.skip_branches < 0:
            raise ConfigurationError(f"skip_branches must be non-negative, got {self.skip_branches}")
        if self.log_interval < 0:
            raise ConfigurationError(f"log_interval must be non-negative, got {self.log_interval}")


class BranchSimulator:
    """
    Branch Prediction Simulator.

    Each branch is predicted and trained before the next one is read, so
    a run is a strictly sequential fold over the trace.
    """

    def __init__(self, predictor: BasePredictor,
                 config: Union[SimulationConfig, dict, None] = None):
        """
        Initialize simulator.

        Args:
            predictor: Predictor to evaluate
            config: Simulation configuration
        """
        if config is None:
            self.config = SimulationConfig()
        elif isinstance(config, dict):
            self.config = SimulationConfig(**config)
        else:
            self.config = config

        self.predictor = predictor
        self.parser = TraceParser(strict=self.config.strict)
        self.branches_processed = 0

    def run(self, trace_path: Union[str, Path],
            command: Optional[str] = None) -> SimulationResults:
        """
        Run simulation on a trace file.

        Args:
            trace_path: Path to trace file
            command: Command line echoed in the report

        Returns:
            SimulationResults with all metrics
        """
        trace_path = Path(trace_path)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")

        logger.info("Simulating %s on %s", self.predictor.config, trace_path.name)

        records = self.parser.parse_file(
            trace_path,
            max_branches=self.config.max_branches,
            skip_branches=self.config.skip_branches
        )

        total = None
        if self.config.verbose:
            total = self.parser.get_trace_info(trace_path).estimated_branches
            if self.config.max_branches is not None:
                total = (self.config.max_branches if total is None
                         else min(total, self.config.max_branches))

        return self._simulate(records, str(trace_path), command, total)

    def run_on_trace(self, trace: Iterable,
                     trace_name: str = "memory",
                     command: Optional[str] = None) -> SimulationResults:
        """
        Run simulation on an in-memory trace.

        Args:
            trace: BranchTrace, or any iterable of BranchRecords or
                (address, taken) pairs

        Returns:
            SimulationResults
        """
        total = len(trace) if hasattr(trace, '__len__') else None
        return self._simulate(trace, trace_name, command, total)

    def _simulate(self, records: Iterable, trace_name: str,
                  command: Optional[str], total: Optional[int]) -> SimulationResults:
        self._reset()

        start_time = time.time()

        if self.config.verbose:
            progress = tqdm(records, total=total, desc="Simulating", unit="branches")
        else:
            progress = records

        for record in progress:
            self._process_branch(record)

            if (self.config.log_interval
                    and self.branches_processed % self.config.log_interval == 0):
                self._log_progress()

        elapsed_time = time.time() - start_time

        results = self._compile_results(trace_name, command, elapsed_time)
        logger.info(results.get_summary())
        return results

    def _process_branch(self, record) -> None:
        """Process a single branch."""
        if isinstance(record, BranchRecord):
            pc, taken = record.pc, record.taken
        else:
            pc, taken = record

        self.predictor.step(pc, bool(taken))
        self.branches_processed += 1

    def _reset(self) -> None:
        """Reset simulator and predictor state."""
        self.predictor.reset()
        self.branches_processed = 0

    def _compile_results(self, trace_name: str, command: Optional[str],
                         elapsed_time: float) -> SimulationResults:
        """Compile simulation results."""
        stats = self.predictor.stats
        return SimulationResults(
            trace_name=trace_name,
            scheme=self.predictor.config.scheme,
            predictions=stats.predictions,
            mispredictions=stats.mispredictions,
            elapsed_time=elapsed_time,
            final_contents=self.predictor.final_contents(),
            config=self.predictor.config.to_dict(),
            command=command,
            detailed_stats=self.predictor.get_detailed_stats(),
            hardware_cost=self.predictor.get_hardware_cost()
        )

    def _log_progress(self) -> None:
        """Log progress during simulation."""
        stats = self.predictor.stats
        message = f"Branches: {self.branches_processed:,} | {stats}"
        if self.config.verbose:
            tqdm.write(message)
        else:
            logger.debug(message)


def _run_config_worker(args: tuple) -> SimulationResults:
    """
    Worker for parallel sweeps: one fresh predictor, one full run.

    Args:
        args: Tuple of (config dict, trace path, simulation config dict)
    """
    config_dict, trace_path, sim_config = args
    predictor = create_predictor(PredictorConfig.from_dict(config_dict))
    simulator = BranchSimulator(predictor, sim_config)
    return simulator.run(trace_path, command=f"sim_bp {predictor.config} {trace_path}")


class ComparativeSimulator:
    """
    Run independent simulations of several configurations over one trace.

    Runs are spread over worker processes; each run on its own is still
    sequential.
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 num_workers: Optional[int] = None):
        # Per-run progress bars would interleave across processes
        self.config = replace(config or SimulationConfig(), verbose=False)
        if num_workers is None:
            num_workers = max(1, multiprocessing.cpu_count() - 1)
        self.num_workers = num_workers

    def run_sweep(self, trace_path: Union[str, Path],
                  configs: Sequence[PredictorConfig]) -> List[SimulationResults]:
        """
        Simulate every configuration on the trace.

        Args:
            trace_path: Path to trace file
            configs: Predictor configurations to compare

        Returns:
            SimulationResults in the same order as configs
        """
        trace_path = Path(trace_path)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")

        # Reject bad configurations before any worker starts
        for cfg in configs:
            cfg.validate()

        sim_config = asdict(self.config)
        all_args = [(cfg.to_dict(), str(trace_path), sim_config) for cfg in configs]

        logger.info("Running %d configurations with %d worker(s)",
                    len(all_args), self.num_workers)

        if self.num_workers <= 1 or len(all_args) <= 1:
            return [_run_config_worker(args) for args in all_args]

        with ProcessPoolExecutor(max_workers=self.num_workers) as executor:
            return list(executor.map(_run_config_worker, all_args))
