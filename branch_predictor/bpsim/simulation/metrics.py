"""
Simulation Results and Reporting

Results container, the end-of-run text report and exporters.
"""

import csv
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


TableContents = List[Tuple[int, int]]


@dataclass
class SimulationResults:
    """Container for simulation results."""
    trace_name: str
    scheme: str
    predictions: int
    mispredictions: int
    elapsed_time: float
    final_contents: List[Tuple[str, TableContents]]
    config: Dict[str, Any]
    command: Optional[str] = None
    detailed_stats: Dict[str, Any] = field(default_factory=dict)
    hardware_cost: Dict[str, Any] = field(default_factory=dict)

    @property
    def misprediction_rate(self) -> Optional[float]:
        """Misprediction rate in percent, None for an empty trace."""
        if self.predictions == 0:
            return None
        return self.mispredictions / self.predictions * 100

    @property
    def accuracy(self) -> Optional[float]:
        if self.predictions == 0:
            return None
        return (self.predictions - self.mispredictions) / self.predictions

    def table(self, label: str) -> TableContents:
        """Final contents of one table by its label (e.g. 'GSHARE')."""
        for table_label, contents in self.final_contents:
            if table_label == label.upper():
                return contents
        raise KeyError(label)

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            'trace_name': self.trace_name,
            'scheme': self.scheme,
            'command': self.command,
            'predictions': self.predictions,
            'mispredictions': self.mispredictions,
            'misprediction_rate': self.misprediction_rate,
            'elapsed_time': self.elapsed_time,
            'config': self.config,
            'detailed_stats': self.detailed_stats,
            'hardware_cost': self.hardware_cost,
            'final_contents': {
                label: [value for _, value in contents]
                for label, contents in self.final_contents
            },
        }

    def get_summary(self) -> str:
        """One-line summary of results."""
        return (f"{self.scheme} {self.trace_name}: "
                f"{self.predictions:,} predictions, "
                f"{self.mispredictions:,} mispredictions "
                f"({format_rate(self.misprediction_rate)})")


def format_rate(rate: Optional[float]) -> str:
    """Render a misprediction rate, or n/a when there is none."""
    if rate is None:
        return "n/a"
    return f"{rate:.2f}%"


def format_report(results: SimulationResults) -> str:
    """
    Render the end-of-run report.

    Layout:
        COMMAND
        <command line>
        OUTPUT
        Number of predictions: <n>
        Number of mispredictions: <n>
        Misprediction rate: <rate>
        FINAL <TABLE> CONTENTS
        <index>      <value>
        ...
    """
    lines = []
    if results.command:
        lines.extend(["COMMAND", results.command])

    lines.extend([
        "OUTPUT",
        f"Number of predictions: {results.predictions}",
        f"Number of mispredictions: {results.mispredictions}",
        f"Misprediction rate: {format_rate(results.misprediction_rate)}",
    ])

    for label, contents in results.final_contents:
        lines.append(f"FINAL {label} CONTENTS")
        lines.extend(f"{index}      {value}" for index, value in contents)

    return "\n".join(lines)


class ResultsExporter:
    """Export simulation results to various formats."""

    @staticmethod
    def to_csv(results: List[SimulationResults], filepath: str) -> None:
        """Export one row per run to CSV."""
        with open(filepath, 'w', newline='') as f:
            writer = csv.writer(f)

            writer.writerow(['Trace', 'Scheme', 'Config', 'Predictions',
                             'Mispredictions', 'Misprediction rate (%)',
                             'Storage (bits)', 'Time (s)'])
            for result in results:
                rate = result.misprediction_rate
                writer.writerow([
                    result.trace_name,
                    result.scheme,
                    " ".join(f"{k}={v}" for k, v in result.config.items()
                             if k != 'scheme'),
                    result.predictions,
                    result.mispredictions,
                    '' if rate is None else f"{rate:.4f}",
                    result.hardware_cost.get('total_bits', ''),
                    f"{result.elapsed_time:.4f}",
                ])

    @staticmethod
    def to_json(results: SimulationResults, filepath: str) -> None:
        """Export results to JSON."""
        with open(filepath, 'w') as f:
            json.dump(results.to_dict(), f, indent=2)

    @staticmethod
    def to_comparison_table(results: List[SimulationResults]) -> str:
        """Ranked comparison table, best misprediction rate first."""
        if not results:
            return "No results"

        def sort_key(result):
            rate = result.misprediction_rate
            return (rate is None, rate if rate is not None else 0.0)

        lines = [
            "Configuration Comparison:",
            "-" * 66,
            f"{'Configuration':<28} {'Mispred':>12} {'Rate':>10} {'Storage':>12}",
            "-" * 66
        ]

        for result in sorted(results, key=sort_key):
            label = " ".join([result.scheme] + [
                f"{k.upper()}={v}" for k, v in result.config.items() if k != 'scheme'
            ])
            storage_kb = result.hardware_cost.get('total_kb', 0.0)
            lines.append(
                f"{label:<28} {result.mispredictions:>12,} "
                f"{format_rate(result.misprediction_rate):>10} {storage_kb:>10.2f}KB"
            )

        lines.append("-" * 66)
        return "\n".join(lines)
