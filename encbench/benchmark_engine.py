"""Running the standard benchmark over a list of permutations."""

from __future__ import annotations

import time

from .engine import log_benchmark_header, run_encode
from .permutation import Permutation
from .result import PermutationResult, format_dhms, log_results_to_file
from .threads import setup_ctrl_channel


class BenchmarkEngine:
    """Runs each added permutation once and logs the results."""

    def __init__(self, log_files_directory: str) -> None:
        self.permutations: list[Permutation] = []
        self.results: list[PermutationResult] = []
        self.log_files_directory = log_files_directory

    def add(self, permutation: Permutation) -> None:
        """Queue a permutation to run."""
        self.permutations.append(permutation)

    def run(self) -> None:
        """Run every queued permutation, then write the results log."""
        if not self.permutations:
            raise ValueError("there are no permutations to run")

        start = time.monotonic()
        calc_time: float | None = None
        with setup_ctrl_channel() as ctrl_channel:
            for index, permutation in enumerate(self.permutations):
                permutation_start = time.monotonic()
                # no ETA here: every encode takes a different time
                log_benchmark_header(index, self.permutations, calc_time)
                self.results.append(run_encode(permutation, ctrl_channel))
                calc_time = time.monotonic() - permutation_start

        runtime_str = format_dhms(int(time.monotonic() - start))
        log_results_to_file(
            self.results,
            runtime_str,
            [],
            self.permutations[0].bitrate,
            True,
            self.log_files_directory,
        )
        print(f"Benchmark runtime: {runtime_str}")