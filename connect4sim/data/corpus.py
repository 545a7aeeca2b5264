"""
corpus.py - Parallel generation of match corpora

Every match is simulated by an independent task with its own board and its own
random generator seeded from a spawned ``SeedSequence``. Identifiers are assigned
from the requested index, so a seeded corpus does not depend on how many worker
processes produced it.
"""

import os
from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, List, Optional, Tuple

import numpy as np

from connect4sim.debug import debug, DebugLevel
from connect4sim.game.simulator import Match, simulate_match

# Matches handed to a worker process per round trip
CHUNK_SIZE = 64


def _simulate_task(task: Tuple[int, np.random.SeedSequence, DebugLevel]) -> Match:
    match_id, seed_seq, level = task
    # Worker processes start with their own DebugManager
    if debug.level != level:
        debug.configure(level=level)
    rng = np.random.default_rng(seed_seq)
    return Match(match_id, tuple(simulate_match(rng)))


class MatchCorpusRunner:
    """Fans out independent match simulations and collects them in id order."""

    def __init__(self, seed: Optional[int] = None, workers: Optional[int] = None):
        """
        Args:
            seed: Root seed for the corpus (None draws fresh OS entropy)
            workers: Worker processes; 1 runs in-process, None uses the CPU count
        """
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be positive, got {workers}")
        self.seed_sequence = np.random.SeedSequence(seed)
        self.workers = workers if workers is not None else (os.cpu_count() or 1)

    def run(self, count: int) -> List[Match]:
        """
        Simulate ``count`` matches with identifiers 1..count.

        Args:
            count: Number of matches to simulate

        Returns:
            Matches ordered by identifier
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValueError(f"count must be a positive integer, got {count!r}")

        level = debug.level
        tasks = [(match_id, child, level)
                 for match_id, child in zip(range(1, count + 1), self.seed_sequence.spawn(count))]
        debug.info(f"Simulating {count} matches on {self.workers} worker(s)", "corpus")

        debug.start_timer("corpus")
        if self.workers == 1 or count == 1:
            matches = [_simulate_task(task) for task in tasks]
        else:
            with ProcessPoolExecutor(max_workers=self.workers) as pool:
                # map() yields in submission order regardless of completion order
                matches = list(pool.map(_simulate_task, tasks, chunksize=CHUNK_SIZE))
        debug.end_timer("corpus", "corpus")

        debug.info(f"Generated {len(matches)} matches", "corpus")
        return matches


def generate_corpus(count: int, seed: Optional[int] = None,
                    workers: Optional[int] = None) -> List[Match]:
    """Convenience wrapper around MatchCorpusRunner."""
    return MatchCorpusRunner(seed=seed, workers=workers).run(count)


def find_match(matches: Iterable[Match], match_id: int) -> Optional[Match]:
    """
    Look a match up by identifier (not by list position).

    Returns:
        The match, or None if no match carries that identifier
    """
    for match in matches:
        if match.match_id == match_id:
            return match

    debug.debug(f"Match {match_id} not found", "corpus")
    return None
