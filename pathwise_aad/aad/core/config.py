# aad/core/config.py
from dataclasses import dataclass


@dataclass
class AdjointConfig:
    """
    Settings of the reverse sweep.

    Attributes:
        strict_targets: raise UnreachableTarget for targets that are not in the
            differentiable ancestry of the root instead of returning zeros
        workers: number of threads; > 1 partitions the paths into contiguous
            slices that are swept independently
        min_paths_per_worker: smallest slice handed to a worker
        verify_order: check that every operand precedes its dependent while
            collecting the graph (CyclicGraphDetected otherwise)
    """
    strict_targets: bool = False
    workers: int = 1
    min_paths_per_worker: int = 1024
    verify_order: bool = True

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.min_paths_per_worker < 1:
            raise ValueError(f"min_paths_per_worker must be >= 1, got {self.min_paths_per_worker}")
