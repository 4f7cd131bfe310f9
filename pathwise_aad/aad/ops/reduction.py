# aad/ops/reduction.py
import numpy as np

from ..core.builder import record
from ..core.path_vector import PathVector
from .registry import register


def _average(a: PathVector) -> PathVector:
    return PathVector.deterministic(a.average(), a.time)


def _daverage(args, out, n_paths):
    # 1/N broadcast back to every path; the walker has already summed the
    # incoming adjoint over the paths. In a chunked sweep args only hold a
    # slice, so N comes from n_paths.
    a = args[0]
    if a.is_deterministic:
        return 1.0
    return PathVector(out.time, np.full(a.size(), 1.0 / (n_paths or a.size())), copy=False)


register("average", 1, _average, (_daverage,), reduction=True)


def average(x):
    """Monte-Carlo expectation of x; the result is deterministic."""
    return record("average", x)
