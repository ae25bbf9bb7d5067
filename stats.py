import numpy as np
from typing import Dict, List, Sequence, Tuple, Union


def stats_block(vals: Sequence[float]) -> Dict[str, Union[float, int, List[float]]]:
    if len(vals) == 0:
        raise ValueError("vals is empty")

    arr = np.asarray(vals, dtype=float)
    integral = all(isinstance(v, (int, np.integer)) for v in vals)
    bound = int if integral else float

    return {
        "average": float(arr.mean()),
        "median": float(np.median(arr)),
        "min": bound(arr.min()),
        "max": bound(arr.max()),
        "quintiles": [
            float(np.percentile(arr, 20)),
            float(np.percentile(arr, 40)),
            float(np.percentile(arr, 60)),
            float(np.percentile(arr, 80)),
        ],
    }


def degree_counts(graph: Sequence[Sequence[int]]) -> Tuple[List[int], List[int]]:
    n = len(graph)
    out_deg = np.array([len(targets) for targets in graph], dtype=np.int64)
    flat = np.fromiter((t for targets in graph for t in targets), dtype=np.int64)
    in_deg = np.bincount(flat, minlength=n)
    return out_deg.tolist(), in_deg.tolist()


def rank_summary(probs: Sequence[float], graph: Sequence[Sequence[int]]) -> Dict[str, Union[float, int]]:
    """Total mass of a rank vector and how much of it sits on sink nodes."""
    arr = np.asarray(probs, dtype=float)
    sinks = np.array([len(targets) == 0 for targets in graph], dtype=bool)

    return {
        "sum": float(arr.sum()),
        "sink_mass": float(arr[sinks].sum()) if sinks.any() else 0.0,
        "sinks": int(sinks.sum()),
    }
