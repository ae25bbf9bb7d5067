#!/usr/bin/env python3
import argparse
import json
import logging
import os
import sys
import time
from typing import List, Optional, Sequence

from stats import degree_counts, rank_summary, stats_block
from pagerank import DidNotConverge, iterative_pagerank


def setup_logging() -> logging.Logger:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )
    return logging.getLogger("analysis")


def load_graph(path: str) -> List[List[int]]:
    """
    Read a JSON adjacency list, e.g. [[1], [0, 2], []]. "-" reads stdin.
    """
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path, "r") as f:
            data = json.load(f)

    if not isinstance(data, list) or not all(isinstance(row, list) for row in data):
        raise ValueError(f"{path}: expected a JSON list of lists of node indices")
    if not data:
        raise ValueError(f"{path}: graph has no nodes")
    return data


def top_ranked(pr: Sequence[float], k: int):
    return sorted(enumerate(pr), key=lambda x: x[1], reverse=True)[:k]


def main(argv: Optional[List[str]] = None) -> int:
    log = setup_logging()

    parser = argparse.ArgumentParser()
    parser.add_argument("--graph", required=True, help="JSON adjacency list file ('-' for stdin)")
    parser.add_argument("--damping", type=float, default=os.environ.get("PAGERANK_DAMPING", "0.85"))
    parser.add_argument("--tolerance", type=float, default=os.environ.get("PAGERANK_TOLERANCE", "0.0001"))
    parser.add_argument(
        "--max_iters",
        type=int,
        default=200,
        help="Give up after N iterations. Use 0 for no limit.",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Give up after this many seconds.")
    parser.add_argument(
        "--log_every",
        type=int,
        default=0,
        help="Log the rank vector every N iterations (0 disables).",
    )
    parser.add_argument(
        "--redistribute_sinks",
        action="store_true",
        help="Spread the rank held by nodes without outgoing links over all nodes",
    )
    parser.add_argument("--top", type=int, default=5)
    args = parser.parse_args(argv)

    if args.max_iters < 0:
        parser.error("--max_iters must be >= 0")
    max_iters = args.max_iters if args.max_iters > 0 else None

    log.info(
        f"Args: graph={args.graph}, damping={args.damping}, tolerance={args.tolerance}, "
        f"max_iters={max_iters}, timeout={args.timeout}, log_every={args.log_every}, "
        f"redistribute_sinks={args.redistribute_sinks}"
    )

    t0 = time.time()
    try:
        graph = load_graph(args.graph)
    except (OSError, ValueError) as e:
        log.error(f"Cannot use graph {args.graph}: {e}")
        return 2
    t1 = time.time()
    log.info(f"Loaded {len(graph)} nodes in {t1 - t0:.2f}s")

    log.info("Starting PageRank iterations...")
    failure = None
    try:
        pr, iters = iterative_pagerank(
            graph,
            args.damping,
            args.tolerance,
            verbose=args.log_every > 0,
            max_iters=max_iters,
            timeout=args.timeout,
            redistribute_sinks=args.redistribute_sinks,
            log_every_iters=args.log_every,
        )
    except DidNotConverge as e:
        log.error(str(e))
        failure = e
    except ValueError as e:
        log.error(f"Cannot rank graph {args.graph}: {e}")
        return 2
    t2 = time.time()

    # edges are valid past this point
    out_degree, in_degree = degree_counts(graph)

    print("\n=== Outgoing Links Stats ===")
    print(stats_block(out_degree))

    print("\n=== Incoming Links Stats ===")
    print(stats_block(in_degree))

    if failure is not None:
        print("\n=== Last PageRank estimate ===")
        print(rank_summary(failure.probabilities, graph))
        return 1
    log.info(f"Finished PageRank in {t2 - t1:.2f}s (iters={iters})")

    print(f"\n=== PageRank Top {args.top} ===")
    for i, (node, score) in enumerate(top_ranked(pr, args.top), start=1):
        print(f"{i}. node {node}  PR={score:.10f}")

    print("\n=== PageRank Mass ===")
    print(rank_summary(pr, graph))

    print("\n=== Timing ===")
    print(f"Load time:     {t1 - t0:.2f} sec")
    print(f"PageRank time: {t2 - t1:.2f} sec (iters={iters})")
    print(f"Total time:    {t2 - t0:.2f} sec")
    return 0


if __name__ == "__main__":
    sys.exit(main())
