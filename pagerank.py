from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging
import numbers
import time

log = logging.getLogger("pagerank")

Graph = Sequence[Sequence[int]]
IncomingIndex = Dict[int, Tuple[int, ...]]


class PageRankError(Exception):
    pass


class MissingArgument(PageRankError, ValueError):
    pass


class InvalidEdge(PageRankError, ValueError):
    def __init__(self, node: int, target, page_count: int):
        super().__init__(
            f"node {node} links to {target!r}, expected an index in [0, {page_count})"
        )
        self.node = node
        self.target = target


class DidNotConverge(PageRankError, RuntimeError):
    def __init__(self, iterations: int, probabilities: List[float], reason: str):
        super().__init__(f"no convergence after {iterations} iterations ({reason})")
        self.iterations = iterations
        self.probabilities = probabilities


def build_incoming_index(graph: Graph) -> IncomingIndex:
    """
    Reverse the outgoing adjacency: index[t] lists every node linking to t,
    in node order. Nodes nobody links to have no entry.
    """
    n = len(graph)
    in_links: Dict[int, List[int]] = {}

    for i, targets in enumerate(graph):
        for t in targets:
            if isinstance(t, bool) or not isinstance(t, numbers.Integral) or not 0 <= t < n:
                raise InvalidEdge(i, t, n)
            in_links.setdefault(int(t), []).append(i)

    return {t: tuple(sources) for t, sources in in_links.items()}


class PageRank:
    """
    Random-surfer ranking by in-place power iteration:

      PR(b) = (1-d)/N + d * sum_{p in In(b)} PR(p) / C(p)

    Each node is overwritten as soon as it is recomputed, so later nodes of
    the same pass already see the new values (Gauss-Seidel order).

    Convergence: node b is settled when |PR_new(b) - PR_old(b)| <= tolerance;
    stop on the first pass where every node is settled.

    Sinks (no outgoing links) leak their mass each pass unless
    redistribute_sinks is set, in which case it is spread uniformly.
    """

    def __init__(
        self,
        graph: Graph,
        damping: float,
        tolerance: float,
        verbose: bool = False,
        max_iters: Optional[int] = 200,
        timeout: Optional[float] = None,
        initial: Optional[Sequence[float]] = None,
        redistribute_sinks: bool = False,
        progress: Optional[Callable[[int, List[float]], None]] = None,
        log_every_iters: int = 1,
    ):
        if graph is None or len(graph) == 0 or damping is None or tolerance is None:
            raise MissingArgument("Provide graph, damping factor and tolerance")
        if not 0 < damping < 1:
            raise ValueError(f"damping must lie in (0, 1), got {damping}")
        if tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance}")
        if max_iters is not None and max_iters < 1:
            raise ValueError(f"max_iters must be >= 1, got {max_iters}")

        self.graph = graph
        self.damping = damping
        self.tolerance = tolerance
        self.verbose = verbose
        self.max_iters = max_iters
        self.timeout = timeout
        self.redistribute_sinks = redistribute_sinks
        self.progress = progress
        self.log_every_iters = log_every_iters

        self.page_count = len(graph)
        self.coeff = (1.0 - damping) / self.page_count

        self.incoming = build_incoming_index(graph)
        self.out_degree = [len(targets) for targets in graph]
        self.sinks = [u for u, c in enumerate(self.out_degree) if c == 0]

        if initial is None:
            self.seed = [1.0 / self.page_count] * self.page_count
        else:
            if len(initial) != self.page_count:
                raise ValueError(
                    f"initial vector has {len(initial)} entries, graph has {self.page_count} nodes"
                )
            self.seed = [float(p) for p in initial]
        self.probabilities: List[float] = []

    def _sweep(self) -> int:
        """Run one in-place pass; return how many nodes settled."""
        probs = self.probabilities
        tol = self.tolerance

        sink_share = 0.0
        if self.redistribute_sinks and self.sinks:
            sink_share = sum(probs[u] for u in self.sinks) / self.page_count

        settled = 0
        for b in range(self.page_count):
            s = 0.0
            for p in self.incoming.get(b, ()):
                s += probs[p] / self.out_degree[p]

            new = self.coeff + self.damping * (s + sink_share)
            previous = probs[b]
            if previous - tol <= new <= previous + tol:
                settled += 1
            probs[b] = new

        return settled

    def _report(self, it: int) -> None:
        if self.progress is not None:
            self.progress(it, list(self.probabilities))
        if self.verbose and self.log_every_iters and (it == 1 or it % self.log_every_iters == 0):
            log.info(f"[pagerank] iter={it:3d} sumPR={sum(self.probabilities):.6f} PR={self.probabilities}")

    def run(self) -> Tuple[List[float], int]:
        """Iterate from the seed vector; every call starts over."""
        self.probabilities = list(self.seed)
        if self.verbose:
            log.info(f"[pagerank] pages={self.page_count} sinks={len(self.sinks)}")
            log.debug(f"[pagerank] incoming={self.incoming}")

        t0 = time.time()
        it = 0
        while self.max_iters is None or it < self.max_iters:
            it += 1
            settled = self._sweep()
            self._report(it)

            if settled == self.page_count:
                result = self.probabilities
                self.probabilities = []
                return result, it

            if self.timeout is not None and time.time() - t0 > self.timeout:
                raise DidNotConverge(it, list(self.probabilities), f"timeout of {self.timeout}s exceeded")

        raise DidNotConverge(it, list(self.probabilities), f"max_iters={self.max_iters} reached")


def iterative_pagerank(
    graph: Graph,
    damping: float,
    tolerance: float,
    callback: Optional[Callable[[List[float]], None]] = None,
    verbose: bool = False,
    *,
    max_iters: Optional[int] = 200,
    timeout: Optional[float] = None,
    initial: Optional[Sequence[float]] = None,
    redistribute_sinks: bool = False,
    progress: Optional[Callable[[int, List[float]], None]] = None,
    log_every_iters: int = 1,
) -> Tuple[List[float], int]:
    """
    Rank the nodes of graph (graph[i] = targets of node i's outgoing links).

    Returns (probabilities, iterations). If callback is given it also
    receives the final vector. Raises MissingArgument, InvalidEdge or
    ValueError before iterating, and DidNotConverge when max_iters or
    timeout runs out first.

    With tolerance=0 a node only settles when a pass reproduces its value
    exactly, so most graphs end in DidNotConverge.
    """
    engine = PageRank(
        graph,
        damping,
        tolerance,
        verbose=verbose,
        max_iters=max_iters,
        timeout=timeout,
        initial=initial,
        redistribute_sinks=redistribute_sinks,
        progress=progress,
        log_every_iters=log_every_iters,
    )
    pr, iters = engine.run()

    if verbose:
        log.info(f"[pagerank] converged after {iters} iterations")
    if callback is not None:
        callback(pr)
    return pr, iters
