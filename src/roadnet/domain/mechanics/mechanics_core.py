# roadnet/domain/mechanics/mechanics_core.py
import time
from dataclasses import dataclass, field

from roadnet.app.protocols import QueryHooks
from roadnet.domain.entities.geography import Coordinate, Intersection
from roadnet.domain.mechanics import mechanics_search as search
from roadnet.domain.mechanics.mechanics_search import PathInfo
from roadnet.domain.network import Network, VertexNotFoundError
from roadnet.sim.hooks import NoopHooks


@dataclass
class RoadMap:
    """
    Read-only query façade over a fully built Network.
    Each call allocates its own search state, so concurrent queries are safe.
    """

    network: Network
    hooks: QueryHooks = field(default_factory=NoopHooks)

    def intersection_at(self, x: int, y: int) -> Intersection:
        idx = self.network.find_intersection(Coordinate(x, y))
        if idx is None:
            raise VertexNotFoundError(Coordinate(x, y))
        return self.network.intersection(idx)

    def _run(self, op: str, fn, start: Intersection, end: Intersection | None = None):
        self.hooks.query_start(op=op, start=start, end=end)
        t0 = time.perf_counter()
        try:
            out = fn(self.network, start) if end is None else fn(self.network, start, end)
        except Exception as exc:
            self.hooks.error(op=op, exc=exc)
            raise
        self.hooks.query_end(
            op=op,
            hops=max(len(out) - 1, 0),
            found=bool(out),
            wall_ms=(time.perf_counter() - t0) * 1000.0,
        )
        return out

    def reachable(self, source: Intersection) -> list[Intersection]:
        return self._run("reachable", search.reachable_intersections, source)

    def minimize_intersections(self, start: Intersection, end: Intersection) -> list[Intersection]:
        return self._run("minimize_intersections", search.minimize_intersections, start, end)

    def fastest_path(self, start: Intersection, end: Intersection) -> list[Intersection]:
        return self._run("fastest_path", search.fastest_path, start, end)

    def path_information(self, path: list[Intersection]) -> PathInfo:
        return search.path_information(self.network, path)
