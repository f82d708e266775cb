import heapq
from collections import deque
from typing import NamedTuple

from roadnet.domain.entities.geography import Intersection
from roadnet.domain.network import Network


class DisconnectedPathError(ValueError):
    """Two consecutive intersections of a path share no edge."""


class PathInfo(NamedTuple):
    total_length: float
    average_traffic_factor: float
    total_traffic: float


def _require(network: Network, *vertices: Intersection) -> None:
    for v in vertices:
        network.index_of(v)  # raises VertexNotFoundError


def _neighbors(network: Network, v: Intersection):
    for block in network.edges_from_coordinate(v.coordinate):
        yield block, block.last_endpoint


def _walk_back(
    pred: dict[Intersection, Intersection], start: Intersection, end: Intersection
) -> list[Intersection]:
    path = [end]
    while path[-1] != start:
        prev = pred.get(path[-1])
        if prev is None:
            return []
        path.append(prev)
    path.reverse()
    return path


# ------------------------- DFS -------------------------------


def reachable_intersections(network: Network, source: Intersection) -> list[Intersection]:
    """
    Depth-first pre-order from `source`, following edges in adjacency order.

    Uses an explicit stack of neighbor iterators so the visit order is exactly
    that of the recursive formulation without its depth limit.
    """
    _require(network, source)
    visited = {source}
    order = [source]
    stack = [_neighbors(network, source)]
    while stack:
        for _, nxt in stack[-1]:
            if nxt not in visited:
                visited.add(nxt)
                order.append(nxt)
                stack.append(_neighbors(network, nxt))
                break
        else:
            stack.pop()
    return order


# ------------------------- BFS -------------------------------


def minimize_intersections(
    network: Network, start: Intersection, end: Intersection
) -> list[Intersection]:
    """Fewest-edge path start..end inclusive, or [] when end is unreachable."""
    _require(network, start, end)
    visited = {start}
    pred: dict[Intersection, Intersection] = {}
    frontier = deque([start])
    while frontier:
        cur = frontier.popleft()
        if cur == end:
            break
        for _, nxt in _neighbors(network, cur):
            if nxt not in visited:
                visited.add(nxt)
                pred[nxt] = cur
                frontier.append(nxt)
    return _walk_back(pred, start, end)


# ------------------- Uniform-cost search -----------------------


def fastest_path(network: Network, start: Intersection, end: Intersection) -> list[Intersection]:
    """
    Lowest cumulative traffic-cost path, or [] when end is unreachable.

    Stops as soon as `end` is finalized; vertices never popped keep whatever
    tentative cost they had. Equal-cost frontier entries pop in push order and a
    relaxation only wins on a strictly lower cost.
    """
    _require(network, start, end)
    cost: dict[Intersection, float] = {start: 0.0}
    pred: dict[Intersection, Intersection] = {}
    done: set[Intersection] = set()
    seq = 0
    fringe: list[tuple[float, int, Intersection]] = [(0.0, seq, start)]
    while fringe:
        _, _, cur = heapq.heappop(fringe)
        if cur in done:
            continue  # stale entry
        done.add(cur)
        if cur == end:
            break
        for block, nxt in _neighbors(network, cur):
            if nxt in done:
                continue
            c = cost[cur] + block.traffic_cost
            if nxt not in cost or c < cost[nxt]:
                cost[nxt] = c
                pred[nxt] = cur
                seq += 1
                heapq.heappush(fringe, (c, seq, nxt))
    return _walk_back(pred, start, end)


# ------------------------- Metrics -------------------------------


def path_information(network: Network, path: list[Intersection]) -> PathInfo:
    if len(path) < 2:
        return PathInfo(0.0, 0.0, 0.0)
    length = traffic = 0.0
    for a, b in zip(path, path[1:]):
        block = network.find_edge(a, b)
        if block is None:
            raise DisconnectedPathError(
                f"no block from ({a.x}, {a.y}) to ({b.x}, {b.y})"
            )
        length += block.length
        traffic += block.traffic_cost
    avg = traffic / length if length > 0 else 0.0
    return PathInfo(length, avg, traffic)
