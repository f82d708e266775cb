import pytest

from roadnet.domain.entities.geography import Coordinate, Intersection, RawBlock
from roadnet.domain.mechanics.mechanics_builder import build_network
from roadnet.domain.mechanics.mechanics_search import (
    DisconnectedPathError,
    PathInfo,
    fastest_path,
    minimize_intersections,
    path_information,
    reachable_intersections,
)
from roadnet.domain.mechanics.mechanics_traffic import (
    ConstantTrafficFactor,
    GaussianTrafficFactor,
    TableTrafficFactor,
)
from roadnet.domain.network import VertexNotFoundError
from roadnet.sim.rng import RNGRegistry


def _v(x, y):
    return Intersection(Coordinate(x, y))


def _raw(street, number, *pts):
    return RawBlock(street, number, 6.0, tuple(Coordinate(x, y) for x, y in pts))


# ---------- end-to-end divergence on the 3-street map


def test_bfs_picks_fewer_hops(three_street_map, corners):
    A, D = corners["A"], corners["D"]
    assert three_street_map.minimize_intersections(A, D) == [A, D]


def test_fastest_picks_lower_traffic(three_street_map, corners):
    A, B, D = corners["A"], corners["B"], corners["D"]
    assert three_street_map.fastest_path(A, D) == [A, B, D]


def test_routes_diverge_on_cost(three_street_map, corners):
    A, D = corners["A"], corners["D"]
    hop = three_street_map.path_information(three_street_map.minimize_intersections(A, D))
    fast = three_street_map.path_information(three_street_map.fastest_path(A, D))
    assert hop.total_traffic == pytest.approx(48.0)
    assert fast.total_traffic == pytest.approx(16.0)
    assert fast.total_length == pytest.approx(20.0)
    assert fast.average_traffic_factor == pytest.approx(0.8)


def test_reachable_is_dfs_preorder(three_street_map, corners):
    A, B, C, D = (corners[k] for k in "ABCD")
    # A's newest edge leads to B; B's newest edge leads to C
    assert three_street_map.reachable(A) == [A, B, C, D]
    assert three_street_map.reachable(D) == [D, B, C, A]


# ---------- DFS


def test_reachable_from_isolated_vertex_is_singleton():
    net = build_network(
        [_raw("One Way", 1, (0, 0), (1, 0)), _raw("Island", 1, (5, 5), (5, 5))],
        ConstantTrafficFactor(1.0),
    )
    island = _v(5, 5)
    # the island's only edges loop back to itself
    assert reachable_intersections(net, island) == [island]


def test_reachable_covers_component_only():
    net = build_network(
        [_raw("A", 1, (0, 0), (1, 0)), _raw("A", 2, (1, 0), (2, 0)), _raw("B", 1, (9, 9), (9, 8))],
        ConstantTrafficFactor(1.0),
    )
    order = reachable_intersections(net, _v(2, 0))
    assert order == [_v(2, 0), _v(1, 0), _v(0, 0)]
    assert len(set(order)) == len(order)


def test_reachable_handles_long_chains():
    raws = [_raw("Long", i, (i, 0), (i + 1, 0)) for i in range(3000)]
    net = build_network(raws, ConstantTrafficFactor(1.0))
    order = reachable_intersections(net, _v(0, 0))
    assert len(order) == 3001
    assert order[-1] == _v(3000, 0)


def test_reachable_unknown_source_raises():
    net = build_network([_raw("A", 1, (0, 0), (1, 0))], ConstantTrafficFactor(1.0))
    with pytest.raises(VertexNotFoundError):
        reachable_intersections(net, _v(7, 7))


# ---------- BFS / uniform-cost edge cases


@pytest.fixture
def split_net():
    return build_network(
        [_raw("A", 1, (0, 0), (1, 0)), _raw("B", 1, (5, 5), (6, 5))], ConstantTrafficFactor(1.0)
    )


def test_disconnected_returns_empty(split_net):
    assert minimize_intersections(split_net, _v(0, 0), _v(6, 5)) == []
    assert fastest_path(split_net, _v(0, 0), _v(6, 5)) == []


def test_start_equals_end(split_net):
    assert minimize_intersections(split_net, _v(0, 0), _v(0, 0)) == [_v(0, 0)]
    assert fastest_path(split_net, _v(0, 0), _v(0, 0)) == [_v(0, 0)]


def test_unknown_endpoints_raise(split_net):
    with pytest.raises(VertexNotFoundError):
        minimize_intersections(split_net, _v(0, 0), _v(3, 3))
    with pytest.raises(VertexNotFoundError):
        fastest_path(split_net, _v(3, 3), _v(0, 0))


def test_bfs_tie_break_follows_newest_edge():
    # square: both (0,0)->(1,0)->(1,1) and (0,0)->(0,1)->(1,1) take two hops
    raws = [
        _raw("S", 1, (0, 0), (1, 0)),
        _raw("S", 2, (1, 0), (1, 1)),
        _raw("W", 1, (0, 0), (0, 1)),
        _raw("W", 2, (0, 1), (1, 1)),
    ]
    net = build_network(raws, ConstantTrafficFactor(1.0))
    path = minimize_intersections(net, _v(0, 0), _v(1, 1))
    assert path == [_v(0, 0), _v(0, 1), _v(1, 1)]
    assert minimize_intersections(net, _v(0, 0), _v(1, 1)) == path


def test_fastest_equal_cost_keeps_first_found():
    raws = [
        _raw("S", 1, (0, 0), (1, 0)),
        _raw("S", 2, (1, 0), (1, 1)),
        _raw("W", 1, (0, 0), (0, 1)),
        _raw("W", 2, (0, 1), (1, 1)),
    ]
    net = build_network(raws, ConstantTrafficFactor(1.0))
    # (0,1) is pushed first (newest edge) and popped first; its relaxation of (1,1)
    # is not displaced by the equal-cost route through (1,0)
    assert fastest_path(net, _v(0, 0), _v(1, 1)) == [_v(0, 0), _v(0, 1), _v(1, 1)]


def test_fastest_prefers_cheap_detour_over_direct():
    factors = TableTrafficFactor({("Direct", 1): 1.5, ("Detour", 1): 0.5, ("Detour", 2): 0.5})
    net = build_network(
        [
            _raw("Direct", 1, (0, 0), (10, 0)),
            _raw("Detour", 1, (0, 0), (5, 3)),
            _raw("Detour", 2, (5, 3), (10, 0)),
        ],
        factors,
    )
    assert fastest_path(net, _v(0, 0), _v(10, 0)) == [_v(0, 0), _v(5, 3), _v(10, 0)]
    assert minimize_intersections(net, _v(0, 0), _v(10, 0)) == [_v(0, 0), _v(10, 0)]


# ---------- exhaustive comparison on a small random grid


def _grid_net(seed: int):
    raws = []
    n = 0
    for x in range(3):
        for y in range(3):
            if x < 2:
                n += 1
                raws.append(_raw("EW", n, (x * 10, y * 10), (x * 10 + 10, y * 10)))
            if y < 2:
                n += 1
                raws.append(_raw("NS", n, (x * 10, y * 10), (x * 10, y * 10 + 10)))
    raws.append(_raw("Diag", 1, (0, 0), (10, 10)))
    raws.append(_raw("Diag", 2, (10, 10), (20, 20)))
    rng = RNGRegistry(seed, map_name="grid").stream("traffic")
    return build_network(raws, GaussianTrafficFactor(rng))


def _all_simple_paths(net, start, end):
    out = []

    def walk(path):
        cur = path[-1]
        if cur == end:
            out.append(list(path))
            return
        for block in net.edges_from_coordinate(cur.coordinate):
            nxt = block.last_endpoint
            if nxt not in path:
                path.append(nxt)
                walk(path)
                path.pop()

    walk([start])
    return out


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_fastest_matches_exhaustive_minimum(seed):
    net = _grid_net(seed)
    start, end = _v(0, 0), _v(20, 20)
    best = min(path_information(net, p).total_traffic for p in _all_simple_paths(net, start, end))
    found = fastest_path(net, start, end)
    assert found[0] == start and found[-1] == end
    assert path_information(net, found).total_traffic <= best + 1e-9


@pytest.mark.parametrize("seed", [1, 2])
def test_bfs_matches_exhaustive_hop_count(seed):
    net = _grid_net(seed)
    start, end = _v(20, 0), _v(0, 20)
    fewest = min(len(p) for p in _all_simple_paths(net, start, end))
    found = minimize_intersections(net, start, end)
    assert found[0] == start and found[-1] == end
    assert len(found) == fewest


# ---------- path metrics


def test_path_information_short_paths_are_zero(split_net):
    assert path_information(split_net, []) == (0.0, 0.0, 0.0)
    assert path_information(split_net, [_v(0, 0)]) == PathInfo(0.0, 0.0, 0.0)


def test_path_information_single_edge():
    net = build_network([_raw("Main", 1, (0, 0), (3, 4))], ConstantTrafficFactor(1.4))
    info = path_information(net, [_v(0, 0), _v(3, 4)])
    assert info.total_length == pytest.approx(5.0)
    assert info.average_traffic_factor == pytest.approx(1.4)
    assert info.total_traffic == pytest.approx(7.0)


def test_path_information_zero_length_edge():
    net = build_network([_raw("Dot", 1, (1, 1), (1, 1))], ConstantTrafficFactor(1.0))
    assert path_information(net, [_v(1, 1), _v(1, 1)]) == (0.0, 0.0, 0.0)


def test_path_information_rejects_gap(split_net):
    with pytest.raises(DisconnectedPathError):
        path_information(split_net, [_v(0, 0), _v(6, 5)])
