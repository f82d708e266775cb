# roadnet/domain/mechanics/mechanics_factory.py
import logging
import time

from roadnet.app.protocols import BlockSource, QueryHooks, TrafficFactorSampler
from roadnet.domain.mechanics.mechanics_builder import build_network
from roadnet.domain.mechanics.mechanics_core import RoadMap
from roadnet.sim.hooks import NoopHooks

log = logging.getLogger(__name__)


def build_road_map(
    source: BlockSource,
    sampler: TrafficFactorSampler,
    *,
    hooks: QueryHooks | None = None,
) -> RoadMap:
    hooks = hooks or NoopHooks()
    hooks.build_start(source=repr(source))
    t0 = time.perf_counter()

    try:
        network = build_network(source.load_raw_blocks(), sampler)
    except Exception as exc:
        hooks.error(op="build", exc=exc)
        raise

    declared = getattr(source, "declared_intersections", None)
    if declared is not None and declared != network.vertex_count:
        log.warning(
            "map declares %d intersections but %d were built", declared, network.vertex_count
        )
    hooks.build_end(
        vertices=network.vertex_count,
        edges=network.edge_count,
        wall_ms=(time.perf_counter() - t0) * 1000.0,
    )
    return RoadMap(network=network, hooks=hooks)
