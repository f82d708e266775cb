# roadnet/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from roadnet.config.models import ScenarioModel
from roadnet.domain.mechanics.mechanics_core import RoadMap
from roadnet.domain.mechanics.mechanics_factory import build_road_map
from roadnet.io.query_logging import QueryLogging
from roadnet.runtime.registries import make_source, make_traffic
from roadnet.sim.hooks import NoopHooks
from roadnet.sim.rng import RNGRegistry


@dataclass
class App:
    config: ScenarioModel
    rng: RNGRegistry
    road_map: RoadMap


def build(cfg: ScenarioModel | Mapping, *, use_logging: bool = True) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) RNG
    rng_registry = RNGRegistry(model.seed, map_name=model.name)

    # 2) Hooks
    hooks = (
        QueryLogging(map_name=model.name, level=model.log.level, debug=model.log.debug)
        if use_logging
        else NoopHooks()
    )

    # 3) Source & traffic
    source = make_source(model.source)
    sampler = make_traffic(model.traffic, rng=rng_registry.stream("traffic"))

    # 4) Graph, built once
    road_map = build_road_map(source, sampler, hooks=hooks)
    return App(model, rng_registry, road_map)
