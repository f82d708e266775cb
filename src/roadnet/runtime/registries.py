# runtime/registries.py
from collections.abc import Callable
from typing import Any

from roadnet.app.protocols import BlockSource, TrafficFactorSampler
from roadnet.config.models import (
    SourceFileModel,
    SourceInlineModel,
    SourceUnion,
    TrafficConstantModel,
    TrafficGaussianModel,
    TrafficTableModel,
    TrafficUnion,
)
from roadnet.domain.entities.geography import Coordinate, RawBlock
from roadnet.domain.mechanics.mechanics_traffic import (
    ConstantTrafficFactor,
    GaussianTrafficFactor,
    TableTrafficFactor,
)
from roadnet.io.map_loader import InlineBlockSource, TextFileBlockSource

TrafficFactory = Callable[[TrafficUnion, dict[str, Any]], TrafficFactorSampler]
SourceFactory = Callable[[SourceUnion, dict[str, Any]], BlockSource]

_traffic_registry: dict[str, TrafficFactory] = {}
_source_registry: dict[str, SourceFactory] = {}


# ------------------- Traffic factor samplers ---------------------------


def register_traffic(kind: str):
    def deco(fn: TrafficFactory):
        _traffic_registry[kind] = fn
        return fn

    return deco


def make_traffic(cfg: TrafficUnion, *, rng) -> TrafficFactorSampler:
    try:
        factory = _traffic_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown traffic kind {cfg.kind!r}")
    return factory(cfg, {"rng": rng})


@register_traffic("gaussian")
def _make_gaussian(cfg: TrafficGaussianModel, deps):
    return GaussianTrafficFactor(deps["rng"], mean=cfg.mean, sd=cfg.sd, lo=cfg.lo, hi=cfg.hi)


@register_traffic("constant")
def _make_constant(cfg: TrafficConstantModel, deps):
    return ConstantTrafficFactor(cfg.factor)


@register_traffic("table")
def _make_table(cfg: TrafficTableModel, deps):
    return TableTrafficFactor(cfg.keyed(), default=cfg.default)


# ------------------------- Block sources ---------------------------


def register_source(kind: str):
    def deco(fn: SourceFactory):
        _source_registry[kind] = fn
        return fn

    return deco


def make_source(cfg: SourceUnion, *, deps: dict | None = None) -> BlockSource:
    try:
        factory = _source_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown source kind {cfg.kind!r}")
    return factory(cfg, deps or {})


@register_source("file")
def _make_file(cfg: SourceFileModel, deps):
    return TextFileBlockSource(cfg.path, encoding=cfg.encoding)


@register_source("inline")
def _make_inline(cfg: SourceInlineModel, deps):
    return InlineBlockSource(
        RawBlock(
            b.street_name,
            b.block_number,
            b.road_width,
            tuple(Coordinate(x, y) for x, y in b.points),
        )
        for b in cfg.blocks
    )
