from typing import Protocol, runtime_checkable

from roadnet.domain.entities.geography import Block, RawBlock


# ------------- Map construction --------------------
@runtime_checkable
class BlockSource(Protocol):
    """
    Responsibilities:
      • Produce the raw per-block records of a map, in street order.
    Parsing and storage format are the source's business; the builder only
    sees already-structured records.
    """

    def load_raw_blocks(self) -> list[RawBlock]: ...


@runtime_checkable
class TrafficFactorSampler(Protocol):
    """
    Return the traffic factor for one physical block.
    < 1 is lighter than normal, > 1 heavier. Must lie in [0.5, 1.5].
    """

    def sample(self, block: Block) -> float: ...


# ------------- Observability --------------------
@runtime_checkable
class QueryHooks(Protocol):
    def build_start(self, *, source: str): ...
    def build_end(self, *, vertices: int, edges: int, wall_ms: float): ...
    def query_start(self, *, op: str, start, end=None): ...
    def query_end(self, *, op: str, hops: int, found: bool, wall_ms: float): ...
    def error(self, *, op: str, exc: BaseException, **kw): ...
