import math
from dataclasses import dataclass, field, replace


# Core geometry types used by the network builder and searches
@dataclass(frozen=True)
class Coordinate:
    x: int
    y: int

    def distance_to(self, other: "Coordinate") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Intersection:
    """A vertex of the road network, identified by its coordinate."""

    coordinate: Coordinate

    @property
    def x(self) -> int:
        return self.coordinate.x

    @property
    def y(self) -> int:
        return self.coordinate.y


@dataclass(frozen=True)
class RawBlock:
    street_name: str
    block_number: int
    road_width: float
    points: tuple[Coordinate, ...]


@dataclass(eq=False)
class Block:
    """
    One directed edge of the road network.

    A physical block becomes two Blocks sharing geometry: the forward copy runs
    first -> last point, the backward copy last -> first. `first_endpoint` is the
    source vertex for adjacency purposes, `last_endpoint` the destination.
    """

    street_name: str
    block_number: int
    road_width: float
    points: tuple[Coordinate, ...]
    first_endpoint: Intersection | None = None
    last_endpoint: Intersection | None = None
    length: float = 0.0
    traffic_factor: float = 1.0
    traffic_cost: float = 0.0
    # the opposite-direction copy of the same physical block
    twin: "Block | None" = field(default=None, repr=False)

    @classmethod
    def from_raw(cls, raw: RawBlock) -> "Block":
        return cls(raw.street_name, raw.block_number, raw.road_width, tuple(raw.points))

    @property
    def first_point(self) -> Coordinate:
        return self.points[0]

    @property
    def last_point(self) -> Coordinate:
        return self.points[-1]

    @property
    def key(self) -> tuple[str, int]:
        return (self.street_name, self.block_number)

    def reversed(self) -> "Block":
        # geometry stays in street order; only the endpoint roles swap
        return replace(
            self,
            first_endpoint=self.last_endpoint,
            last_endpoint=self.first_endpoint,
            twin=self,
        )

    def __repr__(self) -> str:
        src = self.first_endpoint.coordinate if self.first_endpoint else None
        dst = self.last_endpoint.coordinate if self.last_endpoint else None
        return (
            f"Block({self.street_name!r}#{self.block_number}, {src} -> {dst}, "
            f"length={self.length:.3f}, traffic={self.traffic_cost:.3f})"
        )
