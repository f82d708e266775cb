from collections.abc import Iterator

from roadnet.domain.entities.geography import Block, Coordinate, Intersection


class VertexNotFoundError(LookupError):
    """Raised when an intersection is not a vertex of the network."""

    def __init__(self, where: Intersection | Coordinate):
        coord = where.coordinate if isinstance(where, Intersection) else where
        super().__init__(f"vertex not found: ({coord.x}, {coord.y})")
        self.coordinate = coord


class Network:
    """
    Adjacency-list graph over intersections.

    Vertices are kept in insertion order; `_adj[i]` holds every Block whose source
    endpoint is `_vertices[i]`, most recently added edge first. A coordinate index
    sits beside the vertex array so lookups do not scan.
    """

    def __init__(self):
        self._vertices: list[Intersection] = []
        self._adj: list[list[Block]] = []
        self._index: dict[Coordinate, int] = {}

    # ---------------- vertices ----------------

    def find_intersection(self, coordinate: Coordinate) -> int | None:
        return self._index.get(coordinate)

    def add_intersection(self, intersection: Intersection) -> int:
        if intersection.coordinate in self._index:
            raise ValueError(f"duplicate intersection at {intersection.coordinate}")
        self._index[intersection.coordinate] = len(self._vertices)
        self._vertices.append(intersection)
        self._adj.append([])
        return len(self._vertices) - 1

    def intersection(self, index: int) -> Intersection:
        return self._vertices[index]

    def index_of(self, intersection: Intersection) -> int:
        idx = self._index.get(intersection.coordinate)
        if idx is None:
            raise VertexNotFoundError(intersection)
        return idx

    @property
    def intersections(self) -> tuple[Intersection, ...]:
        return tuple(self._vertices)

    # ---------------- edges ----------------

    def add_edge(self, source_index: int, block: Block) -> None:
        # prepend: traversal order is most-recent-first
        self._adj[source_index].insert(0, block)

    def edges_from(self, index: int) -> tuple[Block, ...]:
        return tuple(self._adj[index])

    def edges_from_coordinate(self, coordinate: Coordinate) -> tuple[Block, ...]:
        idx = self._index.get(coordinate)
        return () if idx is None else tuple(self._adj[idx])

    def edges(self) -> Iterator[Block]:
        for chain in self._adj:
            yield from chain

    def find_edge(self, src: Intersection, dst: Intersection) -> Block | None:
        for block in self.edges_from_coordinate(src.coordinate):
            if block.last_endpoint == dst:
                return block
        return None

    # ---------------- sizes ----------------

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def edge_count(self) -> int:
        return sum(len(chain) for chain in self._adj)

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Intersection):
            return item.coordinate in self._index
        if isinstance(item, Coordinate):
            return item in self._index
        return False
