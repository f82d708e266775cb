import logging
from collections.abc import Iterable

from roadnet.app.protocols import TrafficFactorSampler
from roadnet.domain.entities.geography import Block, Coordinate, Intersection, RawBlock
from roadnet.domain.network import Network
from roadnet.io.map_loader import MapFormatError

log = logging.getLogger(__name__)


def initialize_blocks(raw_blocks: Iterable[RawBlock]) -> list[Block]:
    blocks = []
    for raw in raw_blocks:
        if len(raw.points) < 2:
            raise MapFormatError(
                f"block {raw.street_name!r}#{raw.block_number} needs at least 2 points, "
                f"got {len(raw.points)}"
            )
        blocks.append(Block.from_raw(raw))
    return blocks


def _vertex_for(network: Network, coordinate: Coordinate) -> int:
    idx = network.find_intersection(coordinate)
    if idx is None:
        idx = network.add_intersection(Intersection(coordinate))
    return idx


def initialize_intersections(network: Network, blocks: Iterable[Block]) -> None:
    """
    Register both endpoints of every block and add its forward and backward edges.

    Each block's endpoints are set in place and the block itself becomes the
    forward edge; the backward edge is an independent copy with the endpoints
    swapped.
    """
    for block in blocks:
        first_idx = _vertex_for(network, block.first_point)
        last_idx = _vertex_for(network, block.last_point)
        block.first_endpoint = network.intersection(first_idx)
        block.last_endpoint = network.intersection(last_idx)

        backward = block.reversed()
        block.twin = backward
        network.add_edge(first_idx, block)
        network.add_edge(last_idx, backward)
        if first_idx == last_idx:
            log.debug("self-loop block %s#%s at %s", block.street_name, block.block_number, block.first_point)


def block_length(block: Block) -> float:
    pts = block.points
    return sum(pts[i].distance_to(pts[i + 1]) for i in range(len(pts) - 1))


def block_traffic(block: Block) -> float:
    return block.traffic_factor * block.length


def annotate_blocks(network: Network, sampler: TrafficFactorSampler) -> None:
    """Fill length, traffic factor and traffic cost on every directed edge."""
    # one draw per physical block; both directions share geometry and factor
    factors: dict[int, float] = {}
    for edge in network.edges():
        edge.length = block_length(edge)
        if edge.twin is not None and id(edge.twin) in factors:
            factors[id(edge)] = factors[id(edge.twin)]
        else:
            factors[id(edge)] = sampler.sample(edge)
        edge.traffic_factor = factors[id(edge)]
        edge.traffic_cost = block_traffic(edge)


def build_network(raw_blocks: Iterable[RawBlock], sampler: TrafficFactorSampler) -> Network:
    network = Network()
    blocks = initialize_blocks(raw_blocks)
    initialize_intersections(network, blocks)
    annotate_blocks(network, sampler)
    log.debug(
        "network built: %d blocks, %d vertices, %d edges",
        len(blocks),
        network.vertex_count,
        network.edge_count,
    )
    return network
