import logging

import pytest

from roadnet.domain.entities.geography import Coordinate, RawBlock
from roadnet.domain.mechanics.mechanics_core import RoadMap
from roadnet.domain.mechanics.mechanics_factory import build_road_map
from roadnet.domain.mechanics.mechanics_traffic import TableTrafficFactor
from roadnet.io.map_loader import InlineBlockSource


def raw(street: str, number: int, *pts: tuple[int, int], width: float = 8.0) -> RawBlock:
    return RawBlock(street, number, width, tuple(Coordinate(x, y) for x, y in pts))


# ---------- A synthetic 3-street / 4-intersection map
#
#   (0,10) ----------- (20,10)          Main St: A -> D the long way, one block
#     |                   |
#   A(0,0) -- B(10,0) -- D(20,0)        Oak St: A -> B -> D, two blocks
#               |
#             C(10,-10)                 Elm St: B -> C dead end


@pytest.fixture
def three_street_blocks() -> list[RawBlock]:
    return [
        raw("Main St", 1, (0, 0), (0, 10), (20, 10), (20, 0)),
        raw("Oak St", 1, (0, 0), (10, 0)),
        raw("Oak St", 2, (10, 0), (20, 0)),
        raw("Elm St", 1, (10, 0), (10, -10)),
    ]


@pytest.fixture
def three_street_factors() -> TableTrafficFactor:
    return TableTrafficFactor(
        {("Main St", 1): 1.2, ("Oak St", 1): 0.8, ("Oak St", 2): 0.8, ("Elm St", 1): 1.0}
    )


@pytest.fixture
def three_street_map(three_street_blocks, three_street_factors) -> RoadMap:
    return build_road_map(InlineBlockSource(three_street_blocks), three_street_factors)


@pytest.fixture
def corners(three_street_map):
    at = three_street_map.intersection_at
    return {"A": at(0, 0), "B": at(10, 0), "C": at(10, -10), "D": at(20, 0)}


@pytest.fixture(autouse=True)
def fresh_roadnet_logger():
    # the JSON handler binds sys.stdout when created; every test starts clean
    logger = logging.getLogger("roadnet")
    logger.handlers.clear()
    yield logger
    logger.handlers.clear()
