from roadnet.app.protocols import TrafficFactorSampler
from roadnet.domain.entities.geography import Block

MIN_FACTOR = 0.5
MAX_FACTOR = 1.5


def clamp_factor(v: float, lo: float = MIN_FACTOR, hi: float = MAX_FACTOR) -> float:
    return min(max(v, lo), hi)


class GaussianTrafficFactor(TrafficFactorSampler):
    """Normal(mean, sd) draw clamped into [lo, hi]; rng is a numpy Generator."""

    def __init__(
        self,
        rng,
        mean: float = 1.0,
        sd: float = 0.2,
        lo: float = MIN_FACTOR,
        hi: float = MAX_FACTOR,
    ):
        self.rng, self.mean, self.sd, self.lo, self.hi = rng, mean, sd, lo, hi

    def sample(self, block: Block) -> float:
        return clamp_factor(float(self.rng.normal(self.mean, self.sd)), self.lo, self.hi)


class ConstantTrafficFactor(TrafficFactorSampler):
    def __init__(self, factor: float = 1.0):
        self.factor = clamp_factor(factor)

    def sample(self, block: Block) -> float:
        return self.factor


class TableTrafficFactor(TrafficFactorSampler):
    def __init__(self, factors: dict[tuple[str, int], float], default: float = 1.0):
        self.factors, self.default = factors, default

    def sample(self, block: Block) -> float:
        return clamp_factor(self.factors.get(block.key, self.default))
