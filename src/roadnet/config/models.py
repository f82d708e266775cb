import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- TRAFFIC FACTORS ---------------------


class TrafficGaussianModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["gaussian"] = "gaussian"
    mean: float = 1.0
    sd: float = 0.2
    lo: float = 0.5
    hi: float = 1.5

    @field_validator("sd")
    @classmethod
    def _positive_sd(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("sd must be > 0")
        return v

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must not exceed hi ({self.hi})")
        if self.lo < 0.5 or self.hi > 1.5:
            raise ValueError("traffic factor bounds must stay within [0.5, 1.5]")
        return self


class TrafficConstantModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["constant"] = "constant"
    factor: float = 1.0

    @field_validator("factor")
    def _in_range(cls, v: float, info: ValidationInfo) -> float:
        if not 0.5 <= v <= 1.5:
            raise ValueError(f"{info.field_name} must be within [0.5, 1.5]")
        return v


class TrafficTableModel(BaseModel):
    """Fixed factors per block, keyed "street:block_number"."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["table"] = "table"
    factors: dict[str, float] = Field(default_factory=dict)
    default: float = 1.0

    @field_validator("factors")
    @classmethod
    def _keys(cls, v: dict[str, float]) -> dict[str, float]:
        for k in v:
            street, sep, number = k.rpartition(":")
            if not sep or not street or not number.lstrip("-").isdigit():
                raise ValueError(f"table key must look like 'street:block_number', got {k!r}")
        return v

    def keyed(self) -> dict[tuple[str, int], float]:
        out = {}
        for k, f in self.factors.items():
            street, _, number = k.rpartition(":")
            out[(street, int(number))] = f
        return out


TrafficUnion = Annotated[
    TrafficGaussianModel | TrafficConstantModel | TrafficTableModel,
    Field(discriminator="kind"),
]

# ----------------- MAP SOURCES ---------------------


class RawBlockModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    street_name: str
    block_number: int
    road_width: float = 0.0
    points: list[tuple[int, int]]

    @field_validator("points")
    @classmethod
    def _two_points(cls, v: list[tuple[int, int]]) -> list[tuple[int, int]]:
        if len(v) < 2:
            raise ValueError("a block needs at least 2 points")
        return v


class SourceFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["file"] = "file"
    path: str
    encoding: str = "utf-8"

    @field_validator("path")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class SourceInlineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["inline"] = "inline"
    blocks: list[RawBlockModel] = Field(default_factory=list)


SourceUnion = Annotated[SourceFileModel | SourceInlineModel, Field(discriminator="kind")]


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    seed: int = 0
    log: LogModel = LogModel()
    traffic: TrafficUnion = Field(default_factory=TrafficGaussianModel)
    source: SourceUnion
