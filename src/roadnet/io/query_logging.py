# io/query_logging.py
import json
import logging
import sys

from roadnet.domain.entities.geography import Intersection
from roadnet.sim.hooks import NoopHooks


def _default_json_logger(name="roadnet", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


def _xy(v) -> list[int] | None:
    if isinstance(v, Intersection):
        return [v.x, v.y]
    return None


class QueryLogging(NoopHooks):
    """
    Structured logs for map construction and path queries.
    """

    def __init__(
        self,
        map_name: str = "map",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.map_name, self.debug = map_name, debug
        self.log = logger or _default_json_logger(level=level)
        self.queries = 0

    def _emit(self, level: str, msg: str, **extra):
        payload = {"map": self.map_name}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # build lifecycle

    def build_start(self, *, source: str):
        self._emit("INFO", "build_start", source=source)

    def build_end(self, *, vertices: int, edges: int, wall_ms: float):
        self._emit("INFO", "build_end", vertices=vertices, edges=edges, wall_ms=round(wall_ms, 3))

    # queries

    def query_start(self, *, op: str, start, end=None):
        self.queries += 1
        if self.debug:
            self._emit("DEBUG", "query_start", op=op, start=_xy(start), end=_xy(end))

    def query_end(self, *, op: str, hops: int, found: bool, wall_ms: float):
        self._emit("INFO", op, hops=hops, found=found, wall_ms=round(wall_ms, 3))

    def error(self, *, op: str, exc: BaseException, **extra):
        self._emit("ERROR", "query_error", op=op, error=str(exc), **extra)
