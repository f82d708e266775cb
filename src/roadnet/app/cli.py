# roadnet/app/cli.py
import argparse
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from roadnet.app.build import build
from roadnet.domain.entities.geography import Intersection
from roadnet.domain.mechanics.mechanics_core import RoadMap
from roadnet.domain.network import VertexNotFoundError
from roadnet.io.map_loader import MapFormatError


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="roadnet", description="Route queries over a street map file.")
    p.add_argument("map_file", help="map file (street / block / point listing)")
    p.add_argument("--seed", type=int, default=0, help="seed for traffic factors")
    p.add_argument("--traffic", choices=["gaussian", "constant"], default="gaussian")
    p.add_argument("--start", nargs=2, type=int, metavar=("X", "Y"))
    p.add_argument("--end", nargs=2, type=int, metavar=("X", "Y"))
    p.add_argument(
        "--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    return p


def _fmt_path(path: list[Intersection]) -> str:
    if not path:
        return "(no path)"
    return " -> ".join(f"({v.x}, {v.y})" for v in path)


def _report(out, label: str, road_map: RoadMap, path: list[Intersection]) -> None:
    info = road_map.path_information(path)
    print(f"{label}: {_fmt_path(path)}", file=out)
    print(
        f"  length={info.total_length:.3f} avg_factor={info.average_traffic_factor:.3f} "
        f"traffic={info.total_traffic:.3f}",
        file=out,
    )


def main(argv: Sequence[str] | None = None, out=None) -> int:
    out = out or sys.stdout
    args = _parser().parse_args(argv)
    cfg = {
        "name": args.map_file,
        "seed": args.seed,
        "log": {"level": args.log_level},
        "traffic": {"kind": args.traffic},
        "source": {"kind": "file", "path": args.map_file},
    }
    try:
        app = build(cfg)
        road_map = app.road_map
        print(
            f"{road_map.network.vertex_count} intersections, {road_map.network.edge_count} directed blocks",
            file=out,
        )
        if args.start:
            start = road_map.intersection_at(*args.start)
            print(f"reachable from ({start.x}, {start.y}): {len(road_map.reachable(start))}", file=out)
            if args.end:
                end = road_map.intersection_at(*args.end)
                _report(out, "fewest intersections", road_map, road_map.minimize_intersections(start, end))
                _report(out, "fastest", road_map, road_map.fastest_path(start, end))
    except (OSError, MapFormatError, VertexNotFoundError, ValidationError) as exc:
        print(f"roadnet: error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
