"""CLI entrypoint for teammap_geo."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from teammap_geo.logging_config import setup_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="teammap-geo")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve")

    resolve_parser = sub.add_parser("resolve")
    resolve_parser.add_argument("locations", nargs="+")

    map_parser = sub.add_parser("map")
    map_parser.add_argument("file", help="JSON array of people, or {\"employees\": [...]}")
    map_parser.add_argument("--name", default="")
    map_parser.add_argument("--job-title", default="")
    map_parser.add_argument("--department", default="")
    map_parser.add_argument("--division", default="")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "serve":
        _serve()
        return 0
    if args.command == "resolve":
        return _resolve(args.locations)
    if args.command == "map":
        return _map(args)
    return 2


def _serve() -> None:
    import uvicorn

    from teammap_geo.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "teammap_geo.api:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=(settings.env == "development"),
        log_level=settings.log_level.lower(),
    )


def _default_resolver():
    from teammap_geo.geocode import BatchResolver, LocationResolver

    return BatchResolver(LocationResolver.default())


def _resolve(locations: list[str]) -> int:
    resolver = _default_resolver()
    out = {}
    for location in locations:
        result = resolver.resolve_one(location)
        out[location] = result.model_dump() if result is not None else None
    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0


def _map(args: argparse.Namespace) -> int:
    from teammap_geo.filters import PersonFilter
    from teammap_geo.pipeline import build_location_map, parse_people

    try:
        doc = json.loads(Path(args.file).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Cannot read people from {args.file}: {e}", file=sys.stderr)
        return 1

    rows = doc.get("employees", []) if isinstance(doc, dict) else doc
    if not isinstance(rows, list):
        print(f"{args.file}: expected a JSON array of people", file=sys.stderr)
        return 1

    person_filter = PersonFilter(
        name=args.name,
        job_title=args.job_title,
        department=args.department,
        division=args.division,
    )
    result = build_location_map(parse_people(rows), _default_resolver(), person_filter=person_filter)
    print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
    print(result.summary.label(), file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
