#!/usr/bin/env python3
"""Watch the tourism sheet and print the town list whenever it changes.

Usage
-----
::

    python scripts/watch_towns.py                # poll the default sheet every 5s
    python scripts/watch_towns.py --once --json  # one manual cycle, JSON output

Options::

    --url URL            CSV export URL (default: TOWNSYNC_SOURCE_URL or the built-in sheet)
    --interval SECONDS   Poll interval
    --once               Run a single manual cycle and exit
    --json               Output as machine-readable JSON
    --language es|en     Language of the advisory column shown
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from townsync import Language, SyncConfig, SyncController, SyncResult  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _snapshot_payload(controller: SyncController, language: Language) -> list[dict[str, Any]]:
    towns: list[dict[str, Any]] = []
    for name in sorted(controller.snapshot):
        info = controller.town_info(name, language)
        record = controller.snapshot[name]
        towns.append(
            {
                "name": record.name,
                "latitude": record.latitude,
                "longitude": record.longitude,
                "distance": info.distance_label,
                "advisory": info.security_advisory,
                "route_url": info.route_url if info.has_route_url else None,
                "tourism_url": info.tourism_url if info.has_tourism_url else None,
                "infographic": info.infographic,
            }
        )
    return towns


def _format_towns(towns: list[dict[str, Any]]) -> str:
    out = [_section(f"TOWNS ({len(towns)}) @ {datetime.now(UTC).isoformat()}")]
    for town in towns:
        out.append(f"  {town['name']:<28} [{town['latitude']:.5f}, {town['longitude']:.5f}]  {town['distance']}")
        if town["route_url"]:
            out.append(f"    route   : {town['route_url']}")
        if town["tourism_url"]:
            out.append(f"    tourism : {town['tourism_url']}")
    return "\n".join(out)


def _print_result(result: SyncResult | None, json_mode: bool) -> None:
    if result is None or json_mode:
        return
    print(f"  status={result.status} towns={result.record_count} skipped={result.skipped}", file=sys.stderr)


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(description="Watch the tourism town sheet")
    parser.add_argument("--url", help="CSV export URL")
    parser.add_argument("--interval", type=float, help="Poll interval in seconds")
    parser.add_argument("--once", action="store_true", help="Run one manual cycle and exit")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output as JSON")
    parser.add_argument("--language", choices=[lang.value for lang in Language], default=Language.ES.value)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.url:
        overrides["source_url"] = args.url
    if args.interval is not None:
        overrides["poll_interval"] = args.interval
    config = SyncConfig.from_env(**overrides)
    language = Language(args.language)

    def on_status(icon: str, text: str) -> None:
        if not args.json_mode:
            print(f"{icon} {text}", file=sys.stderr)

    async with SyncController(config, on_status=on_status) as controller:

        def emit() -> None:
            towns = _snapshot_payload(controller, language)
            if args.json_mode:
                print(json.dumps({"towns": towns}, ensure_ascii=False))
            else:
                print(_format_towns(towns))

        if args.once:
            result = await controller.refresh()
            _print_result(result, args.json_mode)
            emit()
            if result is not None and result.error:
                sys.exit(1)
            return

        controller.add_listener(emit)
        await controller.start()
        try:
            await asyncio.Event().wait()
        finally:
            await controller.stop()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
