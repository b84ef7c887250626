#!/usr/bin/env python3
"""
main.py – CLI entry point for the California Wildfire Risk Map.

Usage:
    python main.py --data public/cali-county-bounds.json --out output/map.html

The pipeline:
    1. Open a map session (viewport, tiles, info + legend panels)
    2. Load the county feature collection (failure leaves an empty map)
    3. Render the interactive Folium map to HTML
    4. Print a short summary of the loaded counties
"""

import argparse
import asyncio
import logging
from collections import Counter

import config
from firewatch.color_scale import color_for
from firewatch.session import MapSession
from firewatch.visualization import save_risk_map


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Interactive choropleth of California county wildfire risk",
    )
    p.add_argument("--data", default=config.DATA_URL, help="GeoJSON file path or URL")
    p.add_argument("--out", default=None, help="Output HTML path")
    p.add_argument("--query-url", default=config.QUERY_URL, help="Endpoint receiving clicked coordinates")
    p.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level")
    return p.parse_args(argv)


async def run(args) -> dict:
    async with MapSession(data_source=args.data) as session:
        map_path = save_risk_map(session, out_path=args.out, query_url=args.query_url)
        tiers = Counter(color_for(f.riskfactor) for f in session.features)
        return {
            "map_path": map_path,
            "counties": len(session.features),
            "missing_risk": sum(1 for f in session.features if f.riskfactor is None),
            "tiers": dict(tiers),
            "data_error": str(session.data_error) if session.data_error else None,
        }


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(name)s] %(message)s")

    print("=" * 60)
    print("  CALIFORNIA WILDFIRE RISK MAP")
    print("=" * 60)
    print(f"  Data:  {args.data}")
    print("=" * 60)

    summary = asyncio.run(run(args))

    print()
    if summary["data_error"]:
        print(f"  ⚠  County data unavailable: {summary['data_error']}")
    print(f"  Counties loaded:      {summary['counties']}")
    print(f"  Missing risk factor:  {summary['missing_risk']}")
    for colour, count in sorted(summary["tiers"].items(), key=lambda kv: -kv[1]):
        print(f"    {colour}: {count}")
    print(f"  🗺️   Interactive map → {summary['map_path']}")
    print("=" * 60)
    return summary


if __name__ == "__main__":
    main()
