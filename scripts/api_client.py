"""Lightweight REST client for the wagerseg API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the wagerseg REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--from", dest="time_from", type=int, default=None, help="Window start, epoch seconds")
    parser.add_argument("--to", dest="time_to", type=int, default=None, help="Window end, epoch seconds")
    parser.add_argument("--high", type=int, default=None, help="High roller minimum percentile")
    parser.add_argument("--low", type=int, default=None, help="Low roller maximum percentile")
    parser.add_argument("--page", type=int, default=1, help="Page to fetch")
    parser.add_argument("--upload", type=Path, help="Classify an aggregates CSV instead of querying the store")
    parser.add_argument("--export-path", type=Path, help="Download the full segment CSV to this path")
    args = parser.parse_args()

    params: dict[str, int] = {"page": args.page}
    if args.time_from is not None:
        params["timeFrom"] = args.time_from
    if args.time_to is not None:
        params["timeTo"] = args.time_to
    if args.high is not None:
        params["highRollerMinPercentile"] = args.high
    if args.low is not None:
        params["lowRollerMaxPercentile"] = args.low

    with httpx.Client(base_url=args.base_url) as client:
        if args.upload:
            data = {key: str(value) for key, value in {
                "high_roller_min_percentile": args.high,
                "low_roller_max_percentile": args.low,
                "page": args.page,
            }.items() if value is not None}
            files = {"aggregates": (args.upload.name, args.upload.read_bytes(), "text/csv")}
            resp = client.post("/segments/upload", files=files, data=data)
        else:
            resp = client.get("/segments", params=params)
        if resp.status_code == 502:
            raise SystemExit(f"aggregate source unavailable: {resp.json().get('detail')}")
        resp.raise_for_status()
        payload = resp.json()
        print("Segment counts:", json.dumps(payload["segment_counts"], indent=2))
        print(f"Page {payload['current_page']}/{payload['total_pages']}")
        print(json.dumps(payload["players"], indent=2))

        if args.export_path:
            params.pop("page", None)
            resp = client.get("/segments/export.csv", params=params)
            resp.raise_for_status()
            args.export_path.write_text(resp.text)
            print(f"CSV export saved to {args.export_path}")


if __name__ == "__main__":
    main()
