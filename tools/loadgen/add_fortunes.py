#!/usr/bin/env python3
"""Concurrent fortune load generator.

Posts many distinct fortunes at once, then reads the full list back and
checks that every created fortune got its own id and is listed.

Usage:
    # 200 fortunes, 50 in flight at a time
    python -m tools.loadgen.add_fortunes --server http://localhost:9000 --count 200 --concurrency 50
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
import uuid
from dataclasses import dataclass, field

import httpx


@dataclass
class LoadReport:
    created: list[dict] = field(default_factory=list)
    errors: int = 0
    listed_ids: list[int] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def created_ids(self) -> list[int]:
        return [f["id"] for f in self.created]

    def problems(self) -> list[str]:
        """Return a description of every consistency problem found."""
        problems = []
        ids = self.created_ids
        if len(set(ids)) != len(ids):
            problems.append("duplicate ids were handed out")
        if len(set(self.listed_ids)) != len(self.listed_ids):
            problems.append("GET /fortunes lists an id twice")
        missing = set(ids) - set(self.listed_ids)
        if missing:
            problems.append(f"{len(missing)} created fortunes missing from list")
        if self.errors:
            problems.append(f"{self.errors} requests failed")
        return problems


def make_text(run_id: str, index: int) -> str:
    return f"Load test fortune {index} of run {run_id}."


async def post_fortune(
    client: httpx.AsyncClient,
    base_url: str,
    text: str,
    semaphore: asyncio.Semaphore,
    report: LoadReport,
) -> None:
    async with semaphore:
        try:
            resp = await client.post(f"{base_url}/fortunes", json={"text": text})
        except httpx.RequestError:
            report.errors += 1
            return
    if resp.status_code == 201:
        report.created.append(resp.json())
    else:
        report.errors += 1


async def run_load(
    client: httpx.AsyncClient,
    base_url: str,
    count: int,
    concurrency: int = 20,
) -> LoadReport:
    """Create ``count`` fortunes concurrently and collect what the server reports."""
    report = LoadReport()
    run_id = uuid.uuid4().hex[:8]
    semaphore = asyncio.Semaphore(max(concurrency, 1))

    start = time.monotonic()
    await asyncio.gather(*(
        post_fortune(client, base_url, make_text(run_id, i), semaphore, report)
        for i in range(count)
    ))
    report.elapsed_seconds = time.monotonic() - start

    resp = await client.get(f"{base_url}/fortunes")
    resp.raise_for_status()
    report.listed_ids = [f["id"] for f in resp.json()]
    return report


async def run_cli(args: argparse.Namespace) -> int:
    print(f"Posting {args.count} fortunes to {args.server} "
          f"({args.concurrency} concurrent)")

    async with httpx.AsyncClient(timeout=10.0) as client:
        report = await run_load(client, args.server, args.count, args.concurrency)

    ids = report.created_ids
    print(f"\nDone in {report.elapsed_seconds:.1f}s")
    print(f"  Created: {len(ids)}")
    print(f"  Errors: {report.errors}")
    if ids:
        print(f"  Id range: {min(ids)}..{max(ids)}")
        print(f"  Throughput: {len(ids) / max(report.elapsed_seconds, 1e-9):.1f} adds/sec")
    print(f"  Listed: {len(report.listed_ids)}")

    problems = report.problems()
    for problem in problems:
        print(f"  PROBLEM: {problem}")
    return 1 if problems else 0


def main():
    parser = argparse.ArgumentParser(description="Fortune server concurrent add load generator")
    parser.add_argument("--server", default="http://localhost:9000", help="Server URL")
    parser.add_argument("--count", type=int, default=100, help="Number of fortunes to create")
    parser.add_argument("--concurrency", type=int, default=20, help="Requests in flight at once")

    args = parser.parse_args()
    sys.exit(asyncio.run(run_cli(args)))


if __name__ == "__main__":
    main()
