"""CLI エントリポイント: contract-artifacts <repo...>."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path

from contract_artifacts.config import CI_TOKEN_ENV_NAME, DEFAULT_DIR, load_settings
from contract_artifacts.fetcher import fetch_all
from contract_artifacts.reporter import configure_logging


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="contract-artifacts",
        description="Download contract build artifacts from storage, triggering a CI build if needed",
        epilog=f"Environment vars:\n  {CI_TOKEN_ENV_NAME}\t\tCI token to trigger building if needed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("repo", nargs="+", help="contracts repos to download artifacts for")
    p.add_argument("-b", "--branch", default=None, help="branch to download")
    p.add_argument("-c", "--commit", default=None, help="commit to download")
    p.add_argument(
        "-d",
        "--dir",
        type=Path,
        default=None,
        help=f"destination directory to put contracts artifacts into (default: {DEFAULT_DIR})",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="verbose output")
    p.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="maximum number of concurrent artifact downloads (default: unlimited)",
    )
    p.add_argument(
        "--poll-timeout",
        type=float,
        default=None,
        help="wall-clock limit in seconds for waiting on a triggered build",
    )
    p.add_argument("--config", type=Path, default=None, help="optional YAML settings file")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    configure_logging(args.verbose)

    settings = load_settings(
        args.config,
        dest_dir=args.dir,
        verbose=args.verbose or None,
        max_concurrency=args.jobs,
        poll_timeout=args.poll_timeout,
    )

    asyncio.run(fetch_all(args.repo, settings, branch_name=args.branch, commit_hash=args.commit))


if __name__ == "__main__":
    main()
