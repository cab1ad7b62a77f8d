"""cli.main

Command-line entrypoint: compare the findings of every project in
Dependency-Track instance A with the same project in instance B.

Usage:
  python dtrack_compare_cli.py --url-a https://dt-a.example --apikey-a KEY_A \\
      --url-b https://dt-b.example --apikey-b KEY_B --out reports/
  python dtrack_compare_cli.py --config compare.yaml --concurrency 10 --strict

Exit status:
  0  finished (differences alone do not fail the run unless --strict)
  1  fatal setup error, or --strict and a project differed or failed
  2  invalid arguments or configuration values
  130 interrupted
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

import requests

from cli.args.base import add_instance_args, add_run_args
from pipeline.orchestrator import CompareRequest, run_compare
from pipeline.wiring import build_clients, configure_logging, load_config, load_env
from tools.dtrack import DTrackError

logger = logging.getLogger("dtrack_compare")

CONFIG_KEYS = ("url_a", "apikey_a", "url_b", "apikey_b", "concurrency", "out", "timeout", "page_size")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare vulnerability findings between two Dependency-Track instances."
    )
    add_instance_args(parser)
    add_run_args(parser)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    load_env()
    try:
        cfg = load_config(
            {k: getattr(args, k) for k in CONFIG_KEYS},
            config_path=Path(args.config) if args.config else None,
        )
    except (OSError, ValueError) as e:
        parser.error(str(e))

    try:
        source, target = build_clients(cfg)
    except DTrackError as e:
        logger.critical("failed to initialize clients: %s", e)
        return 1

    cancel = threading.Event()
    req = CompareRequest(
        out_dir=cfg.out,
        concurrency=cfg.concurrency,
        write_summary=not args.no_summary,
        file_mode=cfg.file_mode,
    )
    try:
        result = run_compare(req, source=source, target=target, cancel=cancel)
    except (DTrackError, requests.RequestException, TypeError, ValueError) as e:
        logger.critical("failed to collect projects from %s: %s", source.base_url, e)
        return 1
    except KeyboardInterrupt:
        logger.warning("interrupted")
        return 130
    finally:
        source.close()
        target.close()

    print(f"Summary: {result.describe()}")
    if result.summary_path:
        print(f"Summary file: {result.summary_path}")

    if result.cancelled:
        return 130
    if args.strict and not result.clean:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
