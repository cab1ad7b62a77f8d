from __future__ import annotations

import argparse


def add_instance_args(parser: argparse.ArgumentParser) -> None:
    """Register the endpoint/credential flags for instance A and B.

    Each flag falls back to an environment variable (also read from ``.env``)
    and then to the YAML config file; see :mod:`pipeline.wiring`.
    """

    parser.add_argument("--url-a", dest="url_a", help="API URL for Dependency-Track instance A (env: DTRACK_URL_A)")
    parser.add_argument("--apikey-a", dest="apikey_a", help="API key for Dependency-Track instance A (env: DTRACK_APIKEY_A)")
    parser.add_argument("--url-b", dest="url_b", help="API URL for Dependency-Track instance B (env: DTRACK_URL_B)")
    parser.add_argument("--apikey-b", dest="apikey_b", help="API key for Dependency-Track instance B (env: DTRACK_APIKEY_B)")


def add_run_args(parser: argparse.ArgumentParser) -> None:
    """Register execution and output flags."""

    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum comparison concurrency (default: 5)",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Path to write output files to (default: current directory)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML config file (instance_a/instance_b/concurrency/out/timeout/page_size)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--page-size",
        dest="page_size",
        type=int,
        default=None,
        help="Page size for paginated API calls (default: 100)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any project differs or could not be compared",
    )
    parser.add_argument(
        "--no-summary",
        dest="no_summary",
        action="store_true",
        help="Do not write summary.json to the output directory",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
