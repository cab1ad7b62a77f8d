#!/usr/bin/env python3
"""
Thin script wrapper around :mod:`cli.main`.

Usage:
  python dtrack_compare_cli.py --url-a URL --apikey-a KEY --url-b URL --apikey-b KEY --out reports/
"""

from __future__ import annotations

from cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())
