#!/usr/bin/env python3
"""
Run the Integrity Configuration API.

Usage:
    python run_api.py
    python run_api.py --port 8080
    python run_api.py --seed config/packages.yaml --no-debug
"""

import argparse
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Run Integrity Configuration API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=5060, help="Port to run on")
    parser.add_argument("--no-debug", action="store_true", help="Disable debug mode")
    parser.add_argument("--seed", type=Path, help="YAML file of packages to preload")
    args = parser.parse_args()

    if args.seed and not args.seed.exists():
        print(f"Error: seed file not found: {args.seed}")
        sys.exit(1)

    try:
        from integrity_config.api import run_api

        run_api(
            host=args.host,
            port=args.port,
            debug=not args.no_debug,
            seed_path=args.seed,
        )
    except ImportError as e:
        print(f"Error: {e}")
        print("\nMake sure the package is installed:")
        print("  pip install -e .")
        sys.exit(1)


if __name__ == "__main__":
    main()
