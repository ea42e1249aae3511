"""
Entry point for the finance calculator suite.

Usage:
    python main.py                    # launches the web app at localhost:5000
    python main.py --port 8080        # on another port
    python main.py --no-debug -v      # without the reloader, with debug logging
"""

import argparse
import logging


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Finance calculators: loans, growth, business ratios, investments and tax",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port to listen on (default: 5000)")
    parser.add_argument(
        "--no-debug",
        action="store_true",
        help="Disable the Flask debugger and auto-reloader",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every evaluation")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from app import run_web
    run_web(host=args.host, port=args.port, debug=not args.no_debug)


if __name__ == "__main__":
    main()
