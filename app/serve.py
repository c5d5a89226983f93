"""CLI entrypoint for running the stats server."""

from __future__ import annotations

import argparse
import logging

import uvicorn

DEFAULT_PORT = 3000


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Serve the top performers API and dashboard.",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Interface to bind (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to listen on (default: {DEFAULT_PORT}).",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    args = _parse_args()
    logging.info("Server running at http://%s:%s", args.host, args.port)
    uvicorn.run("app.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
