#!/usr/bin/env python3
"""gitlab-review-mcp MCP Server entry point.

Run:
  python -m gitlab_review_mcp                # start server (stdio)
  python -m gitlab_review_mcp --test         # run lightweight self-tests then exit
"""

import argparse
import asyncio
import sys

from gitlab_review_mcp.config import load_config_from_env
from gitlab_review_mcp.errors import ConfigurationError
from gitlab_review_mcp.server import run_server, test_server


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(prog="gitlab_review_mcp", add_help=True)
    parser.add_argument(
        "--test",
        action="store_true",
        help="Run built-in server self tests (tool listing) then exit.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """CLI dispatcher for the MCP server."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        if args.test:
            asyncio.run(test_server())
            return
        config = load_config_from_env()
        asyncio.run(run_server(config))
    except ConfigurationError as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nServer stopped by user", file=sys.stderr)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        print(f"Fatal error in main(): {exc}", file=sys.stderr)
        raise


if __name__ == "__main__":
    main()
