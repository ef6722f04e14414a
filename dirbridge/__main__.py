"""
Command line entry point.

Usage:
    python -m dirbridge <method> [--args JSON] [--log-level LEVEL]

Prints the response as JSON. Exit status is 0 for success, 1 for an error
response, 2 for an unknown method or unparseable arguments.
"""

import argparse
import json
import sys

from dirbridge import Config
from dirbridge.DirectoryGate import dispatch, get_info
from dirbridge.DirectoryGate.models import MethodError, MethodNotImplemented
from dirbridge.shared.gate import GateLogger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirbridge",
        description="Call a DirectoryGate method and print the JSON response",
    )
    parser.add_argument("method", nargs="?", help="Method name, e.g. listDirectory")
    parser.add_argument(
        "--args",
        default="{}",
        help='Arguments as a JSON object, e.g. \'{"directoryPath": "/tmp"}\'',
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override DIRBRIDGE_LOG_LEVEL for this call",
    )
    parser.add_argument(
        "--describe",
        action="store_true",
        help="Print the method contract and exit",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Loads .env and applies the configured log level
    Config.get_manager()
    if args.log_level:
        GateLogger.set_level(args.log_level)

    if args.describe:
        print(json.dumps(get_info(), indent=2))
        return 0

    if not args.method:
        parser.print_usage(sys.stderr)
        return 2

    try:
        call_args = json.loads(args.args)
    except json.JSONDecodeError as e:
        print(f"Invalid --args JSON: {e}", file=sys.stderr)
        return 2

    response = dispatch(args.method, call_args)
    print(json.dumps(response.to_dict()))

    if isinstance(response, MethodNotImplemented):
        return 2
    if isinstance(response, MethodError):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
