"""
Command line access to the neophyte host

    neophyte font-height 14.5
    neophyte font-width 7
    neophyte get-ten
"""

import argparse
import logging
import math
import sys
from typing import List, Optional

from neophyte import connect
from neophyte.config import ChannelConfig
from neophyte.rpc.errors import ChannelError, ProtocolError, RemoteError, RequestTimeoutError

logger = logging.getLogger(__name__)


def _finite_float(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"{value} is not a finite number")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="neophyte", description="Drive a neophyte host over RPC")
    parser.add_argument("--address", help="Host endpoint address (default: $NEOPHYTE_ADDRESS)")
    parser.add_argument("--channel", type=int, help="Channel id (default: $NEOPHYTE_CHANNEL or 1)")
    parser.add_argument("--timeout-ms", type=int, help="Request timeout in milliseconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    height = commands.add_parser("font-height", help="Set the font height")
    height.add_argument("value", type=_finite_float)
    width = commands.add_parser("font-width", help="Set the font width")
    width.add_argument("value", type=_finite_float)
    commands.add_parser("get-ten", help="Ask the host for ten")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = ChannelConfig.from_env()
    except ValueError as e:
        logger.error(f"Invalid environment configuration: {e}")
        return 1

    if args.address:
        config.address = args.address
    if args.channel is not None:
        config.channel_id = args.channel
    if args.timeout_ms is not None:
        config.timeout_ms = args.timeout_ms

    try:
        client = connect(config)
    except ChannelError as e:
        logger.error(f"Cannot open channel to {config.address}: {e}")
        return 1

    try:
        if args.command == "font-height":
            client.set_font_height(args.value)
        elif args.command == "font-width":
            client.set_font_width(args.value)
        else:
            print(client.get_ten())
    except (ChannelError, RequestTimeoutError, ProtocolError, RemoteError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        client.channel.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
