"""Command line entry point.

Sends one API call and prints the parsed response as JSON.

Examples
--------
.. code-block:: bash

    # List domains
    python -m mailgun_request GET /domains -d limit=5

    # Send a message with an attachment
    python -m mailgun_request POST /example.com/messages \\
        -d from=me@example.com -d to=you@example.com -d subject=Hi \\
        -d text=Hello -a ./report.pdf
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from .config.settings import Settings
from .exceptions import MailgunError
from .utils.http import MailgunClient
from .utils.security import setup_secure_logging

logger = logging.getLogger(__name__)


def _parse_fields(pairs: Sequence[str]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"expected key=value, got {pair!r}")
        if key in fields:
            existing = fields[key]
            fields[key] = (existing if isinstance(existing, list) else [existing]) + [value]
        else:
            fields[key] = value
    return fields


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailgun_request", description="Send a single Mailgun API request"
    )
    parser.add_argument(
        "method", choices=["GET", "DELETE", "POST", "PUT", "PATCH"], type=str.upper
    )
    parser.add_argument("resource", help="Resource path, e.g. /example.com/messages")
    parser.add_argument(
        "-d",
        "--data",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Request field; repeat a key to send several values",
    )
    parser.add_argument(
        "-a",
        "--attachment",
        action="append",
        default=[],
        metavar="PATH",
        help="File to attach",
    )
    parser.add_argument(
        "-i",
        "--inline",
        action="append",
        default=[],
        metavar="PATH",
        help="File to attach inline",
    )
    return parser


async def _run(args: argparse.Namespace, settings: Settings) -> Any:
    fields = _parse_fields(args.data)
    if args.attachment:
        fields["attachment"] = list(args.attachment)
    if args.inline:
        fields["inline"] = list(args.inline)
    async with MailgunClient.from_settings(settings) as client:
        return await client.request(args.method, args.resource, fields)


def main(argv: Optional[List[str]] = None) -> int:
    """Run one request from the command line.

    :param argv: Arguments, ``sys.argv[1:]`` when omitted
    :return: Process exit code
    :rtype: int
    """
    settings = Settings()
    setup_secure_logging(level=settings.log_level)

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        body = asyncio.run(_run(args, settings))
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except MailgunError as exc:
        logger.error("Request failed: %s", exc.message)
        print(exc.to_json(), file=sys.stderr)
        return 1
    print(json.dumps(body, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
