#!/usr/bin/env python3
"""
CLI для разбора сырого HTTP-запроса.

Запуск:
    python -m proxyparse.main request.txt
    printf 'GET http://example.com/ HTTP/1.1\\r\\n\\r\\n' | python -m proxyparse.main
    python -m proxyparse.main request.txt --set-header Connection=close --format raw
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from proxyparse.config import Settings
from proxyparse.errors import ProxyParseError
from proxyparse.logger import LOGGER_NAME, generate_trace_id, set_trace_id, setup_logger
from proxyparse.request import ParsedRequest, parse_request

logger = logging.getLogger(LOGGER_NAME)

REQUEST_FIELDS = ("method", "protocol", "host", "port", "path", "version")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Parse and re-serialize an HTTP/1.x request head",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="File with the raw request, '-' for stdin",
    )
    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["debug", "info", "warning", "error"],
        help="Logging level (overrides config)",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable parser trace output",
    )
    parser.add_argument(
        "--set-header",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a header before serializing (repeatable)",
    )
    parser.add_argument(
        "--remove-header",
        action="append",
        default=[],
        metavar="NAME",
        help="Remove a header before serializing (repeatable)",
    )
    parser.add_argument(
        "--format",
        choices=["fields", "raw"],
        default="fields",
        help="Print parsed fields or the re-serialized request",
    )
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Конфиг из файла или дефолтный, флаги CLI поверх."""
    if args.config and Path(args.config).exists():
        settings = Settings.from_yaml(args.config)
    else:
        settings = Settings.default()

    if args.log_level:
        settings.logging.level = args.log_level
    if args.trace:
        settings.logging.trace = True
    return settings


def read_input(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def split_assignment(raw: str) -> Tuple[str, str]:
    """Name=value -> ("Name", "value")"""
    name, sep, value = raw.partition("=")
    if not sep:
        raise ValueError(f"Expected NAME=VALUE, got {raw!r}")
    return name, value


def apply_mutations(request: ParsedRequest, args: argparse.Namespace) -> None:
    for name in args.remove_header:
        if not request.remove_header(name):
            logger.info(f"Header {name!r} not present, nothing to remove")
    for raw in args.set_header:
        name, value = split_assignment(raw)
        request.set_header(name, value)


def format_fields(request: ParsedRequest) -> str:
    lines = [f"{name}: {getattr(request, name) or '-'}" for name in REQUEST_FIELDS]
    lines.append(f"headers: {len(request.headers)}")
    for header in request.headers:
        lines.append(f"  {header.name}: {header.value}")
    lines.append(f"total_len: {request.total_len()}")
    return "\n".join(lines) + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args)
    setup_logger(settings.logging.level, trace=settings.logging.trace)

    set_trace_id(generate_trace_id())
    logger.debug(f"Config loaded: {settings}")

    try:
        request = parse_request(read_input(args.input), settings.parser)
        apply_mutations(request, args)
    except (ProxyParseError, ValueError, OSError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    if args.format == "raw":
        sys.stdout.write(request.unparse())
    else:
        sys.stdout.write(format_fields(request))
    return 0


if __name__ == "__main__":
    sys.exit(main())
