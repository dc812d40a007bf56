# src/pkg_jwt/cli.py

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any, Sequence, TextIO

from .domain.exceptions import JWTDecodeError
from .domain.value_objects import ValidationOptions
from .integrations.common.decoder_factory import JWTDecoder, create_jwt_decoder
from .settings import options_from_env

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """
    Console logging on stderr for the package loggers: WARNING+ by default,
    DEBUG when verbose. Calling it again replaces the previous handler.
    """
    pkg_logger = logging.getLogger("pkg_jwt")
    pkg_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(levelname)-8s  %(message)s" if not verbose
            else "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-jwt",
        description="Decode a JWT and optionally validate its claims "
                    "(the signature is NOT verified).",
        epilog="Examples:\n"
               "  %(prog)s <token>\n"
               "  echo '<token>' | %(prog)s --stdin --validate --audience myapp\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "token",
        nargs="?",
        default=None,
        help="JWT string (prompts interactively if omitted).",
    )
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read the token from stdin.",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Run claim validation; exit code 1 if the token is invalid. "
             "Defaults come from JWT_* environment variables.",
    )
    parser.add_argument(
        "--issuer",
        help="Expected issuer (overrides JWT_EXPECTED_ISSUER).",
    )
    parser.add_argument(
        "--audience",
        "-A",
        action="append",
        help="Acceptable audience; repeat for several "
             "(overrides JWT_EXPECTED_AUDIENCE).",
    )
    parser.add_argument(
        "--clock-skew",
        type=int,
        help="Clock skew tolerance in seconds (overrides JWT_CLOCK_SKEW).",
    )
    parser.add_argument(
        "--no-exp",
        action="store_true",
        help="Skip the expiration check.",
    )
    parser.add_argument(
        "--no-nbf",
        action="store_true",
        help="Skip the not-before check.",
    )
    parser.add_argument(
        "--now",
        type=int,
        help="Validate as of this Unix timestamp instead of the current time.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging on stderr.",
    )

    return parser.parse_args(args=argv)


def _read_token(args: argparse.Namespace, stdin: TextIO) -> str:
    if args.stdin:
        return stdin.read().strip()
    if args.token:
        return args.token.strip()
    try:
        return input("JWT: ").strip()
    except (EOFError, KeyboardInterrupt):
        return ""


def _build_options(args: argparse.Namespace) -> ValidationOptions:
    options = options_from_env()
    overrides: dict[str, Any] = {}

    if args.issuer is not None:
        overrides["expected_issuer"] = args.issuer
    if args.audience:
        overrides["expected_audience"] = args.audience
    if args.clock_skew is not None:
        overrides["clock_skew"] = args.clock_skew
    if args.no_exp:
        overrides["validate_exp"] = False
    if args.no_nbf:
        overrides["validate_nbf"] = False
    if args.now is not None:
        overrides["current_time"] = args.now

    return replace(options, **overrides)


def _run(args: argparse.Namespace, decoder: JWTDecoder, token: str) -> tuple[dict[str, Any], bool]:
    if not args.validate:
        decoded = decoder.decode(token)
        return {"ok": True, **decoded.to_dict()}, True

    result = decoder.decode_and_validate(token, _build_options(args))
    return {"ok": True, **result.jwt.to_dict(), "validation": result.to_dict()}, result.is_valid


def main(
        argv: Sequence[str] | None = None,
        *,
        decoder: JWTDecoder | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
) -> int:
    args = _parse_args(argv)
    setup_logging(args.verbose)

    out = stdout or sys.stdout
    decoder = decoder or create_jwt_decoder()
    token = _read_token(args, stdin or sys.stdin)

    try:
        summary, ok = _run(args, decoder, token)
    except (JWTDecodeError, RuntimeError) as exc:
        logger.debug("pkg-jwt failed", exc_info=True)
        summary, ok = {"ok": False, "error": str(exc)}, False

    json.dump(summary, out, indent=2)
    out.write("\n")
    return 0 if ok else 1


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
