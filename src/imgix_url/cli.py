"""Command-line entry point for building imgix URLs.

Usage::

    imgix-url photos/cat.jpg --host assets.imgix.net -p w=400 -p fit=crop
    imgix-url photos/cat.jpg -p w=400 --sign-key SECRET --srcset

``--host`` and ``--sign-key`` fall back to ``IMGIX_DEFAULT_HOST`` and
``IMGIX_SIGNING_KEY``.  The rendered URL (or srcset) is printed to stdout.
Any builder or parameter error is printed to stderr and the command exits
with status 1; malformed arguments exit with status 2.
"""

from __future__ import annotations

import argparse
import logging
import sys

from imgix_url import __version__
from imgix_url.core.builder import UrlBuilder
from imgix_url.core.config import ImgixConfig, config
from imgix_url.core.errors import ImgixError
from imgix_url.core.srcset import SrcsetOptions, build_srcset

logger = logging.getLogger(__name__)


def _parse_param(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imgix-url",
        description="Build (and optionally sign) an imgix image URL.",
    )
    parser.add_argument("path", help="Image path relative to the source host")
    parser.add_argument(
        "--host",
        help="Source host, e.g. assets.imgix.net (default: IMGIX_DEFAULT_HOST)",
    )
    parser.add_argument(
        "-p",
        "--param",
        dest="params",
        action="append",
        type=_parse_param,
        default=[],
        metavar="KEY=VALUE",
        help="Transformation parameter; repeat for several (later values win)",
    )
    parser.add_argument(
        "--sign-key",
        help="Secure URL token used to sign the URL (default: IMGIX_SIGNING_KEY)",
    )
    parser.add_argument(
        "--ixlib",
        action="store_true",
        help="Tag the URL with the ixlib diagnostic parameter",
    )
    parser.add_argument(
        "--srcset",
        action="store_true",
        help="Print a srcset attribute value instead of a single URL",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(args: argparse.Namespace, settings: ImgixConfig) -> str:
    """Build the requested output from parsed arguments.

    Raises:
        ImgixError: If the host, path or any parameter is rejected.
    """
    builder = UrlBuilder(args.host or settings.default_host or "", args.path)

    signing_key = args.sign_key or settings.signing_key
    if signing_key:
        builder.with_signing_key(signing_key)
    if args.ixlib or settings.include_library_param:
        builder.with_library_param()

    for key, value in args.params:
        builder.with_param(key, value)

    if args.srcset:
        options = SrcsetOptions(
            min_width=settings.srcset_min_width,
            max_width=settings.srcset_max_width,
            tolerance=settings.srcset_width_tolerance,
        )
        return build_srcset(builder, options)
    return builder.render()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        output = run(args, config)
    except ImgixError as e:
        logger.debug(f"URL build failed: {e!r}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
