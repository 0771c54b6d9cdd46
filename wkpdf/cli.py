#!/usr/bin/env python3
import argparse
import json
import logging
import sys

from .config import get_settings
from .convert import ENGINES, from_html_string, from_url
from .errors import HtmlToPdfError
from .parse_pdf import extract_text, page_count
from .provision import tool_info

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="wkpdf", description="Convert HTML or a URL to PDF with wkhtmltopdf.")
    parser.add_argument("source", nargs="?", help="URL, HTML file path, or '-' to read HTML from stdin")
    parser.add_argument("output", nargs="?", help="Path of the PDF to write")
    parser.add_argument("--width", type=int, default=210, help="Page width in mm (default: 210)")
    parser.add_argument("--height", type=int, default=297, help="Page height in mm (default: 297)")
    parser.add_argument("--quality", type=int, default=100)
    parser.add_argument("--dpi", type=int, default=100)
    parser.add_argument("--margin-left", type=int, default=0)
    parser.add_argument("--margin-top", type=int, default=0)
    parser.add_argument("--margin-right", type=int, default=0)
    parser.add_argument("--margin-bottom", type=int, default=0)
    parser.add_argument("--encoding", default="UTF-8")
    parser.add_argument("--engine", choices=ENGINES, default="wkhtmltopdf")
    parser.add_argument("--verify", action="store_true", help="Fail when the PDF contains no extractable text")
    parser.add_argument("--info", action="store_true", help="Print renderer diagnostics as JSON and exit")
    return parser


def convert(args):
    options = dict(
        quality=args.quality,
        dpi=args.dpi,
        margin_left=args.margin_left,
        margin_top=args.margin_top,
        margin_right=args.margin_right,
        margin_bottom=args.margin_bottom,
        encoding=args.encoding,
        engine=args.engine,
    )
    if args.source == "-":
        return from_html_string(sys.stdin.read(), args.width, args.height, **options)
    return from_url(args.source, args.width, args.height, **options)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.info:
        print(json.dumps(tool_info(), indent=2))
        return 0
    if not args.source or not args.output:
        parser.print_usage(sys.stderr)
        return 2

    try:
        pdf = convert(args)
        out = {"ok": True, "output": args.output, "size": len(pdf)}
        if args.verify:
            text = extract_text(pdf)
            if not text.strip():
                raise HtmlToPdfError("Rendered PDF contains no extractable text")
            out["pages"] = page_count(pdf)
            out["characters"] = len(text)
        with open(args.output, "wb") as f:
            f.write(pdf)
    except (HtmlToPdfError, ValueError, OSError) as e:
        logger.error("Failed to generate PDF: %s", e)
        print(json.dumps({"ok": False, "error": str(e)}))
        return 1

    logger.info("Successfully generated PDF at %s", args.output)
    # Only print JSON to stdout, everything else to stderr
    print(json.dumps(out, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
