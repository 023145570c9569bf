#!/usr/bin/env python3
"""
Markup Engine - Main Entry Point

Renders an HTML or Markdown file, optionally narrowed to a selection.
"""

import argparse
import sys
from typing import List, Optional

from markup_engine import __version__
from markup_engine.documents import HTMLDocument, MarkdownDocument
from markup_engine.exceptions import MarkupEngineError
from markup_engine.parser.html_parser import configure_parser
from markup_engine.rendering.options import WriterOptions
from markup_engine.utils.config import Config
from markup_engine.utils.logging import setup_logging, log_exception


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Markup Engine - render HTML and Markdown documents")

    parser.add_argument("file", help="HTML or Markdown file to render")
    parser.add_argument("--markdown", action="store_true", help="Treat the input as Markdown (default for .md files)")
    parser.add_argument("--select", metavar="SELECTOR", help="Only render the elements matching SELECTOR")
    parser.add_argument("--safe", action="store_true", help="Strip dangerous tags, keep allowed tags only, encode entities")
    parser.add_argument("--no-reformat", action="store_true", help="Do not pretty-print the output")
    parser.add_argument("--xhtml", action="store_true", help="Write void tags in self-closed form")
    parser.add_argument("--strict", action="store_true", help="Fail on HTML parse errors")
    parser.add_argument("--config", metavar="PATH", help="Path to the config file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"Markup Engine {__version__}")

    return parser.parse_args(argv)


def build_options(args: argparse.Namespace, config: Config) -> WriterOptions:
    """Combine the config file with the command line switches."""
    if args.safe:
        config.set('writer.safe', True)
    if args.no_reformat:
        config.set('writer.reformat', False)
    if args.xhtml:
        config.set('writer.xhtml', True)
    return WriterOptions.from_config(config)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the markup engine."""
    args = parse_args(argv)

    config = Config(args.config)
    console_level = "DEBUG" if args.debug else config.get('logging.level', "INFO")
    logger = setup_logging(console_level=console_level)

    try:
        configure_parser(strict=args.strict or bool(config.get('parser.strict', False)))
        options = build_options(args, config)

        with open(args.file, 'r', encoding='utf-8') as f:
            source = f.read()

        if args.markdown or args.file.lower().endswith('.md'):
            logger.debug(f"Compiling {args.file} as Markdown")
            document = MarkdownDocument(source).to_document(options)
        else:
            document = HTMLDocument(source, options)

        if args.select:
            output = document.select(args.select).to_html(options)
        else:
            output = document.to_html(options)

        sys.stdout.write(output)
        return 0
    except (MarkupEngineError, OSError) as e:
        log_exception(logger, e, f"Failed to render {args.file}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
