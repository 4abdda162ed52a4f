#!/usr/bin/env python3
"""
N-gram Language Model Command Line

Count n-grams in a corpus, then build an add-delta smoothed model from the
counts.

Usage:
    ngram-lm count corpus.txt counts.txt 3
    ngram-lm build counts.txt model.lm --vocab vocab.txt --delta 0.5
    ngram-lm build counts.txt model.lm          # unsmoothed, open vocabulary
    ngram-lm vocab corpus_dir/ vocab.txt
    ngram-lm brown brown.txt --categories news fiction
    ngram-lm serve --port 8080
"""

import argparse
import logging
import sys

from rich.logging import RichHandler

from .config import CountConfig, BuildConfig, DEFAULT_HOST, DEFAULT_PORT
from .corpus import get_brown_categories
from .training import (
    console, count_ngrams_cli, build_model_cli, show_model_cli,
    generate_vocabulary_cli, export_brown_cli
)


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return n


def non_negative_float(value: str) -> float:
    x = float(value)
    if x < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return x


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ngram-lm',
        description="Count n-grams and build add-delta smoothed language models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s count corpus.txt counts.txt 3
  %(prog)s build counts.txt model.lm --vocab vocab.txt --delta 0.5
  %(prog)s show model.lm --order 2 --top 20
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    count = subparsers.add_parser('count', help='Count n-grams in a line corpus')
    count.add_argument('corpus', help='Corpus file, one sentence per line')
    count.add_argument('output', help='Counts file to write')
    count.add_argument('order', type=positive_int, help='Maximum n-gram order')
    count.add_argument('--lowercase', action='store_true', help='Lowercase sentences first')

    build = subparsers.add_parser('build', help='Build a language model from counts')
    build.add_argument('counts', help='Counts file written by "count"')
    build.add_argument('output', help='Model file to write')
    build.add_argument('--vocab', default=None,
                       help='Vocabulary file to close the tables over (default: open vocabulary)')
    build.add_argument('--delta', type=non_negative_float, default=None,
                       help='Smoothing constant (default: 0 without --vocab, 1 with it)')

    show = subparsers.add_parser('show', help='Summarise a model file')
    show.add_argument('model', help='Model file')
    show.add_argument('--order', type=positive_int, default=None, help='Only this order')
    show.add_argument('--top', type=positive_int, default=10, help='Entries per order')

    vocab = subparsers.add_parser('vocab', help='Write the unique tokens of a directory')
    vocab.add_argument('input_dir', help='Directory of text files')
    vocab.add_argument('output', help='Vocabulary file to write')

    brown = subparsers.add_parser('brown', help='Export the Brown corpus as a line corpus')
    brown.add_argument('output', nargs='?', default=None, help='Corpus file to write')
    brown.add_argument('-c', '--categories', nargs='+', default=None,
                       help='Brown corpus categories to use (default: all)')
    brown.add_argument('--lowercase', action='store_true', help='Lowercase the text')
    brown.add_argument('--list-categories', action='store_true',
                       help='List available Brown corpus categories and exit')

    serve = subparsers.add_parser('serve', help='Run the web dashboard')
    serve.add_argument('--host', default=DEFAULT_HOST, help='Host to bind to')
    serve.add_argument('--port', type=int, default=DEFAULT_PORT, help='Port to bind to')
    serve.add_argument('--debug', action='store_true', help='Enable debug mode')

    return parser


def run(args: argparse.Namespace) -> None:
    if args.command == 'count':
        count_ngrams_cli(CountConfig(args.corpus, args.output, args.order,
                                     lowercase=args.lowercase))
    elif args.command == 'build':
        build_model_cli(BuildConfig(args.counts, args.output,
                                    vocab_path=args.vocab, delta=args.delta))
    elif args.command == 'show':
        show_model_cli(args.model, order=args.order, top_k=args.top)
    elif args.command == 'vocab':
        generate_vocabulary_cli(args.input_dir, args.output)
    elif args.command == 'brown' and args.list_categories:
        console.print("Available Brown corpus categories:")
        for cat in get_brown_categories():
            console.print(f"  - {cat}")
    elif args.command == 'brown':
        export_brown_cli(args.output, categories=args.categories, lowercase=args.lowercase)
    elif args.command == 'serve':
        from .web import app
        console.print(f"Open http://{args.host}:{args.port} in your browser")
        app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == 'brown' and not args.list_categories and args.output is None:
        parser.error("brown: an output path is required")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )

    try:
        run(args)
    except (OSError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
