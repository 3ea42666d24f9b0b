# src/main.py — v2
"""CLI entry point — classify, compare, batch commands.

Usage:
    spamsentinel classify [TEXT | -f FILE] [--strategy NAME]
    spamsentinel compare [TEXT | -f FILE]
    spamsentinel batch <directory> [--pattern GLOB] [--strategy NAME]

Text is read from stdin when neither TEXT nor --file is given. Results are
printed to stdout as JSON; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from spamsentinel.version import __version__

if TYPE_CHECKING:
    from spamsentinel.config.settings import Settings

logger = logging.getLogger(__name__)


class InputError(ValueError):
    """Raised when CLI input cannot be classified."""


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        from spamsentinel.config.settings import load_settings
        from spamsentinel.logging.logger import setup_logging_from_settings

        settings = load_settings()
        setup_logging_from_settings(settings)
        if args.verbose:
            logging.getLogger("spamsentinel").setLevel(logging.DEBUG)
        # Quiet noisy libraries
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except InputError as exc:
        logger.error("%s", exc)
        return 2
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="spamsentinel",
        description=f"spamsentinel v{__version__} - LLM-backed spam classification",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- classify ---
    p_classify = subparsers.add_parser("classify", help="Classify one email")
    _add_text_arguments(p_classify)
    p_classify.add_argument(
        "-s", "--strategy", default=None,
        help="Strategy: basic, advanced, memory (default: DEFAULT_STRATEGY)",
    )
    p_classify.set_defaults(func=_cmd_classify)

    # --- compare ---
    p_compare = subparsers.add_parser(
        "compare", help="Run all comparison strategies and report their consensus",
    )
    _add_text_arguments(p_compare)
    p_compare.set_defaults(func=_cmd_compare)

    # --- batch ---
    p_batch = subparsers.add_parser(
        "batch", help="Classify every email file in a directory",
    )
    p_batch.add_argument("directory", type=Path, help="Directory of email files")
    p_batch.add_argument(
        "--pattern", default="*.txt",
        help="Glob for email files (default: *.txt)",
    )
    p_batch.add_argument("-s", "--strategy", default=None, help="Strategy name")
    p_batch.set_defaults(func=_cmd_batch)

    return parser


def _add_text_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("text", nargs="?", default=None, help="Email text")
    parser.add_argument(
        "-f", "--file", type=Path, default=None,
        help="Read email text from a file",
    )


def _read_text(args: argparse.Namespace, max_chars: int) -> str:
    """Resolve the email text from argument, file or stdin."""
    if args.text is not None and args.file is not None:
        raise InputError("Give either TEXT or --file, not both")
    if args.file is not None:
        if not args.file.is_file():
            raise InputError(f"File not found: {args.file}")
        text = args.file.read_text(encoding="utf-8", errors="replace")
    elif args.text is not None:
        text = args.text
    else:
        text = sys.stdin.read()
    _check_length(text, max_chars)
    return text


def _check_length(text: str, max_chars: int) -> None:
    if len(text) > max_chars:
        raise InputError(
            f"Email content too long ({len(text)} characters, max {max_chars})"
        )


async def _cmd_classify(args: argparse.Namespace, settings: Settings) -> int:
    """Classify one email and print the verdict."""
    from spamsentinel.api.facade import build_orchestrator

    text = _read_text(args, settings.max_input_chars)
    orchestrator = build_orchestrator(settings)
    verdict = await orchestrator.classify(text, args.strategy)
    print(verdict.model_dump_json(indent=2, exclude_none=True))
    return 0


async def _cmd_compare(args: argparse.Namespace, settings: Settings) -> int:
    """Compare strategies on one email and print the consensus."""
    from spamsentinel.api.facade import build_orchestrator

    text = _read_text(args, settings.max_input_chars)
    orchestrator = build_orchestrator(settings)
    result = await orchestrator.compare(text)
    print(result.model_dump_json(indent=2, exclude_none=True))
    return 0


async def _cmd_batch(args: argparse.Namespace, settings: Settings) -> int:
    """Classify every matching file in a directory."""
    from spamsentinel.api.facade import build_orchestrator

    directory: Path = args.directory
    if not directory.is_dir():
        raise InputError(f"Not a directory: {directory}")

    paths = sorted(p for p in directory.glob(args.pattern) if p.is_file())
    if not paths:
        logger.warning("No files matching %s in %s", args.pattern, directory)
        return 0

    texts: list[str | None] = []
    for path in paths:
        text = path.read_text(encoding="utf-8", errors="replace")
        if len(text) > settings.max_input_chars:
            logger.warning("Skipping %s: longer than %d characters", path.name, settings.max_input_chars)
            texts.append(None)
        else:
            texts.append(text)

    orchestrator = build_orchestrator(settings)
    kept = [(p, t) for p, t in zip(paths, texts) if t is not None]
    verdicts = await orchestrator.classify_many([t for _, t in kept], args.strategy)

    for (path, _), verdict in zip(kept, verdicts):
        print(json.dumps({
            "file": path.name,
            "is_spam": verdict.is_spam,
            "confidence": verdict.confidence,
            "threat_level": verdict.threat_level,
            "reason": verdict.reason,
        }, ensure_ascii=False))

    # Counts successful verdicts only; blank and failed inputs are excluded.
    summary = orchestrator.verdict_stats().summary()
    print("\nBatch complete:", file=sys.stderr)
    print(f"  Files:       {len(paths)} ({len(paths) - len(kept)} skipped)", file=sys.stderr)
    print(f"  Classified:  {summary.total}", file=sys.stderr)
    print(f"  Spam:        {summary.spam_count} ({summary.spam_rate:.1f}%)", file=sys.stderr)
    print(f"  Legitimate:  {summary.ham_count}", file=sys.stderr)
    print(f"  Avg conf.:   {summary.average_confidence:.2f}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
