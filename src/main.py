# src/main.py — v2
"""CLI entry point: index, suggest, summary and stats commands.

Usage:
    read-next index <directory> [options]
    read-next suggest <directory> <document_id> [--limit N]
    read-next summary <file>
    read-next stats
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from readnext.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
    except Exception as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="read-next",
        description=f"read-next v{__version__}: related-content suggestions for articles",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--cache-dir", type=Path, default=None,
        help="Cache directory (default: CACHE_DIR or <tempdir>/read-next-cache)",
    )
    parser.add_argument(
        "--parallel", type=int, default=None,
        help="Documents summarized concurrently (default: PARALLEL or 1)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- index ---
    p_index = subparsers.add_parser(
        "index", help="Summarize and index every document in a directory",
    )
    p_index.add_argument("directory", type=Path, help="Directory to scan")
    p_index.add_argument(
        "--no-recursive", action="store_true",
        help="Disable recursive scanning",
    )
    p_index.add_argument(
        "--formats", default=None,
        help="Comma-separated formats to include (md, txt; default: all)",
    )
    p_index.add_argument(
        "--fail-fast", action="store_true",
        help="Stop starting new documents after the first failure",
    )
    p_index.set_defaults(func=_cmd_index)

    # --- suggest ---
    p_suggest = subparsers.add_parser(
        "suggest", help="List documents related to one document",
    )
    p_suggest.add_argument("directory", type=Path, help="Directory holding the corpus")
    p_suggest.add_argument("document_id", help="Id of the query document")
    p_suggest.add_argument(
        "-n", "--limit", type=int, default=None,
        help="Number of suggestions (default: SUGGEST_DEFAULT_LIMIT)",
    )
    p_suggest.set_defaults(func=_cmd_suggest)

    # --- summary ---
    p_summary = subparsers.add_parser(
        "summary", help="Print the (cached) summary of one file",
    )
    p_summary.add_argument("file", type=Path, help="Path to document")
    p_summary.add_argument(
        "--root", type=Path, default=None,
        help="Corpus root used to derive the document id (default: file's directory)",
    )
    p_summary.set_defaults(func=_cmd_summary)

    # --- stats ---
    p_stats = subparsers.add_parser(
        "stats", help="Show cache statistics",
    )
    p_stats.set_defaults(func=_cmd_stats)

    return parser


async def _cmd_index(args: argparse.Namespace, settings) -> int:
    """Index every supported file under a directory."""
    from readnext.api.facade import ReadNext
    from readnext.batch.scanner import DocumentScanner

    directory: Path = args.directory
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    formats = None
    if args.formats:
        formats = [f.strip() for f in args.formats.split(",")]

    documents = DocumentScanner().load(
        directory, recursive=not args.no_recursive, formats_filter=formats,
    )
    if not documents:
        logger.warning("No supported documents found in %s", directory)
        return 0

    read_next = await ReadNext.create(settings)
    result = await read_next.index(documents, fail_fast=args.fail_fast)

    print("\nIndexing complete:")
    print(f"  Documents:   {len(documents)}")
    print(f"  Indexed:     {result.entries_added}")
    print(f"  Failed:      {len(result.failures)}")
    print(f"  Skipped:     {len(result.skipped)}")
    print(f"  Index saved: {'yes' if result.saved else 'no'}")
    for failure in result.failures:
        print(f"  ! {failure.document_id}: {failure.reason}")
    return 0 if result.ok else 1


async def _cmd_suggest(args: argparse.Namespace, settings) -> int:
    """Print documents related to one document of the corpus."""
    from readnext.api.facade import ReadNext
    from readnext.batch.scanner import DocumentScanner

    directory: Path = args.directory
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    documents = {d.id: d for d in DocumentScanner().load(directory)}
    document = documents.get(args.document_id)
    if document is None:
        logger.error("Document %s not found in %s", args.document_id, directory)
        return 1

    read_next = await ReadNext.create(settings)
    suggestions = await read_next.suggest(document, limit=args.limit)

    print(f"\nRelated to {suggestions.id}:")
    if not suggestions.related:
        print("  (none)")
    for rank, related in enumerate(suggestions.related, start=1):
        print(f"  {rank:2d}. {related.source_document_id}  ({related.score:.4f})")
    return 0


async def _cmd_summary(args: argparse.Namespace, settings) -> int:
    """Print the summary of one file, deriving and caching it if needed."""
    from readnext.api.facade import ReadNext
    from readnext.batch.scanner import SUPPORTED_FORMATS, document_id_for
    from readnext.core.models import Document

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1
    if file_path.suffix.lower() not in SUPPORTED_FORMATS:
        logger.error("Unsupported format: %s", file_path.suffix)
        return 1

    document = Document(
        id=document_id_for(file_path, args.root or file_path.parent),
        content=file_path.read_text(encoding="utf-8"),
    )
    read_next = await ReadNext.create(settings)
    print(await read_next.get_summary_for(document))
    return 0


async def _cmd_stats(args: argparse.Namespace, settings) -> int:
    """Display statistics for the cache directory."""
    from readnext.cache.cache_factory import default_cache_dir
    from readnext.cache.file_store import FileArtifactCache
    from readnext.cache.json_store import JsonFingerprintStore
    from readnext.rag.vector_store.faiss_store import FaissVectorStore

    cache_dir = Path(settings.cache_dir or default_cache_dir()).expanduser()
    if not cache_dir.is_dir():
        logger.error("Cache directory does not exist: %s", cache_dir)
        return 1

    fingerprints = JsonFingerprintStore(cache_dir)
    summaries = await FileArtifactCache(cache_dir).list_keys()
    vectors = None
    if settings.vector_db_type == "faiss":
        vectors = FaissVectorStore.saved_size(settings.vector_db_path or cache_dir)

    print(f"\nStatistics for {cache_dir}:")
    print(f"  Fingerprints:  {len(fingerprints)}")
    print(f"  Summaries:     {len(summaries)}")
    print(f"  Index entries: {vectors if vectors is not None else 'n/a'}")
    return 0


def _load_settings(args: argparse.Namespace):
    """Load settings from .env, with CLI flags taking precedence."""
    from readnext.config.settings import load_settings

    overrides: dict[str, object] = {}
    if args.cache_dir is not None:
        overrides["cache_dir"] = args.cache_dir
    if args.parallel is not None:
        overrides["parallel"] = args.parallel
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return load_settings(**overrides)


def _setup_logging(settings) -> None:
    """Configure logging for CLI usage."""
    from readnext.logging.logger import setup_logging

    setup_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
