# src/batch/scanner.py — v3
"""Directory scanner: turn text and markdown files into Documents.

A document's id is its path relative to the scan root, in POSIX form and
without the file suffix, so `posts/2024/intro.md` becomes `posts/2024/intro`.
When two files in one scan would share an id (`intro.md` and `intro.txt`),
both keep their suffix instead so every document still gets its own id.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

from readnext.batch.models import ScanEntry
from readnext.core.models import Document

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format names
SUPPORTED_FORMATS: dict[str, str] = {
    ".md": "md",
    ".markdown": "md",
    ".txt": "txt",
}


class DocumentScanner:
    """Discover documents in a directory tree.

    Usage:
        scanner = DocumentScanner()
        documents = scanner.load(Path("content/posts"))
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def scan(
        self,
        scan_root: Path,
        recursive: bool = True,
        formats_filter: list[str] | None = None,
    ) -> list[ScanEntry]:
        """Discover all supported files in directory, sorted by path.

        Args:
            scan_root: Root directory to scan.
            recursive: If True, scan subdirectories recursively.
            formats_filter: If provided, only include these formats.

        Raises:
            ValueError: If scan_root is not a directory.
        """
        if not scan_root.is_dir():
            msg = f"Scan root is not a directory: {scan_root}"
            raise ValueError(msg)

        paths: list[Path] = []
        allowed_formats = set(formats_filter) if formats_filter else None

        pattern_fn = scan_root.rglob if recursive else scan_root.glob
        for path in sorted(pattern_fn("*")):
            if not path.is_file():
                continue
            fmt = SUPPORTED_FORMATS.get(path.suffix.lower())
            if fmt is None:
                continue
            if allowed_formats and fmt not in allowed_formats:
                continue

            paths.append(path)

        ids = _unique_ids(paths, scan_root)
        entries = [
            ScanEntry(
                file_path=str(path.resolve()),
                document_id=ids[path],
                format=SUPPORTED_FORMATS[path.suffix.lower()],
                size_bytes=path.stat().st_size,
            )
            for path in paths
        ]

        logger.info(
            "Scanned %s: found %d supported files (recursive=%s)",
            scan_root, len(entries), recursive,
        )
        return entries

    def load(
        self,
        scan_root: Path,
        recursive: bool = True,
        formats_filter: list[str] | None = None,
    ) -> list[Document]:
        """Scan and read every supported file into a Document.

        Files that cannot be decoded with the scanner's encoding are logged
        and skipped.
        """
        documents: list[Document] = []
        for entry in self.scan(scan_root, recursive, formats_filter):
            try:
                documents.append(self.read(entry))
            except UnicodeDecodeError as e:
                logger.warning(
                    "Skipping %s: not valid %s (%s)", entry.file_path, self._encoding, e,
                )
        return documents

    def read(self, entry: ScanEntry) -> Document:
        path = Path(entry.file_path)
        return Document(
            id=entry.document_id,
            content=path.read_text(encoding=self._encoding),
            metadata={"path": entry.file_path, "format": entry.format},
        )


def document_id_for(path: Path, scan_root: Path) -> str:
    """Derive a document id from a file path relative to scan_root."""
    relative = path.resolve().relative_to(scan_root.resolve())
    return relative.with_suffix("").as_posix()


def _unique_ids(paths: list[Path], scan_root: Path) -> dict[Path, str]:
    """Map each path to its document id, keeping the suffix where ids collide."""
    ids = {path: document_id_for(path, scan_root) for path in paths}
    while True:
        counts = Counter(ids.values())
        clashing = [p for p, i in ids.items() if counts[i] > 1]
        if not clashing:
            return ids
        for path in clashing:
            full = path.relative_to(scan_root).as_posix()
            if ids[path] != full:
                logger.warning(
                    "Document id %r is shared by several files; using %r for %s",
                    ids[path], full, path,
                )
            ids[path] = full
