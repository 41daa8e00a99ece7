"""Turn a directory document into the ordered text lines the parser consumes."""
from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from hashlib import sha256
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup
from docx import Document

logger = logging.getLogger(__name__)

DEFAULT_PDF_BACKENDS = [
    "pypdf",
    "pdfminer",
    "pikepdf+pypdf",
    "pikepdf+pdfminer",
]

DEFAULT_MIN_PDF_CHARS = 200

SUPPORTED_EXTENSIONS = {
    ".pdf",
    ".txt",
    ".docx",
    ".html",
    ".htm",
}


class SourceMissingError(RuntimeError):
    """The directory document is missing or yields no text."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"Input not available: {path} ({reason})")
        self.path = str(path)
        self.reason = reason


@dataclass
class SourceText:
    lines: list[str]
    meta: dict[str, Any] = field(default_factory=dict)


def _resolve_backend_order(prefer_backends: Iterable[str] | None) -> list[str]:
    if prefer_backends:
        order = [backend.strip() for backend in prefer_backends if backend and backend.strip()]
    else:
        env_value = os.environ.get("DIRECTORY_PDF_BACKENDS")
        if env_value:
            order = [backend.strip() for backend in env_value.split(",") if backend.strip()]
        else:
            order = list(DEFAULT_PDF_BACKENDS)
    seen = set()
    unique_order: list[str] = []
    for backend in order:
        if backend not in seen:
            unique_order.append(backend)
            seen.add(backend)
    return unique_order or list(DEFAULT_PDF_BACKENDS)


def _dedupe(sequence: Iterable[str]) -> list[str]:
    seen = set()
    result: list[str] = []
    for item in sequence:
        if item and item not in seen:
            result.append(item)
            seen.add(item)
    return result


def _is_xref_issue(message: str | None) -> bool:
    if not message:
        return False
    lowered = message.lower()
    return "xref" in lowered or "cross" in lowered


def resolve_min_pdf_chars(value: int | None) -> int:
    if value is not None:
        return max(value, 0)
    env_value = os.environ.get("DIRECTORY_MIN_PDF_CHARS")
    if env_value:
        try:
            return max(int(env_value), 0)
        except ValueError:
            logger.debug("Invalid DIRECTORY_MIN_PDF_CHARS value: %s", env_value)
    return DEFAULT_MIN_PDF_CHARS


@dataclass
class PdfAttempt:
    """Outcome of one backend in the PDF cascade."""

    backend: str
    text: str = ""
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    repaired: bool = False

    @property
    def chars(self) -> int:
        return len(self.text) if self.text.strip() else 0

    def is_sufficient(self, min_chars: int) -> bool:
        if self.error or self.chars < min_chars:
            return False
        return not any(_is_xref_issue(warning) for warning in self.warnings)


class _PdfRepairer:
    """Rewrites the source PDF with pikepdf at most once per extraction."""

    def __init__(self, source: Path, temp_dir: Path) -> None:
        self.source = source
        self.temp_dir = temp_dir
        self._result: tuple[Path, list[str]] | None = None
        self._error: str | None = None

    def repaired(self) -> tuple[Path, list[str]]:
        if self._result is None and self._error is None:
            try:
                self._result = _repair_pdf_with_pikepdf(self.source, self.temp_dir)
            except RuntimeError as exc:
                self._error = str(exc)
                logger.debug("pikepdf repair failed for %s: %s", self.source, exc)
        if self._result is None:
            raise RuntimeError(self._error or "pikepdf repair unavailable")
        return self._result


def extract_pdf_text(
    path: str | Path,
    *,
    min_chars: int = DEFAULT_MIN_PDF_CHARS,
    prefer_backends: Iterable[str] | None = None,
) -> tuple[str, dict[str, Any]]:
    """Extract text from a PDF, trying each backend until one gives enough text.

    Returns the longest text seen and a metadata dict naming the backend that
    produced it. When no backend reaches ``min_chars`` the text is empty and
    the metadata carries the collected warnings and the last error.
    """

    pdf_path = Path(path)
    try:
        byte_size = pdf_path.stat().st_size
    except OSError:
        byte_size = 0

    attempts: list[PdfAttempt] = []
    with tempfile.TemporaryDirectory(prefix="directory_pdf_") as tmp_dir:
        repairer = _PdfRepairer(pdf_path, Path(tmp_dir))
        for backend_name in _resolve_backend_order(prefer_backends):
            attempt = _run_backend(backend_name, pdf_path, repairer, min_chars)
            attempts.append(attempt)
            if attempt.is_sufficient(min_chars):
                break

    best = max(attempts, key=lambda attempt: attempt.chars)
    if best.chars >= min_chars and best.chars:
        return best.text, {
            "backend": best.backend,
            "bytes": byte_size,
            "chars": best.chars,
            "warnings": _dedupe(best.warnings),
            "repaired": best.repaired,
            "error": None,
        }

    warnings = _dedupe(
        f"{attempt.backend}: {warning}" for attempt in attempts for warning in attempt.warnings
    )
    errors = [attempt.error for attempt in attempts if attempt.error]
    if best.chars:
        warnings.append(f"best text shorter than min_chars ({best.chars} < {min_chars})")
    elif not errors:
        warnings.append("no backend produced text")
    return "", {
        "backend": "none",
        "bytes": byte_size,
        "chars": best.chars,
        "warnings": warnings,
        "repaired": any(attempt.repaired for attempt in attempts),
        "error": errors[-1] if errors else None,
    }


def _run_backend(
    backend_name: str, pdf_path: Path, repairer: _PdfRepairer, min_chars: int
) -> PdfAttempt:
    attempt = PdfAttempt(backend_name)
    backend = backend_name
    target = pdf_path
    if backend_name.startswith("pikepdf+"):
        backend = backend_name.split("+", 1)[1]
        try:
            target, repair_warnings = repairer.repaired()
        except RuntimeError as exc:
            attempt.error = str(exc)
            attempt.warnings.append(f"pikepdf repair failed: {exc}")
            return attempt
        attempt.warnings.extend(repair_warnings)
        attempt.repaired = True

    try:
        attempt.text, backend_warnings = _extract_with_backend(backend, target)
        attempt.warnings.extend(backend_warnings)
    except RuntimeError as exc:
        attempt.error = str(exc)
        logger.debug("PDF backend %s failed for %s: %s", backend, pdf_path, exc)

    if not attempt.chars:
        attempt.warnings.append("extracted text empty")
    elif attempt.chars < min_chars:
        attempt.warnings.append(
            f"extracted text shorter than min_chars ({attempt.chars} < {min_chars})"
        )
    return attempt


def _extract_with_backend(backend: str, path: Path) -> tuple[str, list[str]]:
    if backend == "pypdf":
        return _extract_with_pypdf(path)
    if backend == "pdfminer":
        return _extract_with_pdfminer(path)
    raise RuntimeError(f"unknown backend: {backend}")


def _extract_with_pypdf(path: Path) -> tuple[str, list[str]]:
    warnings: list[str] = []
    try:
        from pypdf import PdfReader
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("pypdf is not installed") from exc

    try:
        reader = PdfReader(str(path))
    except Exception as exc:  # pragma: no cover - upstream errors vary
        raise RuntimeError(str(exc)) from exc

    text_chunks: list[str] = []
    for page_number, page in enumerate(reader.pages, start=1):
        try:
            text = page.extract_text() or ""
        except Exception as exc:  # pragma: no cover - depends on document
            warnings.append(f"page {page_number}: {exc}")
            text = ""
        text_chunks.append(text)
    return "\n".join(text_chunks), warnings


def _extract_with_pdfminer(path: Path) -> tuple[str, list[str]]:
    try:
        from pdfminer.high_level import extract_text
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("pdfminer.six is not installed") from exc

    try:
        text = extract_text(str(path))
    except Exception as exc:  # pragma: no cover - upstream errors vary
        raise RuntimeError(str(exc)) from exc
    return text or "", []


def _repair_pdf_with_pikepdf(source: Path, temp_dir: Path) -> tuple[Path, list[str]]:
    try:
        from pikepdf import Pdf  # type: ignore[attr-defined]
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("pikepdf is not installed") from exc

    repaired_path = Path(temp_dir) / "repaired.pdf"
    warnings: list[str] = ["pikepdf repair applied"]
    try:
        with Pdf.open(str(source)) as pdf:
            pdf.save(str(repaired_path))
    except Exception as exc:  # pragma: no cover - upstream errors vary
        raise RuntimeError(str(exc)) from exc
    return repaired_path, warnings


def read_html_lines(text: str) -> list[str]:
    soup = BeautifulSoup(text, "lxml")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup.get_text("\n").splitlines()


def read_docx_lines(path: Path) -> list[str]:
    document = Document(str(path))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.extend(cell.text.splitlines())
    return lines


def read_source_lines(
    path: str | Path,
    *,
    min_pdf_chars: int | None = None,
    pdf_backends: Iterable[str] | None = None,
) -> SourceText:
    """Read ``path`` into text lines.

    Raises :class:`SourceMissingError` when the file is absent, of an
    unsupported type, unreadable, or holds no extractable text.
    """
    source = Path(path)
    if not source.is_file():
        raise SourceMissingError(source, "file not found")
    suffix = source.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise SourceMissingError(source, f"unsupported file type {suffix or '(none)'}")
    try:
        raw_bytes = source.read_bytes()
    except OSError as exc:
        raise SourceMissingError(source, str(exc)) from exc

    meta: dict[str, Any] = {
        "file": str(source),
        "sha256": sha256(raw_bytes).hexdigest(),
        "bytes": len(raw_bytes),
        "format": suffix.lstrip("."),
    }
    if suffix == ".pdf":
        text, pdf_meta = extract_pdf_text(
            source,
            min_chars=resolve_min_pdf_chars(min_pdf_chars),
            prefer_backends=pdf_backends,
        )
        meta["pdf_meta"] = pdf_meta
        lines = text.splitlines()
    elif suffix == ".docx":
        try:
            lines = read_docx_lines(source)
        except Exception as exc:  # python-docx raises several unrelated types
            raise SourceMissingError(source, f"unreadable DOCX: {exc}") from exc
    else:
        text = raw_bytes.decode("utf-8", errors="ignore")
        lines = read_html_lines(text) if suffix in {".html", ".htm"} else text.splitlines()

    if not any(line.strip() for line in lines):
        raise SourceMissingError(source, "no extractable text")
    meta["lines"] = len(lines)
    logger.debug("Read %d lines from %s", len(lines), source)
    return SourceText(lines=lines, meta=meta)
