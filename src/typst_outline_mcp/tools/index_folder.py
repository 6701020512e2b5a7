"""Index local folder tool - walk, outline, save."""

from pathlib import Path
from typing import Optional

from ..log import get_logger
from ..parser import LANGUAGE_EXTENSIONS, LineIndex, ScopeConfiguration, extract_outline
from ..storage import IndexStore
from .outline_format import collect_symbols

logger = get_logger(__name__)


# File patterns to skip
SKIP_PATTERNS = [
    "node_modules/", "venv/", ".venv/", "__pycache__/",
    "dist/", "build/", ".git/", "target/",
    "test_data/", "testdata/", "fixtures/", "snapshots/",
    "generated/",
]

MAX_FILES = 500


def should_skip_file(path: str) -> bool:
    """Check if file should be skipped based on path patterns."""
    # Normalize path separators for matching
    normalized = path.replace("\\", "/")
    for pattern in SKIP_PATTERNS:
        if pattern in normalized:
            return True
    return False


def discover_local_files(
    folder_path: Path,
    max_files: int = MAX_FILES,
    max_size: int = 500 * 1024,  # 500KB
) -> list[Path]:
    """Discover Typst documents in a local folder.

    Args:
        folder_path: Root folder to scan
        max_files: Maximum number of files to index
        max_size: Maximum file size in bytes

    Returns:
        List of Path objects for documents
    """
    files = []

    for file_path in folder_path.rglob("*"):
        if not file_path.is_file():
            continue

        try:
            rel_path = file_path.relative_to(folder_path).as_posix()
        except ValueError:
            continue

        if should_skip_file(rel_path):
            continue

        if file_path.suffix not in LANGUAGE_EXTENSIONS:
            continue

        try:
            if file_path.stat().st_size > max_size:
                continue
        except OSError:
            continue

        files.append(file_path)

    # Shallow documents first (main.typ before chapters/*.typ)
    files.sort(key=lambda p: (len(p.relative_to(folder_path).parts), p.as_posix()))
    return files[:max_files]


def index_folder(
    path: str,
    storage_path: Optional[str] = None
) -> dict:
    """Index a local folder containing Typst documents.

    Args:
        path: Path to local folder (absolute or relative)
        storage_path: Custom storage path (default: ~/.typst-outline/)

    Returns:
        Dict with indexing results
    """
    folder_path = Path(path).expanduser().resolve()

    if not folder_path.exists():
        return {"success": False, "error": f"Folder not found: {path}"}

    if not folder_path.is_dir():
        return {"success": False, "error": f"Path is not a directory: {path}"}

    warnings = []

    source_files = discover_local_files(folder_path)
    if not source_files:
        return {"success": False, "error": "No Typst documents found"}

    all_symbols = []
    outlines = {}
    raw_files = {}
    documents = []

    for file_path in source_files:
        rel_path = file_path.relative_to(folder_path).as_posix()

        try:
            content = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            warnings.append(f"Failed to read {rel_path}: {e}")
            continue

        language = LANGUAGE_EXTENSIONS[file_path.suffix]

        try:
            forest = extract_outline(content, ScopeConfiguration.SYMBOL, language)
        except Exception as e:
            logger.warning("parse failed", file=rel_path, error=str(e))
            warnings.append(f"Failed to parse {rel_path}: {e}")
            continue

        if forest is None:
            warnings.append(f"Outline analysis failed for {rel_path}")
            continue

        all_symbols.extend(collect_symbols(forest, rel_path, LineIndex(content)))
        outlines[rel_path] = forest
        raw_files[rel_path] = content
        documents.append(rel_path)

    if not documents:
        return {"success": False, "error": "No documents could be outlined", "warnings": warnings}

    workspace = folder_path.name

    store = IndexStore(base_path=storage_path)
    index = store.save_index(
        workspace=workspace,
        documents=documents,
        symbols=all_symbols,
        outlines=outlines,
        raw_files=raw_files,
    )

    result = {
        "success": True,
        "workspace": workspace,
        "folder_path": str(folder_path),
        "indexed_at": index.indexed_at,
        "document_count": len(documents),
        "symbol_count": len(all_symbols),
        "documents": documents[:20],  # Limit files in response
    }

    if warnings:
        result["warnings"] = warnings

    if len(source_files) >= MAX_FILES:
        result["note"] = f"Folder has many documents; indexed first {MAX_FILES}"

    return result
