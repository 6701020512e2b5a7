"""Get document outline - nested symbols of one Typst file."""

from ..parser import LineIndex, ScopeConfiguration, extract_outline
from .outline_format import load_document, node_to_dict


def get_document_outline(path: str, scope: str = "symbol") -> dict:
    """Outline a document with headings, labels, functions and variables.

    Args:
        path: Path to a .typ file
        scope: "symbol" for named symbols, "braced" for block structure

    Returns:
        Dict with the nested outline
    """
    try:
        scope_config = ScopeConfiguration(scope.lower())
    except ValueError:
        return {"error": f"Unknown scope: {scope}"}

    content, language, error = load_document(path)
    if error:
        return {"error": error}

    forest = extract_outline(content, scope_config, language)
    if forest is None:
        return {"error": f"Outline analysis failed for {path}"}

    lines = LineIndex(content)
    return {
        "file": path,
        "language": language,
        "scope": scope_config.value,
        "symbols": [node_to_dict(n, lines) for n in forest],
    }
