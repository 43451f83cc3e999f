"""
Normalization of listing fields on write.
"""

from typing import Any, List, Optional, Sequence, Union

UPLOADS_SEGMENT = "uploads"


def normalize_features(features: Union[None, str, Sequence[Any]]) -> List[str]:
    """
    Normalize feature tags.

    Accepts a sequence of strings or a single comma-separated string.
    Entries are trimmed, empty ones dropped and order preserved:
    "a, b ,,c" -> ["a", "b", "c"] and ["x ", "", "y"] -> ["x", "y"].
    """
    if not features:
        return []

    if isinstance(features, str):
        entries = features.split(",")
    else:
        entries = [entry for entry in features if entry]

    return [str(entry).strip() for entry in entries if str(entry).strip()]


def resolve_image_reference(stored: Any) -> Optional[str]:
    """
    Map a stored-file descriptor to the reference persisted on a listing.

    - absolute http(s) URLs are kept verbatim
    - paths containing "uploads" become "/uploads/..." with forward slashes
    - a bare filename becomes "/uploads/<filename>"
    - anything else yields None and is dropped by the caller
    """
    if stored is None:
        return None

    path = getattr(stored, "path", None) or ""
    filename = getattr(stored, "filename", None) or ""

    if path.startswith(("http://", "https://")):
        return path

    if UPLOADS_SEGMENT in path:
        relative = path[path.rindex(UPLOADS_SEGMENT):].replace("\\", "/")
        return relative if relative.startswith("/") else f"/{relative}"

    if filename:
        return f"/{UPLOADS_SEGMENT}/{filename}"

    return None


def resolve_image_references(stored_files: Sequence[Any]) -> List[str]:
    """Resolve a batch of descriptors, dropping the unresolvable ones."""
    references = [resolve_image_reference(stored) for stored in stored_files]
    return [reference for reference in references if reference]


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
