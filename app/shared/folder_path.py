"""Folder path utilities.

Folder paths are ``/``-delimited strings such as ``"Photos/High Res"``.
Segments are trimmed and must not be empty, so ``" Photos / High Res "``
normalises to ``"Photos/High Res"`` while ``"Photos//Raw"`` or ``"Photos/"``
are rejected with :class:`InvalidPathError`.

Two relations are deliberately kept apart:

* :func:`is_direct_child` (one level down) is what folder listings use;
* :func:`is_descendant` (any depth) is what cascading deletes use.
"""

from app.exceptions.delivery import InvalidPathError

SEPARATOR = "/"
MAX_SEGMENT_LENGTH = 255
MAX_PATH_LENGTH = 1024


def parse(path: str) -> list[str]:
    """Split ``path`` into trimmed, non-empty segments."""
    if not isinstance(path, str) or not path.strip():
        raise InvalidPathError("Folder path cannot be empty", details={"path": path})

    segments = [segment.strip() for segment in path.split(SEPARATOR)]
    if any(not segment for segment in segments):
        raise InvalidPathError(
            "Folder path segments cannot be empty or whitespace", details={"path": path}
        )
    for segment in segments:
        if len(segment) > MAX_SEGMENT_LENGTH:
            raise InvalidPathError(
                f"Folder names cannot exceed {MAX_SEGMENT_LENGTH} characters",
                details={"segment": segment[:50]},
            )

    normalized = SEPARATOR.join(segments)
    if len(normalized) > MAX_PATH_LENGTH:
        raise InvalidPathError(f"Folder path cannot exceed {MAX_PATH_LENGTH} characters")
    return segments


def normalize(path: str) -> str:
    return SEPARATOR.join(parse(path))


def validate_name(name: str) -> str:
    """Validate a single folder name and return it trimmed."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidPathError("Folder name cannot be empty", details={"name": name})
    if SEPARATOR in name:
        raise InvalidPathError(
            f"Folder name cannot contain '{SEPARATOR}'", details={"name": name}
        )
    return parse(name)[0]


def join(parent: str | None, name: str) -> str:
    """Build the path of ``name`` created under ``parent`` (``None`` for root)."""
    segment = validate_name(name)
    if parent is None:
        return normalize(segment)
    return normalize(f"{normalize(parent)}{SEPARATOR}{segment}")


def parent(path: str) -> str | None:
    """Return the parent path, or ``None`` for a root folder."""
    segments = parse(path)
    if len(segments) == 1:
        return None
    return SEPARATOR.join(segments[:-1])


def name(path: str) -> str:
    return parse(path)[-1]


def depth(path: str) -> int:
    """Root folders have depth 1."""
    return len(parse(path))


def ancestors(path: str) -> list[str]:
    """All ancestor paths from the root down, excluding ``path`` itself."""
    segments = parse(path)
    return [SEPARATOR.join(segments[:i]) for i in range(1, len(segments))]


def is_descendant(candidate: str, ancestor: str) -> bool:
    """True if ``candidate`` lies strictly below ``ancestor`` at any depth."""
    candidate_segments = parse(candidate)
    ancestor_segments = parse(ancestor)
    if len(candidate_segments) <= len(ancestor_segments):
        return False
    return candidate_segments[: len(ancestor_segments)] == ancestor_segments


def is_direct_child(candidate: str, ancestor: str) -> bool:
    return depth(candidate) == depth(ancestor) + 1 and is_descendant(candidate, ancestor)


def descendant_prefix(path: str) -> str:
    """Prefix shared by every descendant path, for ``LIKE``/``startswith`` queries."""
    return f"{normalize(path)}{SEPARATOR}"
