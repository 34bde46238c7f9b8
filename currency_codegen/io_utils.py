from __future__ import annotations

import os

from .errors import StorageError


def persist(path: str | os.PathLike, content: bytes) -> None:
    """Create or truncate ``path`` and write ``content`` through a flushed buffer."""
    out_dir = os.path.dirname(os.fspath(path))
    try:
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)
            f.flush()
    except OSError as e:
        raise StorageError(f"failed to write {path}: {e}") from e
