"""Shared helpers for scanner tests."""

from pathlib import Path


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """
    Create files under root.

    Args:
        root: Directory to create files in
        files: Mapping of POSIX relative path -> text or bytes content

    Returns:
        root, for chaining
    """
    for rel_path, content in files.items():
        file_path = root / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            file_path.write_bytes(content)
        else:
            file_path.write_text(content, encoding="utf-8")
    return root
