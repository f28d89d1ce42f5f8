"""
Content digester.

Streams files through hashlib in fixed-size chunks so memory use does not
depend on file size.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path

from dupsweep.exceptions import InvalidAlgorithm, UnreadableFile
from dupsweep.models import FileRecord, HashAlgorithm

# Accepted spellings, including the underlying hashlib names
ALGORITHM_ALIASES: dict[str, HashAlgorithm] = {
    "fast": HashAlgorithm.fast,
    "md5": HashAlgorithm.fast,
    "secure": HashAlgorithm.secure,
    "sha256": HashAlgorithm.secure,
}

_HASHLIB_NAMES = {
    HashAlgorithm.fast: "md5",
    HashAlgorithm.secure: "sha256",
}


def parse_algorithm(name: str) -> HashAlgorithm:
    """Resolve an algorithm name or alias, raising InvalidAlgorithm."""
    try:
        return ALGORITHM_ALIASES[str(name).strip().lower()]
    except KeyError:
        raise InvalidAlgorithm(
            f"Invalid algorithm: {name!r} (expected one of: fast, secure)"
        ) from None


def compute_digest(
    file_path: Path,
    algorithm: HashAlgorithm = HashAlgorithm.fast,
    chunk_size: int = 65536,
) -> str:
    """
    Compute the content digest of a file (chunked for memory efficiency).

    Args:
        file_path: File to hash
        algorithm: fast (MD5) or secure (SHA-256)
        chunk_size: Read size in bytes

    Returns:
        Hex digest string

    Raises:
        UnreadableFile: Permission denied, I/O error or file vanished
    """
    hasher = hashlib.new(_HASHLIB_NAMES[HashAlgorithm(algorithm)])

    try:
        with open(file_path, "rb") as f:
            while chunk := f.read(chunk_size):
                hasher.update(chunk)
    except OSError as e:
        raise UnreadableFile(file_path, e.strerror or str(e)) from e

    return hasher.hexdigest()


def read_file_record(
    file_path: Path,
    algorithm: HashAlgorithm = HashAlgorithm.fast,
    chunk_size: int = 65536,
) -> FileRecord:
    """Stat and digest a file into a FileRecord."""
    try:
        st = file_path.stat()
    except OSError as e:
        raise UnreadableFile(file_path, e.strerror or str(e)) from e

    digest = compute_digest(file_path, algorithm, chunk_size)

    return FileRecord(
        path=file_path,
        size_bytes=st.st_size,
        modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        digest=digest,
    )
