from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .schema import DEFAULT_OUTPUT_FILES, OUTPUT_DOCUMENTS

LOGGER = logging.getLogger(__name__)


class DocumentWriteError(RuntimeError):
    """Raised when an output document cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path


_UMASK_LOCK = threading.Lock()


def _target_mode(path: Path) -> int:
    """Mode for the replaced file: the existing target's, else 0666 minus the umask."""

    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        pass
    # os.umask can only be read by setting it.
    with _UMASK_LOCK:
        umask = os.umask(0o022)
        os.umask(umask)
    return 0o666 & ~umask


def dump_document(data: Any) -> str:
    """Serialize a document as indented JSON with a trailing newline."""

    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def write_document(path: Path, data: Any) -> Path:
    """
    Atomically replace `path` with the serialized document.

    The payload goes to a uniquely named temporary file in the destination
    directory which is then renamed over the target, so readers and
    concurrent writers only ever see a complete document.
    """

    path = Path(path)
    payload = dump_document(data)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        # NamedTemporaryFile creates 0600; published documents must stay world-readable.
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise DocumentWriteError(path, exc.strerror or str(exc)) from exc

    LOGGER.debug("Wrote %s (%d bytes)", path, len(payload.encode("utf-8")))
    return path


def write_documents(
    documents: Mapping[str, Any],
    output_dir: Path,
    names: Mapping[str, str] | None = None,
) -> List[Path]:
    """
    Write every output document into `output_dir`.

    `documents` is keyed by document name (see OUTPUT_DOCUMENTS); `names`
    maps document name to file name. Each document is replaced atomically; the
    first failure stops the run.
    """

    file_names: Dict[str, str] = {**DEFAULT_OUTPUT_FILES, **(names or {})}
    written: List[Path] = []
    for name in OUTPUT_DOCUMENTS:
        if name not in documents:
            continue
        path = write_document(Path(output_dir) / file_names[name], documents[name])
        LOGGER.info("Wrote %s", path)
        written.append(path)
    return written
