"""
Incremental merge writer.

Generated files are the only state this tool keeps. They are modelled as a
key-value store keyed by path relative to the project root, and shared
files are updated with a read-modify-write cycle: read the whole file,
compute the next state, write the whole file. There is no locking and no
transaction across files, so runs that touch the same shared file must be
sequenced.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from enum import Enum

from ...logging_config import get_logger
from ...utils import FileWriteError, atomic_write, read_text
from .schema import GeneratedArtifact

logger = get_logger(__name__)


class MergeError(Exception):
    """Exception raised when an artifact cannot be read or written."""

    pass


class MergeAction(Enum):
    """What the merge writer did with an artifact."""

    WRITE_FRESH = "created"
    APPEND = "appended"
    SKIP = "skipped"
    REPLACE = "replaced"
    FALLBACK_APPEND = "appended (fallback)"


@dataclass
class WriteOutcome:
    """Result of writing one artifact."""

    path: str
    action: MergeAction
    warning: Optional[str] = None
    imports_added: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.action != MergeAction.SKIP


class ArtifactStore:
    """Key-value view of generated files, keyed by relative path."""

    def read(self, path: str) -> Optional[str]:
        """Return the full content at ``path`` or None when absent."""
        raise NotImplementedError

    def write(self, path: str, content: str) -> None:
        """Replace the full content at ``path``."""
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        return self.read(path) is not None


class FileStore(ArtifactStore):
    """Store backed by a project directory; every write is atomic."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / path

    def read(self, path: str) -> Optional[str]:
        try:
            return read_text(self._resolve(path))
        except OSError as e:
            raise MergeError(f"Failed to read {path}: {e}") from e

    def write(self, path: str, content: str) -> None:
        try:
            atomic_write(self._resolve(path), content)
        except FileWriteError as e:
            raise MergeError(str(e)) from e


class MemoryStore(ArtifactStore):
    """
    In-memory store for dry runs and tests.

    With a ``base`` store, paths not yet written in memory are read from
    it, so a dry run sees the project as it is on disk without changing it.
    """

    def __init__(
        self,
        files: Optional[Dict[str, str]] = None,
        base: Optional[ArtifactStore] = None,
    ):
        self.files: Dict[str, str] = dict(files or {})
        self.base = base

    def read(self, path: str) -> Optional[str]:
        if path in self.files:
            return self.files[path]
        if self.base is not None:
            return self.base.read(path)
        return None

    def write(self, path: str, content: str) -> None:
        self.files[path] = content


_IMPORT_BLOCK = re.compile(r"^import \(\n(?P<body>.*?)^\)\n", re.MULTILINE | re.DOTALL)
_IMPORT_LINE = re.compile(r'^import (?P<spec>"[^"\n]+")\n', re.MULTILINE)
_QUOTED = re.compile(r'"([^"\n]+)"')


def _existing_imports(content: str) -> List[str]:
    found = []
    for block in _IMPORT_BLOCK.finditer(content):
        found.extend(_QUOTED.findall(block.group("body")))
    for line in _IMPORT_LINE.finditer(content):
        found.extend(_QUOTED.findall(line.group("spec")))
    return found


def ensure_imports(content: str, imports: List[str]) -> Tuple[str, List[str]]:
    """
    Add missing import paths to a Go file.

    Missing paths go at the end of the first ``import (...)`` block; a
    single-line import is widened into a block; a file with no imports gets
    a block right after its package clause. Nothing else in the file moves
    relative to its neighbours.

    Returns:
        Tuple of (new content, list of added paths)
    """
    present = set(_existing_imports(content))
    missing = [imp for imp in imports if imp not in present]
    if not missing:
        return content, []

    added_lines = "".join(f'\t"{imp}"\n' for imp in missing)

    block = _IMPORT_BLOCK.search(content)
    if block:
        insert_at = block.end("body")
        return content[:insert_at] + added_lines + content[insert_at:], missing

    line = _IMPORT_LINE.search(content)
    if line:
        widened = f"import (\n\t{line.group('spec')}\n{added_lines})\n"
        return content[: line.start()] + widened + content[line.end():], missing

    package = re.search(r"^package \w+\n", content, re.MULTILINE)
    insert_at = package.end() if package else 0
    new_block = f"\nimport (\n{added_lines})\n"
    return content[:insert_at] + new_block + content[insert_at:], missing


def _split_closer(content: str, closer: str) -> Optional[str]:
    """
    Return the content before its final closing delimiter line.

    Returns None when the file does not end with the expected delimiter.
    """
    expected = closer.strip()
    stripped = content.rstrip()
    last_newline = stripped.rfind("\n")
    last_line = stripped[last_newline + 1:]
    if last_line.strip() != expected:
        return None
    return stripped[: last_newline + 1]


def is_parseable(content: str, artifact: GeneratedArtifact) -> bool:
    """True if existing content has a package clause and the expected closer."""
    if not re.search(r"^package \w+", content, re.MULTILINE):
        return False
    if artifact.closer and _split_closer(content, artifact.closer) is None:
        return False
    return True


def header_imports(artifact: GeneratedArtifact) -> List[str]:
    return _existing_imports(artifact.header)


def merge_content(
    existing: Optional[str], artifact: GeneratedArtifact
) -> Tuple[Optional[str], WriteOutcome]:
    """
    Compute the next state of a file without touching any store.

    Args:
        existing: Current file content, or None if there is no file
        artifact: Artifact to reconcile

    Returns:
        Tuple of (new content or None for a no-op, outcome)
    """
    path = artifact.path

    if existing is None:
        return artifact.render_fresh(), WriteOutcome(path, MergeAction.WRITE_FRESH)

    if not artifact.mergeable:
        if existing == artifact.content:
            return None, WriteOutcome(path, MergeAction.SKIP)
        return artifact.content, WriteOutcome(path, MergeAction.REPLACE)

    if artifact.marker and artifact.marker in existing:
        return None, WriteOutcome(path, MergeAction.SKIP)

    if not is_parseable(existing, artifact):
        warning = (
            f"{path}: unexpected file structure, appended declarations at end of file"
        )
        separator = "" if existing.endswith("\n") else "\n"
        content = f"{existing}{separator}\n{artifact.render_block()}"
        return content, WriteOutcome(path, MergeAction.FALLBACK_APPEND, warning=warning)

    body = _split_closer(existing, artifact.closer) if artifact.closer else existing
    if not body.endswith("\n"):
        body += "\n"

    body, added = ensure_imports(body, header_imports(artifact))
    content = f"{body}{artifact.content}{artifact.closer}"
    return content, WriteOutcome(path, MergeAction.APPEND, imports_added=added)


def merge_write(store: ArtifactStore, artifact: GeneratedArtifact) -> WriteOutcome:
    """
    Reconcile an artifact with whatever the store already holds at its path.

    No file: write header, declarations and closer. Marker absent: strip
    the closer, append the declarations, close again. Marker present: do
    nothing. Unrecognisable file: append a self-contained block at the end
    and report a warning. Non-mergeable artifacts are replaced wholesale.

    Args:
        store: Where files live
        artifact: Artifact to write

    Returns:
        WriteOutcome describing the action taken
    """
    existing = store.read(artifact.path)
    content, outcome = merge_content(existing, artifact)

    if content is not None:
        store.write(artifact.path, content)

    if outcome.warning:
        logger.warning(outcome.warning)
    else:
        logger.debug("%s: %s", artifact.path, outcome.action.value)

    return outcome
