"""Read-only access to a git object database through the git executable."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..errors import GitError
from ..logging import get_logger
from ..models import ChangeKind, TreeChange, TreeEntry

Runner = Callable[..., bytes]

_REVISION_RE = re.compile(r"^[0-9a-f]{40}$")

# Only regular files carry countable content; symlinks and submodules do not.
REGULAR_FILE_MODES = frozenset({"100644", "100755"})

_CHANGE_KINDS = {
    "A": ChangeKind.ADDED,
    "C": ChangeKind.ADDED,
    "D": ChangeKind.REMOVED,
    "M": ChangeKind.MODIFIED,
    "T": ChangeKind.MODIFIED,
}


def is_revision_id(value: str) -> bool:
    """Return True for a full 40-character lowercase hex object id."""
    return bool(_REVISION_RE.match(value))


class GitRepository:
    """Revision store backed by ``git --git-dir=<path>`` subprocess calls."""

    def __init__(
        self,
        git_dir: Path | str,
        runner: Runner | None = None,
        *,
        work_tree: Path | None = None,
    ) -> None:
        self.git_dir = Path(git_dir).expanduser().resolve()
        self.work_tree = work_tree
        self._runner = runner or self._default_runner
        self.logger = get_logger("git")

    @classmethod
    def discover(cls, location: Path | str, runner: Runner | None = None) -> "GitRepository":
        """Open the repository containing ``location``.

        ``location`` may be a work tree (or a directory inside one), a linked
        worktree or submodule checkout whose ``.git`` is a file, a ``.git``
        directory, or a bare repository.
        """
        run = runner or cls._default_runner
        start = Path(location).expanduser().resolve()
        base = ["git", "-C", str(start), "rev-parse"]
        output = run([*base, "--absolute-git-dir"], cwd=Path.cwd())
        git_dir = Path(output.decode("utf-8", "surrogateescape").strip())
        if not git_dir.is_absolute():
            raise GitError([*base, "--absolute-git-dir"], f"unexpected output {str(git_dir)!r}")
        try:
            top = run([*base, "--show-toplevel"], cwd=Path.cwd())
        except GitError:
            # Bare repositories and paths inside a control directory have no work tree.
            work_tree = None
        else:
            text = top.decode("utf-8", "surrogateescape").strip()
            work_tree = Path(text).resolve() if text else None
        if work_tree is None and git_dir.name == ".git":
            work_tree = git_dir.parent
        return cls(git_dir, runner=runner, work_tree=work_tree)

    def resolve_head(self) -> str:
        """Return the commit id HEAD points at."""
        return self.resolve("HEAD")

    def resolve(self, revision: str) -> str:
        """Resolve any revision expression to a full commit id."""
        output = self._git(["rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"])
        resolved = output.decode("utf-8").strip()
        if not is_revision_id(resolved):
            raise GitError(["rev-parse", revision], f"unexpected output {resolved!r}")
        return resolved

    def has_revision(self, revision: str) -> bool:
        """Return True when ``revision`` names a commit present in the object database."""
        try:
            self._git(["cat-file", "-e", f"{revision}^{{commit}}"])
        except GitError:
            return False
        return True

    def list_files(self, revision: str) -> List[TreeEntry]:
        """Return every regular file in the tree of ``revision``."""
        output = self._git(["ls-tree", "-r", "-l", "-z", "--full-tree", revision])
        entries: List[TreeEntry] = []
        for record in _split_z(output):
            meta, _, path = record.partition("\t")
            parts = meta.split()
            if len(parts) != 4:
                raise GitError(["ls-tree", revision], f"malformed tree entry {record!r}")
            mode, object_type, blob, size = parts
            if object_type != "blob" or mode not in REGULAR_FILE_MODES:
                continue
            entries.append(TreeEntry(path=path, blob=blob, size=int(size), mode=mode))
        return entries

    def read_blob(self, blob: str) -> bytes:
        return self._git(["cat-file", "blob", blob])

    def blob_size(self, blob: str) -> int:
        return int(self._git(["cat-file", "-s", blob]).decode("utf-8").strip())

    def diff_trees(self, old: str, new: str) -> List[TreeChange]:
        """Return the paths that differ between two revisions.

        Renames are reported as a removal plus an addition. The revisions do not
        need to share history.
        """
        output = self._git(["diff-tree", "-r", "-z", "--no-renames", "--no-commit-id", old, new])
        tokens = _split_z(output)
        changes: List[TreeChange] = []
        index = 0
        while index < len(tokens):
            meta = tokens[index]
            if not meta.startswith(":") or index + 1 >= len(tokens):
                raise GitError(["diff-tree", old, new], f"malformed diff record {meta!r}")
            path = tokens[index + 1]
            index += 2
            parts = meta[1:].split()
            if len(parts) != 5:
                raise GitError(["diff-tree", old, new], f"malformed diff record {meta!r}")
            _, new_mode, _, new_blob, status = parts
            kind = _CHANGE_KINDS.get(status[:1])
            if kind is None:
                raise GitError(["diff-tree", old, new], f"unsupported change status {status!r}")
            if kind is ChangeKind.REMOVED:
                changes.append(TreeChange(path=path, kind=kind))
            else:
                changes.append(TreeChange(path=path, kind=kind, blob=new_blob, mode=new_mode))
        return changes

    # ------------------------------------------------------------------
    # Internals

    def _git(self, args: Sequence[str]) -> bytes:
        command = ["git", f"--git-dir={self.git_dir}", *args]
        self.logger.debug("Running %s", " ".join(command))
        return self._runner(command, cwd=self.git_dir)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> bytes:
        command = list(args)
        try:
            completed = subprocess.run(command, cwd=str(cwd), capture_output=True, check=False)
        except OSError as exc:
            raise GitError(command, str(exc)) from exc
        if completed.returncode != 0:
            raise GitError(
                command,
                completed.stderr.decode("utf-8", "replace"),
                returncode=completed.returncode,
            )
        return completed.stdout


def _split_z(output: bytes) -> List[str]:
    text = output.decode("utf-8", "surrogateescape")
    return [token for token in text.split("\0") if token]


__all__ = ["GitRepository", "REGULAR_FILE_MODES", "Runner", "is_revision_id"]
