import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path


class GitError(Exception):
    pass


def clone(repo_url: str, wd: str | Path, depth: int | None = None) -> None:
    cmd = ["git", "clone"]
    if depth:
        cmd += ["--depth", str(depth)]
    cmd += [repo_url, str(wd)]
    result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        raise GitError(f"git clone failed: {repo_url}: {result.stderr}")


class GitRepository:
    """
    Thin wrapper around the git executable for a single working tree.
    """

    def __init__(self, wd: str | Path) -> None:
        self.wd = Path(wd)

    def _run(self, *args: str) -> str:
        cmd = ["git", *args]
        result = subprocess.run(
            cmd, cwd=self.wd, capture_output=True, text=True, check=False
        )
        if result.returncode != 0:
            raise GitError(f"git {args[0]} failed: {result.stderr}")
        return result.stdout

    def add(self, paths: Iterable[str | Path]) -> None:
        paths = [str(p) for p in paths]
        if not paths:
            return
        logging.info(["git_add", paths])
        self._run("add", "--", *paths)

    def remove(self, paths: Iterable[str | Path]) -> None:
        paths = [str(p) for p in paths]
        if not paths:
            return
        logging.info(["git_rm", paths])
        self._run("rm", "--quiet", "--ignore-unmatch", "--", *paths)

    def commit(
        self,
        message: str,
        author: str | None = None,
        paths: Iterable[str | Path] | None = None,
    ) -> None:
        args = ["commit", "--message", message]
        if author:
            args += ["--author", author]
        if paths is not None:
            args += ["--", *[str(p) for p in paths]]
        logging.info(["git_commit", message])
        self._run(*args)

    def push(self, remote: str | None = None, branch: str | None = None) -> None:
        args = ["push"]
        if remote:
            args.append(remote)
            if branch:
                args.append(branch)
        logging.info(["git_push", remote, branch])
        self._run(*args)
