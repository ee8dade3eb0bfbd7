from typing import Any


class GitoliteError(Exception):
    pass


class ValidationError(GitoliteError):
    pass


class StorageError(GitoliteError):
    def __init__(self, path: Any, msg: Any) -> None:
        self.path = str(path)
        super().__init__(f"{msg}: {path}")
