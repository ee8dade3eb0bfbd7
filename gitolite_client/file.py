from dataclasses import dataclass


@dataclass
class File:
    """A unit of persistence: a named blob of text owned by an entity."""

    filename: str
    content: str = ""
    deleted: bool = False

    def mark_deleted(self, deleted: bool = True) -> None:
        self.deleted = bool(deleted)
