from abc import (
    ABC,
    abstractmethod,
)
from collections.abc import Iterable
from enum import StrEnum
from typing import (
    Any,
    Protocol,
    runtime_checkable,
)

from gitolite_client.file import File


class EntityType(StrEnum):
    USER = "User"
    GROUP = "Group"
    REPOSITORY = "Repository"


@runtime_checkable
class Groupable(Protocol):
    """This protocol defines what an object needs to be a member of
    a group or the target of a rule."""

    @property
    def groupable_label(self) -> str:
        pass


class Placeholder:
    """
    Label-only stand-in for a group member or rule target whose entity
    has not been loaded. It is never persisted on its own.
    """

    def __init__(self, label: str) -> None:
        self.name = label

    @property
    def groupable_label(self) -> str:
        return self.name

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Groupable):
            return NotImplemented
        return self.groupable_label == other.groupable_label

    def __hash__(self) -> int:
        return hash(self.groupable_label)

    def __repr__(self) -> str:
        return f"Placeholder({self.name!r})"


class Entity(ABC):
    """
    Base class for all file backed gitolite objects.

    The files handed to the constructor are attached and parsed right away
    via `load`.
    """

    def __init__(
        self, entity_type: EntityType, name: str, files: Iterable[File] = ()
    ) -> None:
        self.entity_type = EntityType(entity_type)
        self.name = name
        self.files: dict[str, File] = {}
        for f in files:
            self.add_file(f)
        self.load()

    @property
    def id(self) -> str:
        return self.name

    @property
    def groupable_label(self) -> str:
        return self.name

    # equal to Placeholders carrying the same label, so hash alike
    def __hash__(self) -> int:
        return hash(self.groupable_label)

    def add_file(self, file: File) -> None:
        self.files[file.filename] = file

    def remove_file(self, file: File) -> None:
        self.files.pop(file.filename, None)

    def get_file(self, filename: str) -> File | None:
        return self.files.get(filename)

    def get_files(self) -> list[File]:
        """
        Returns the files representing the current state of the entity.
        Subclasses with a textual format regenerate their content here.
        """
        return list(self.files.values())

    @abstractmethod
    def load(self) -> None:
        """Parses the attached files into the typed state of the entity."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"
