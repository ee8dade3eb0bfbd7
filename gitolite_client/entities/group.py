import re
from enum import StrEnum
from typing import NamedTuple

from gitolite_client.entities.base import (
    Entity,
    EntityType,
    Groupable,
    Placeholder,
)
from gitolite_client.exceptions import ValidationError
from gitolite_client.file import File

COMMENT_RE = re.compile(r"#.*")
GROUP_FILENAME_RE = re.compile(r"^(?P<type>user|repository)\.(?P<name>.+)\.conf$")


class GroupType(StrEnum):
    USER = "User"
    REPOSITORY = "Repository"

    @classmethod
    def from_value(cls, value: "str | GroupType") -> "GroupType":
        if isinstance(value, GroupType):
            return value
        for group_type in cls:
            if str(value).lower() == group_type.value.lower():
                return group_type
        raise ValidationError(f"Invalid group type: {value}")


class GroupFilename(NamedTuple):
    group_type: GroupType
    name: str


def format_group_filename(name: str, group_type: str | GroupType) -> str:
    group_type = GroupType.from_value(group_type)
    return f"{group_type.value}.{name}.conf".lower()


def parse_group_filename(filename: str) -> GroupFilename | None:
    m = GROUP_FILENAME_RE.match(filename)
    if not m:
        return None
    return GroupFilename(
        group_type=GroupType.from_value(m.group("type")), name=m.group("name")
    )


class Group(Entity):
    """
    A named set of users or repositories.

    Members are kept by label: a bare name for users and repositories,
    `@name` for nested groups. Parsed members are Placeholders.
    """

    def __init__(
        self, name: str, group_type: str | GroupType, file: File | None = None
    ) -> None:
        self.group_type = GroupType.from_value(group_type)
        self.items: dict[str, Groupable] = {}
        super().__init__(EntityType.GROUP, name, [file] if file else [])

    @property
    def id(self) -> str:
        return f"{self.group_type.value}:{self.name}"

    @property
    def groupable_label(self) -> str:
        return f"@{self.name}"

    @property
    def filename(self) -> str:
        return format_group_filename(self.name, self.group_type)

    def add_item(self, item: Groupable) -> None:
        self.items[item.groupable_label] = item

    def remove_item(self, item: str | Groupable) -> None:
        label = item if isinstance(item, str) else item.groupable_label
        self.items.pop(label, None)

    def load(self) -> None:
        file = self.files.get(self.filename)
        if file is None:
            return
        # the filename is lowercased, so the group may be named in any case
        line_re = re.compile(
            rf"^@{re.escape(self.name)}\s*=(?P<labels>.*)$", re.IGNORECASE
        )
        for line in file.content.strip().split("\n"):
            m = line_re.match(COMMENT_RE.sub("", line).strip())
            if not m:
                continue
            for label in m.group("labels").split():
                self.add_item(Placeholder(label))

    def get_files(self) -> list[File]:
        label = self.groupable_label
        content = "".join(
            f"{label} = {item.groupable_label}\n" for item in self.items.values()
        )
        self.files = {self.filename: File(self.filename, content)}
        return super().get_files()
