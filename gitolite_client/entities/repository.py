import re
from collections.abc import Iterable
from typing import Any

from gitolite_client.entities.base import (
    Entity,
    EntityType,
    Groupable,
    Placeholder,
)
from gitolite_client.file import File

COMMENT_RE = re.compile(r"#.*")
REPO_LINE_RE = re.compile(r"^repo\s+(?P<name>\S+)")


def format_repository_filename(name: str) -> str:
    return f"{name}.conf".lower()


class Rule:
    """
    A single access rule of a repository, e.g. `RW+ master = @admins`.
    See https://gitolite.com/gitolite/conf.html#rules
    """

    def __init__(
        self, permission: str, refexes: Iterable[str], entity: Groupable
    ) -> None:
        self.permission = permission.strip()
        # dict keys keep insertion order and drop duplicates
        self.refexes: dict[str, None] = {}
        for refex in refexes:
            self.add_refex(refex)
        self.entity = entity

    def add_refex(self, refex: str) -> None:
        self.refexes[refex] = None

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return (
            self.permission == other.permission
            and set(self.refexes) == set(other.refexes)
            and self.entity.groupable_label == other.entity.groupable_label
        )

    def __hash__(self) -> int:
        return hash((
            self.permission,
            frozenset(self.refexes),
            self.entity.groupable_label,
        ))

    def __str__(self) -> str:
        refexes = " ".join(self.refexes)
        return f"\t{self.permission} {refexes} = {self.entity.groupable_label}"

    def __repr__(self) -> str:
        return (
            f"Rule({self.permission!r}, {list(self.refexes)!r}, "
            f"{self.entity.groupable_label!r})"
        )


class Repository(Entity):
    """
    A repository block of the gitolite config. Rule order is significant
    and preserved across load and save.
    """

    def __init__(self, name: str, file: File | None = None) -> None:
        self.rules: list[Rule] = []
        super().__init__(EntityType.REPOSITORY, name, [file] if file else [])

    @property
    def filename(self) -> str:
        return format_repository_filename(self.name)

    def add_rule(self, rule: Rule) -> None:
        self.remove_rule(rule)
        self.rules.append(rule)

    def remove_rule(self, rule: Rule) -> None:
        self.rules = [r for r in self.rules if r != rule]

    def remove_all_rules(self) -> None:
        self.rules = []

    def load(self) -> None:
        file = self.files.get(self.filename)
        if file is None:
            return
        lines = file.content.strip().split("\n")
        m = REPO_LINE_RE.match(lines[0].strip())
        if m:
            self.name = m.group("name")

        self.rules = []
        for line in lines[1:]:
            line = COMMENT_RE.sub("", line)
            lhs, sep, rhs = line.partition("=")
            parts = lhs.split()
            if not sep or not parts or not rhs.strip():
                continue
            permission, *refexes = parts
            self.add_rule(Rule(permission, refexes, Placeholder(rhs.strip())))

    def get_files(self) -> list[File]:
        content = f"repo {self.name}\n"
        content += "".join(f"{rule}\n" for rule in self.rules)
        self.files = {self.filename: File(self.filename, content)}
        return super().get_files()
