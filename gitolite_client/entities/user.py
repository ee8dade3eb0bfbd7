import re
from collections.abc import (
    Iterable,
    Mapping,
)
from typing import NamedTuple

from gitolite_client.entities.base import (
    Entity,
    EntityType,
)
from gitolite_client.file import File

KEY_SUFFIX = ".pub"

# usernames and references containing "@" can not be told apart
KEY_FILENAME_RE = re.compile(r"^(?P<username>.+)@(?P<reference>[^@/]+)\.pub$")


class KeyFilename(NamedTuple):
    username: str
    reference: str


def format_key_filename(username: str, reference: str) -> str:
    return f"{username}@{reference}{KEY_SUFFIX}"


def parse_key_filename(filename: str) -> KeyFilename | None:
    m = KEY_FILENAME_RE.match(filename)
    if not m:
        return None
    return KeyFilename(username=m.group("username"), reference=m.group("reference"))


class User(Entity):
    """
    A gitolite user. Its state is the set of public key files in the keydir,
    one file per key reference.
    """

    def __init__(self, name: str, files: Iterable[File] = ()) -> None:
        super().__init__(EntityType.USER, name, files)

    def key_filename(self, reference: str) -> str:
        return format_key_filename(self.name, reference)

    def add_key(self, reference: str, value: str) -> None:
        self.add_file(File(self.key_filename(reference), value))

    def add_keys(self, keys: Iterable[Mapping[str, str]]) -> None:
        for key in keys:
            self.add_key(key["reference"], key["value"])

    def delete_key(self, reference: str) -> None:
        filename = self.key_filename(reference)
        key_file = self.get_file(filename)
        if key_file is None:
            raise KeyError(f"user {self.name} has no key {reference}")
        key_file.mark_deleted()

    @property
    def keys(self) -> dict[str, str]:
        keys = {}
        for f in self.files.values():
            parsed = parse_key_filename(f.filename)
            if parsed and not f.deleted:
                keys[parsed.reference] = f.content
        return keys

    def load(self) -> None:
        pass
