import logging
import re
from collections.abc import Mapping
from dataclasses import (
    dataclass,
    field,
)
from pathlib import Path

from gitolite_client.entities import (
    Entity,
    EntityType,
    Group,
    GroupType,
    Repository,
    User,
)
from gitolite_client.entities.group import (
    format_group_filename,
    parse_group_filename,
)
from gitolite_client.entities.repository import format_repository_filename
from gitolite_client.entities.user import (
    format_key_filename,
    parse_key_filename,
)
from gitolite_client.exceptions import (
    StorageError,
    ValidationError,
)
from gitolite_client.file import File

DEFAULT_PATHS = {
    "keys": "keydir",
    "configuration": "conf/gitolite.conf",
    "groups": "conf/managed/groups",
    "repositories": "conf/managed/repos",
}

# include statement -> regex telling whether it is already present
DEFAULT_INCLUDES = {
    "managed/groups/*.conf": r"managed\/groups\/\*\.conf",
    "managed/repos/*.conf": r"managed\/repos\/\*\.conf",
}

SAVE_PATH_RESOURCES = {
    EntityType.USER: "keys",
    EntityType.GROUP: "groups",
    EntityType.REPOSITORY: "repositories",
}


@dataclass
class SaveResult:
    added: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    def extend(self, other: "SaveResult") -> None:
        self.added.extend(other.added)
        self.deleted.extend(other.deleted)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.deleted)


class FileSystem:
    """
    Maps entities to the on-disk layout of a gitolite admin repository.

    It only reads and writes files; staging and committing the changed
    paths is up to the caller.
    """

    def __init__(
        self,
        directory: str | Path,
        paths: Mapping[str, str] | None = None,
        includes: Mapping[str, str] | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.paths = dict(DEFAULT_PATHS)
        self.includes = dict(DEFAULT_INCLUDES)
        # custom paths only make sense together with matching includes
        if paths is not None and includes is not None:
            self.paths = dict(paths)
            self.includes = dict(includes)

    def get_path(self, resource: str) -> Path:
        return self.directory / self.paths[resource]

    def get_entity_save_path(self, entity: Entity | EntityType | str) -> Path:
        entity_type = entity.entity_type if isinstance(entity, Entity) else entity
        try:
            resource = SAVE_PATH_RESOURCES[EntityType(entity_type)]
        except ValueError:
            raise ValidationError(f"unknown entity type: {entity_type}") from None
        return self.get_path(resource)

    def setup_includes(self) -> str | None:
        """
        Ensure the managed includes are present in the gitolite config file.

        :return: the path of the config file if it was changed, None otherwise
        """
        filepath = self.get_path("configuration")
        config = self._read(filepath)

        missing_includes = [
            f'include "{include}"'
            for include, regex in self.includes.items()
            if not re.search(rf'include\s+"{regex}"', config)
        ]
        if not missing_includes:
            return None

        config += "\n" + "\n".join(missing_includes)
        self._write(filepath, config)
        logging.info(["setup_includes", str(filepath), missing_includes])
        return str(filepath)

    def find_key_files(self, username: str = "*") -> list[Path]:
        key_dir = self.get_entity_save_path(EntityType.USER)
        return sorted(key_dir.glob(format_key_filename(username, "*")))

    def load_user(self, username: str) -> User:
        key_files = []
        for key_file_path in self.find_key_files(username):
            parsed = parse_key_filename(key_file_path.name)
            # "bob@*.pub" also matches keys of a user named "bob@work"
            if parsed is None or parsed.username != username:
                continue
            key_file = self._load_file(key_file_path)
            if key_file is not None:
                key_files.append(key_file)
        logging.debug(["load_user", username, len(key_files)])
        return User(username, key_files)

    def load_users(self) -> dict[str, User]:
        users: dict[str, User] = {}
        for key_file_path in self.find_key_files():
            parsed = parse_key_filename(key_file_path.name)
            if parsed and parsed.username not in users:
                users[parsed.username] = self.load_user(parsed.username)
        return users

    def load_group(self, name: str, group_type: str | GroupType) -> Group:
        filename = format_group_filename(name, group_type)
        file = self._load_file(self.get_entity_save_path(EntityType.GROUP) / filename)
        logging.debug(["load_group", str(group_type), name, file is not None])
        return Group(name, group_type, file)

    def load_groups(self, group_type: str | GroupType) -> list[Group]:
        group_dir = self.get_entity_save_path(EntityType.GROUP)
        groups = []
        for group_file_path in sorted(
            group_dir.glob(format_group_filename("*", group_type))
        ):
            parsed = parse_group_filename(group_file_path.name)
            if parsed is None:
                continue
            file = self._load_file(group_file_path)
            groups.append(Group(parsed.name, group_type, file))
        return groups

    def load_repository(self, name: str) -> Repository:
        filename = format_repository_filename(name)
        file = self._load_file(
            self.get_entity_save_path(EntityType.REPOSITORY) / filename
        )
        logging.debug(["load_repository", name, file is not None])
        return Repository(name, file)

    def save(self, entity: Entity) -> SaveResult:
        """
        Write the files of an entity to disk.

        Only files whose content differs from what is on disk are written.

        :return: the paths written (added) and removed (deleted)
        """
        directory = self.get_entity_save_path(entity)
        self._ensure_directory(directory)

        result = SaveResult()
        for file in entity.get_files():
            file_path = directory / file.filename
            if file.deleted:
                if self._unlink(file_path):
                    result.deleted.append(str(file_path))
                entity.remove_file(file)
                continue

            current_content = self._read(file_path) if file_path.exists() else ""
            if file.content == current_content:
                continue

            self._write(file_path, file.content)
            result.added.append(str(file_path))

        logging.info([
            "save",
            str(entity.entity_type),
            entity.id,
            result.added,
            result.deleted,
        ])
        return result

    def delete(self, entity: Entity) -> list[str]:
        """
        Remove all files of an entity from disk. Missing files are ignored.

        :return: the paths which were actually removed
        """
        directory = self.get_entity_save_path(entity)
        removed = [
            str(directory / file.filename)
            for file in entity.get_files()
            if self._unlink(directory / file.filename)
        ]
        logging.info(["delete", str(entity.entity_type), entity.id, removed])
        return removed

    @staticmethod
    def _ensure_directory(directory: Path) -> None:
        if directory.exists():
            if not directory.is_dir():
                raise StorageError(directory, "not a directory")
            return
        try:
            directory.mkdir(mode=0o755, parents=True)
        except OSError as e:
            raise StorageError(directory, f"could not create directory ({e})") from e

    def _load_file(self, file_path: Path) -> File | None:
        if not file_path.exists():
            return None
        return File(file_path.name, self._read(file_path))

    @staticmethod
    def _read(file_path: Path) -> str:
        try:
            return file_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(file_path, f"could not read file ({e})") from e

    @staticmethod
    def _write(file_path: Path, content: str) -> None:
        try:
            file_path.write_bytes(content.encode("utf-8"))
        except OSError as e:
            raise StorageError(file_path, f"could not write file ({e})") from e

    @staticmethod
    def _unlink(file_path: Path) -> bool:
        if not file_path.exists():
            return False
        try:
            file_path.unlink()
        except OSError as e:
            raise StorageError(file_path, f"could not delete file ({e})") from e
        return True
