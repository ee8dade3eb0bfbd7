import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import TypeVar

from gitolite_client import config
from gitolite_client.entities import (
    Entity,
    EntityType,
    Group,
    Groupable,
    GroupType,
    Repository,
    User,
)
from gitolite_client.exceptions import ValidationError
from gitolite_client.filesystem import (
    FileSystem,
    SaveResult,
)
from gitolite_client.utils.git import (
    GitRepository,
    clone,
)

INSTALL_COMMIT_MESSAGE = "Installed"

SLUG_RE = re.compile(r"[^A-Za-z0-9@._]+")

E = TypeVar("E", bound=Entity)


def slugify(value: str) -> str:
    return SLUG_RE.sub("-", value).strip("-")


def _as_entity_list(entities: Entity | Iterable[Entity], action: str) -> list[Entity]:
    if isinstance(entities, Entity):
        entity_list = [entities]
    elif isinstance(entities, Iterable):
        entity_list = list(entities)
    else:
        raise ValidationError(f"Client.{action}() given a non Entity object")
    for entity in entity_list:
        if not isinstance(entity, Entity):
            raise ValidationError(f"Client.{action}() given a non Entity object")
    return entity_list


class Client:
    """
    Entry point to a gitolite admin repository.

    Entities loaded through a client are cached, so loading the same user,
    group or repository twice returns the same instance.
    """

    slug = staticmethod(slugify)

    def __init__(
        self,
        admin_repository: GitRepository,
        file_system: FileSystem,
        author: str | None = None,
    ) -> None:
        self.admin_repository = admin_repository
        self.file_system = file_system
        self.author = author
        self._cache: dict[tuple[EntityType, str], Entity] = {}

    def _cache_set(self, entity: E) -> E:
        self._cache[(entity.entity_type, entity.id)] = entity
        return entity

    def _cache_get(self, entity_type: EntityType, entity_id: str) -> Entity | None:
        entity = self._cache.get((entity_type, entity_id))
        if entity is not None:
            logging.debug(["cache_hit", str(entity_type), entity_id])
        return entity

    def _cache_unset(self, entity: Entity) -> None:
        for key in [k for k, v in self._cache.items() if v is entity]:
            del self._cache[key]

    def load_user(self, username: str) -> User:
        username = slugify(username)
        user = self._cache_get(EntityType.USER, username)
        if isinstance(user, User):
            return user
        return self._cache_set(self.file_system.load_user(username))

    def load_users(self) -> dict[str, User]:
        users = self.file_system.load_users()
        for user in users.values():
            self._cache_set(user)
        return users

    def load_group(self, name: str, group_type: str | GroupType) -> Group:
        name = slugify(name)
        group_type = GroupType.from_value(group_type)
        group = self._cache_get(EntityType.GROUP, f"{group_type.value}:{name}")
        if isinstance(group, Group):
            return group
        return self._cache_set(self.file_system.load_group(name, group_type))

    def load_groups(self, group_type: str | GroupType) -> list[Group]:
        groups = self.file_system.load_groups(GroupType.from_value(group_type))
        for group in groups:
            self._cache_set(group)
        return groups

    def load_repository(self, name: str) -> Repository:
        name = slugify(name)
        repository = self._cache_get(EntityType.REPOSITORY, name)
        if isinstance(repository, Repository):
            return repository
        repository = self._cache_set(self.file_system.load_repository(name))
        # the embedded `repo` line may name it differently than its file
        self._cache[(EntityType.REPOSITORY, name)] = repository
        return repository

    def resolve(
        self, item: Groupable, group_type: str | GroupType = GroupType.USER
    ) -> Entity:
        """
        Look up the entity behind a group member or rule target.

        Labels starting with `@` are groups of the given type, other labels
        are users (user groups) or repositories (repository groups).
        """
        if isinstance(item, Entity):
            return item
        label = item.groupable_label
        group_type = GroupType.from_value(group_type)
        if label.startswith("@"):
            return self.load_group(label[1:], group_type)
        if group_type == GroupType.USER:
            return self.load_user(label)
        return self.load_repository(label)

    def save(
        self,
        entities: Entity | Iterable[Entity],
        commit_message: str | None = None,
    ) -> SaveResult:
        """
        Save entities to the admin repository and stage the changed files.

        :param commit_message: commit the changes with this message. Nothing
            is committed if it is empty or no file changed.
        """
        entity_list = _as_entity_list(entities, "save")

        result = SaveResult()
        for entity in entity_list:
            file_paths = self.file_system.save(entity)
            if file_paths.added:
                self.admin_repository.add(file_paths.added)
            if file_paths.deleted:
                self.admin_repository.remove(file_paths.deleted)
            result.extend(file_paths)

        if commit_message and result.changed:
            self.admin_repository.commit(commit_message, author=self.author)
        return result

    def delete(
        self,
        entities: Entity | Iterable[Entity],
        commit_message: str | None = None,
    ) -> list[str]:
        entity_list = _as_entity_list(entities, "delete")

        removed: list[str] = []
        for entity in entity_list:
            file_paths = self.file_system.delete(entity)
            self._cache_unset(entity)
            if file_paths:
                self.admin_repository.remove(file_paths)
            removed.extend(file_paths)

        if commit_message and removed:
            self.admin_repository.commit(commit_message, author=self.author)
        return removed

    def push(self) -> None:
        """Push to the remote. Changes only take effect once pushed."""
        self.admin_repository.push()

    def install(self) -> bool:
        """
        Add the managed includes to the gitolite config.
        Safe to run more than once.
        """
        config_file = self.file_system.setup_includes()
        if not config_file:
            return False
        self.admin_repository.add([config_file])
        self.admin_repository.commit(
            INSTALL_COMMIT_MESSAGE, author=self.author, paths=[config_file]
        )
        self.admin_repository.push()
        return True


def init_client(configfile: str | None = None) -> Client:
    config.init_from_toml(configfile)
    settings = config.get_gitolite_settings()

    root = Path(settings.root)
    if settings.admin_repo_url and not root.exists():
        logging.info(["clone", settings.admin_repo_url, str(root)])
        clone(settings.admin_repo_url, root)

    return Client(
        GitRepository(root),
        FileSystem(root, settings.paths, settings.includes),
        author=settings.author,
    )
