from gitolite_client.client import (
    Client,
    init_client,
    slugify,
)
from gitolite_client.entities import (
    Entity,
    EntityType,
    Group,
    Groupable,
    GroupType,
    Placeholder,
    Repository,
    Rule,
    User,
)
from gitolite_client.exceptions import (
    GitoliteError,
    StorageError,
    ValidationError,
)
from gitolite_client.file import File
from gitolite_client.filesystem import (
    FileSystem,
    SaveResult,
)

__all__ = [
    "Client",
    "Entity",
    "EntityType",
    "File",
    "FileSystem",
    "GitoliteError",
    "Group",
    "GroupType",
    "Groupable",
    "Placeholder",
    "Repository",
    "Rule",
    "SaveResult",
    "StorageError",
    "User",
    "ValidationError",
    "init_client",
    "slugify",
]
