from gitolite_client.entities.base import (
    Entity,
    EntityType,
    Groupable,
    Placeholder,
)
from gitolite_client.entities.group import (
    Group,
    GroupType,
)
from gitolite_client.entities.repository import (
    Repository,
    Rule,
)
from gitolite_client.entities.user import User

__all__ = [
    "Entity",
    "EntityType",
    "Group",
    "GroupType",
    "Groupable",
    "Placeholder",
    "Repository",
    "Rule",
    "User",
]
