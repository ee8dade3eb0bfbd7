from pathlib import Path
from unittest.mock import create_autospec

import pytest

from gitolite_client.client import Client
from gitolite_client.filesystem import FileSystem
from gitolite_client.utils.git import GitRepository

GITOLITE_CONF = """repo gitolite-admin
    RW+     =   admin

repo testing
    RW+     =   @all
"""


@pytest.fixture
def admin_dir(tmp_path: Path) -> Path:
    conf = tmp_path / "conf"
    conf.mkdir()
    (conf / "gitolite.conf").write_text(GITOLITE_CONF)
    (tmp_path / "keydir").mkdir()
    return tmp_path


@pytest.fixture
def file_system(admin_dir: Path) -> FileSystem:
    return FileSystem(admin_dir)


@pytest.fixture
def git_repository():
    return create_autospec(GitRepository, instance=True)


@pytest.fixture
def client(git_repository, file_system: FileSystem) -> Client:
    return Client(git_repository, file_system)
