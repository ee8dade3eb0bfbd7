import pytest

from gitolite_client.entities import (
    EntityType,
    Group,
    Placeholder,
    Repository,
    Rule,
    User,
)
from gitolite_client.file import File


def test_rule_str():
    rule = Rule(" RW+ ", ["master", "refs/tags/v[0-9]"], Placeholder("@admins"))
    assert rule.permission == "RW+"
    assert str(rule) == "\tRW+ master refs/tags/v[0-9] = @admins"


def test_rule_refexes_are_unique():
    rule = Rule("RW", ["master", "dev", "master"], User("alice"))
    rule.add_refex("dev")
    assert list(rule.refexes) == ["master", "dev"]


def test_rule_equality():
    assert Rule("R", ["a", "b"], User("bob")) == Rule(
        "R", ["b", "a"], Placeholder("bob")
    )
    assert Rule("R", [], User("bob")) != Rule("RW", [], User("bob"))
    assert Rule("R", [], Group("devs", "user")) != Rule("R", [], User("devs"))


def test_repository_identity():
    repo = Repository("Foo")
    assert repo.entity_type == EntityType.REPOSITORY
    assert repo.id == "Foo"
    assert repo.filename == "foo.conf"


def test_load_repository_with_comments():
    file = File("foo.conf", "repo foo\n\tRW+ = @admins\n\tR = bob # comment")
    repo = Repository("foo", file)
    assert repo.name == "foo"
    assert [
        (r.permission, list(r.refexes), r.entity.groupable_label)
        for r in repo.rules
    ] == [
        ("RW+", [], "@admins"),
        ("R", [], "bob"),
    ]


def test_load_repository_refexes():
    file = File("foo.conf", "repo foo\n    RW  master  dev  =  alice\n")
    [rule] = Repository("foo", file).rules
    assert rule.permission == "RW"
    assert list(rule.refexes) == ["master", "dev"]
    assert rule.entity == Placeholder("alice")


def test_load_repository_embedded_name_wins():
    repo = Repository("foo", File("foo.conf", "repo Foo\n\tR = bob\n"))
    assert repo.name == "Foo"


def test_load_repository_skips_malformed_lines():
    content = (
        "repo foo\n"
        "# a comment\n"
        "\n"
        "\tRW+ master\n"
        "\t = nobody\n"
        "\tR =\n"
        "\tR = bob\n"
    )
    repo = Repository("foo", File("foo.conf", content))
    assert repo.rules == [Rule("R", [], Placeholder("bob"))]


def test_load_repository_replaces_rules():
    repo = Repository("foo")
    repo.add_rule(Rule("RW", [], Placeholder("alice")))
    repo.add_file(File("foo.conf", "repo foo\n\tR = bob\n"))
    repo.load()
    assert repo.rules == [Rule("R", [], Placeholder("bob"))]


def test_add_rule_moves_equal_rule_to_the_end():
    repo = Repository("foo")
    first = Rule("RW+", [], Placeholder("@admins"))
    second = Rule("R", [], Placeholder("bob"))
    repo.add_rule(first)
    repo.add_rule(second)
    repo.add_rule(Rule("RW+", [], User("@admins")))
    assert repo.rules == [second, first]


def test_remove_first_rule():
    repo = Repository("foo")
    first = Rule("RW+", [], Placeholder("@admins"))
    repo.add_rule(first)
    repo.add_rule(Rule("R", [], Placeholder("bob")))
    repo.remove_rule(Rule("RW+", [], Placeholder("@admins")))
    assert repo.rules == [Rule("R", [], Placeholder("bob"))]


def test_remove_all_rules():
    repo = Repository("foo")
    repo.add_rule(Rule("R", [], Placeholder("bob")))
    repo.remove_all_rules()
    assert repo.rules == []


def test_repository_get_files():
    repo = Repository("Foo")
    repo.add_rule(Rule("RW+", ["master"], Placeholder("@admins")))
    repo.add_rule(Rule("R", [], Placeholder("bob")))
    [file] = repo.get_files()
    assert file.filename == "foo.conf"
    assert file.content == "repo Foo\n\tRW+ master = @admins\n\tR  = bob\n"


@pytest.mark.parametrize(
    "rules",
    [
        [],
        [Rule("R", [], Placeholder("bob"))],
        [
            Rule("RW+", ["master", "dev"], Placeholder("@admins")),
            Rule("-", ["refs/tags/"], Placeholder("@interns")),
            Rule("R", [], Placeholder("@all")),
        ],
    ],
)
def test_repository_roundtrip(rules):
    repo = Repository("foo")
    for rule in rules:
        repo.add_rule(rule)
    [file] = repo.get_files()

    loaded = Repository("foo", file)
    assert loaded.name == "foo"
    assert loaded.rules == rules
    assert [list(r.refexes) for r in loaded.rules] == [
        list(r.refexes) for r in rules
    ]


def test_entities_hash_like_equal_placeholders():
    assert User("alice") in {Placeholder("alice")}
    assert Placeholder("alice") in {User("alice")}
    assert Group("admins", "user") in {Placeholder("@admins")}
    assert Placeholder("@admins") in {Group("admins", "user"): None}
