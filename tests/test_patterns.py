from hookengine.patterns import is_wildcard, match_patterns, pattern_matches, split_segments


def test_split_segments_keeps_delimiters() -> None:
    assert split_segments("db.messages.create:action:before") == (
        "db",
        ".",
        "messages",
        ".",
        "create",
        ":",
        "action",
        ":",
        "before",
    )


def test_wildcard_matches_exactly_one_token() -> None:
    pattern = "db.*.create:action:before"

    assert pattern_matches(pattern, "db.messages.create:action:before")
    assert pattern_matches(pattern, "db.threads.create:action:before")
    assert not pattern_matches(pattern, "db.messages.update:action:before")
    assert not pattern_matches(pattern, "db.messages.files.create:action:before")
    assert not pattern_matches(pattern, "db..create:action:before")


def test_wildcard_does_not_cross_delimiter_kinds() -> None:
    assert pattern_matches("ui.pane.*:action", "ui.pane.blur:action")
    assert not pattern_matches("ui.pane.*:action", "ui.pane:blur:action")
    assert pattern_matches("notify:action:*", "notify:action:push")
    assert not pattern_matches("notify:*", "notify:action:push")


def test_exact_pattern_and_mixed_tokens_compare_literally() -> None:
    assert pattern_matches("a.b", "a.b")
    assert not pattern_matches("a.b", "a.c")
    assert is_wildcard("ai.msg*")
    assert not pattern_matches("ai.msg*", "ai.msgs")
    assert pattern_matches("ai.msg*", "ai.msg*")


def test_match_patterns_preserves_input_order() -> None:
    patterns = ["db.*.create:action:before", "db.messages.*:action:before", "db.*.*:action:after"]

    assert match_patterns("db.messages.create:action:before", patterns) == patterns[:2]
    assert match_patterns("db.posts.list:action:after", patterns) == ["db.*.*:action:after"]
    assert match_patterns("sync.error:action", patterns) == []
