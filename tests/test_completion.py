"""
Completion tests: command names, option flags, option choices.
"""

from types import SimpleNamespace

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from cmdtree import command
from cmdtree.interface import PromptToolkitCLI, suggest


@pytest.fixture
def tree(app):
    app.add(
        command("paint")
        .option("color", choices=("red", "green", "blue"), aliases=("-c",))
        .option("dry-run", type=bool)
    )
    return app.root


def test_empty_buffer_lists_top_level_commands(tree) -> None:
    assert suggest(tree, "") == ["no_handler", "nok", "ok", "paint", "validation"]


def test_prefix_filters_names(tree) -> None:
    assert suggest(tree, "o") == ["ok"]
    assert suggest(tree, "  no") == ["no_handler", "nok"]


def test_children_after_a_completed_token(tree) -> None:
    assert suggest(tree, "ok ") == ["async", "sync"]
    assert suggest(tree, "ok s") == ["sync"]


def test_option_flags(tree) -> None:
    assert suggest(tree, "paint --") == ["--color", "--dry-run", "--help"]
    assert suggest(tree, "paint -") == ["--color", "--dry-run", "--help", "-c", "-h"]
    assert suggest(tree, "paint --", help=False) == ["--color", "--dry-run"]


def test_choices_follow_their_option(tree) -> None:
    assert suggest(tree, "paint --color ") == ["red", "green", "blue"]
    assert suggest(tree, "paint -c g") == ["green"]


def test_unknown_path_suggests_nothing_below_it(tree) -> None:
    assert suggest(tree, "bogus ") == ["no_handler", "nok", "ok", "paint", "validation"]
    assert suggest(tree, "ok sync ") == []


def test_unbalanced_quotes_fall_back_to_whitespace_split(tree) -> None:
    assert suggest(tree, 'ok "s') == []
    assert suggest(tree, 'paint "x" --c') == ["--color"]


def test_prompt_toolkit_completer_replaces_the_current_token(tree) -> None:
    frontend = PromptToolkitCLI(tree, session_factory=lambda **kwargs: SimpleNamespace(**kwargs))
    completer = frontend._session.completer

    completions = list(completer.get_completions(Document("ok sy"), CompleteEvent()))

    assert [c.text for c in completions] == ["sync"]
    assert completions[0].start_position == -2
