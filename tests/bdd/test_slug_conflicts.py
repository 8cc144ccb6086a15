"""Behaviour tests for slug conflicts and the strict-mode error policy.

The scenarios in ``slug_conflicts.feature`` and ``strict_mode.feature`` build
small content trees under ``tmp_path``, run ``parse_all`` and assert on the
posts returned or the ``ContentValidationError`` raised.

Usage
-----
Run ``pytest tests/bdd/test_slug_conflicts.py -v``. Only pytest's built-in
``tmp_path`` fixture and the shared ``write_post`` helper are required.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from sitefold.aggregator import ContentValidationError, parse_all
from sitefold.models import ErrorKind

if typ.TYPE_CHECKING:
    import collections.abc as cabc

FEATURES = Path(__file__).resolve().parents[2] / "features"
scenarios(
    FEATURES / "slug_conflicts.feature",
    FEATURES / "strict_mode.feature",
)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given(parsers.parse('a content tree with "{first}" and "{second}"'))
def given_two_files(
    first: str,
    second: str,
    write_post: cabc.Callable[..., Path],
    content_dir: Path,
    scenario_state: dict[str, object],
) -> None:
    """Write two posts whose dates match their year folders."""
    paths = [
        write_post(relative, f'title: "{relative}"\ndate: {relative[:4]}-03-01')
        for relative in (first, second)
    ]
    scenario_state["content_dir"] = content_dir
    scenario_state["paths"] = paths


@given("a content tree with one valid post and one post missing its date")
def given_broken_tree(
    write_post: cabc.Callable[..., Path],
    content_dir: Path,
    scenario_state: dict[str, object],
) -> None:
    """Write one valid post and one missing its ``date`` field."""
    write_post("2024/ok.md")
    write_post("2024/undated.md", 'title: "Undated"')
    scenario_state["content_dir"] = content_dir


def _parse(scenario_state: dict[str, object], *, strict: bool) -> None:
    content_dir: Path = scenario_state["content_dir"]  # type: ignore[assignment]
    try:
        scenario_state["posts"] = parse_all(content_dir, strict=strict)
    except ContentValidationError as exc:
        scenario_state["failure"] = exc


@when("I parse the content tree")
def when_parse(scenario_state: dict[str, object]) -> None:
    """Parse the tree with the default, non-strict policy."""
    _parse(scenario_state, strict=False)


@when("I parse the content tree in strict mode")
def when_parse_strict(scenario_state: dict[str, object]) -> None:
    """Parse the tree in strict mode."""
    _parse(scenario_state, strict=True)


def _failure(scenario_state: dict[str, object]) -> ContentValidationError:
    failure = scenario_state.get("failure")
    assert isinstance(failure, ContentValidationError), (
        f"expected the build to fail, got posts {scenario_state.get('posts')!r}"
    )
    return failure


@then(parsers.parse('the build fails with a slug conflict for "{url}"'))
def then_slug_conflict(url: str, scenario_state: dict[str, object]) -> None:
    """Verify a validation error names the contested URL."""
    failure = _failure(scenario_state)
    (error,) = failure.errors
    assert error.kind is ErrorKind.VALIDATION, f"unexpected kind {error.kind}"
    assert error.message.endswith(f"publish to {url}"), (
        f"expected conflict for {url!r}, got {error.message!r}"
    )


@then("the conflict names both files")
def then_conflict_names_files(scenario_state: dict[str, object]) -> None:
    """Verify every conflicting path appears in the error."""
    (error,) = _failure(scenario_state).errors
    paths: list[Path] = scenario_state["paths"]  # type: ignore[assignment]
    missing = [str(path) for path in paths if str(path) not in error.file]
    assert not missing, f"conflict error does not name {missing!r}: {error.file!r}"


@then(parsers.parse("the build succeeds with {count:d} posts"))
def then_build_succeeds(count: int, scenario_state: dict[str, object]) -> None:
    """Verify parsing returned the expected number of posts."""
    assert "failure" not in scenario_state, (
        f"unexpected failure: {scenario_state.get('failure')}"
    )
    posts = scenario_state["posts"]
    assert isinstance(posts, list)
    assert len(posts) == count, f"expected {count} posts, got {len(posts)}"


@then(parsers.parse("the build fails with {count:d} strict error"))
def then_strict_failure(count: int, scenario_state: dict[str, object]) -> None:
    """Verify strict mode promoted the parse error."""
    failure = _failure(scenario_state)
    assert failure.strict_count == count, (
        f"expected {count} strict errors, got {failure.strict_count}"
    )
    assert failure.validation_count == 0
