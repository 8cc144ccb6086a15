"""Behaviour tests for the external link policy.

Scenarios in ``external_links.feature`` render a one-line markdown body with
``MarkupTransformer`` and check the ``target`` and ``rel`` attributes the
pipeline gives the resulting anchor.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup, Tag
from pytest_bdd import given, parsers, scenarios, then, when

from sitefold.config import MarkupOptions
from sitefold.markup import MarkupTransformer

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "external_links.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given(parsers.parse('a post linking to "{href}"'))
def given_post_link(href: str, scenario_state: dict[str, object]) -> None:
    """Store a markdown body containing a single link."""
    scenario_state["markdown"] = f"Read [this]({href}) first.\n"


@given(parsers.parse("a post containing the raw HTML '{markup}'"))
def given_post_raw_html(markup: str, scenario_state: dict[str, object]) -> None:
    """Store a markdown body with an inline HTML anchor."""
    scenario_state["markdown"] = f"Read {markup} first.\n"


def _render(scenario_state: dict[str, object], options: MarkupOptions) -> None:
    html = MarkupTransformer(options).render(str(scenario_state["markdown"]))
    anchor = BeautifulSoup(html, "html.parser").find("a")
    assert isinstance(anchor, Tag), f"expected an anchor in {html!r}"
    scenario_state["anchor"] = anchor


@when("I render the post with no trusted domains")
def when_render_untrusted(scenario_state: dict[str, object]) -> None:
    """Render with an empty nofollow exception set."""
    _render(scenario_state, MarkupOptions())


@when(parsers.parse('I render the post trusting "{domain}"'))
def when_render_trusted(domain: str, scenario_state: dict[str, object]) -> None:
    """Render with ``domain`` exempt from ``nofollow``."""
    _render(scenario_state, MarkupOptions.build(nofollow_exceptions=[domain]))


def _anchor(scenario_state: dict[str, object]) -> Tag:
    return scenario_state["anchor"]  # type: ignore[return-value]


@then("the link opens in a new tab")
def then_new_tab(scenario_state: dict[str, object]) -> None:
    """Verify the anchor targets a new browsing context."""
    target = _anchor(scenario_state).get("target")
    assert target == "_blank", f"expected target _blank, got {target!r}"


@then(parsers.parse('the link rel is "{rel}"'))
def then_rel(rel: str, scenario_state: dict[str, object]) -> None:
    """Verify the ``rel`` tokens on the anchor."""
    actual = " ".join(_anchor(scenario_state).get_attribute_list("rel"))
    assert actual == rel, f"expected rel {rel!r}, got {actual!r}"


@then(parsers.parse('the link points to "{href}"'))
def then_href(href: str, scenario_state: dict[str, object]) -> None:
    """Verify the rewritten ``href``."""
    actual = _anchor(scenario_state).get("href")
    assert actual == href, f"expected href {href!r}, got {actual!r}"


@then("the link has no target")
def then_no_target(scenario_state: dict[str, object]) -> None:
    """Verify internal links stay in the current tab."""
    assert _anchor(scenario_state).get("target") is None
