"""
LeeCMS Renderer -- Empty and Malformed Tree Tests

A malformed persisted tree is equivalent to an empty one:
  - not a list (None, dict, string) → "no content" placeholder
  - a list with no dict rows → placeholder
  - rows missing `components`, or with a non-dict mapping → empty columns

Edit mode's placeholder invites the first row; display mode's just says
there is nothing here.
"""

import pytest

from cms.kernel.renderer import render
from cms.kernel.types import RenderMode


@pytest.mark.parametrize("tree", [[], None, {}, "[]", 0, {"rows": []}])
def test_empty_or_non_list_tree_renders_placeholder(registry, tree):
    html = render(tree, "display", registry)
    assert "leecms-empty" in html
    assert "No Content Available" in html


def test_edit_mode_placeholder_offers_first_row(registry):
    html = render([], RenderMode.EDIT, registry)
    assert "Start Building Your Page" in html
    assert 'data-action="open-row-picker"' in html


def test_list_of_non_dict_rows_is_empty(registry):
    html = render(["row", 3, None], "display", registry)
    assert "No Content Available" in html


def test_non_dict_rows_skipped_among_valid_ones(registry, make_row):
    tree = ["garbage", make_row("100", id="row_ok")]
    html = render(tree, "edit", registry)
    assert 'id="row_ok"' in html
    # Index is the row's real position in the tree
    assert 'data-row="1"' in html
    assert "Row 2 (100)" in html


def test_row_without_components(registry):
    html = render([{"id": "row_bare", "layout": "50-50"}], "display", registry)
    assert html.count('class="leecms-column w-1/2"') == 2
    assert "leecms-empty" not in html


def test_row_with_non_dict_components(registry):
    html = render([{"id": "r", "layout": "100", "components": ["oops"]}], "display", registry)
    assert 'class="leecms-column w-full"' in html


def test_column_key_with_non_list_value(registry, make_row):
    html = render([make_row("100", col_1="not-a-list")], "display", registry)
    assert 'data-col-key="col_1"></div>' in html


def test_invalid_mode_raises(registry):
    with pytest.raises(ValueError):
        render([], "preview", registry)
