"""
LeeCMS Builder -- End-to-End Editing Scenarios

Whole editing sessions, checked against the rendered output as well as the
tree: what the builder holds is what the page shows.
"""

from cms.kernel.renderer import render


def test_build_delete_undo(make_builder, registry):
    b = make_builder()

    b.add_row("50-50")
    b.add_component_to_column(0, 0)
    instance = b.pick_component("text-block")

    assert instance["data"] == registry.default_data("text-block")
    assert b.tree[0]["components"]["col_1"] == [instance]
    assert b.history_length == 3
    with_text = b.snapshot()

    assert b.delete_row(0)
    assert b.tree == []
    assert "No Content Available" in render(b.tree, "display", registry)

    assert b.undo()
    assert b.tree == with_text
    assert "Enter your text content here..." in render(b.tree, "display", registry)


def test_move_only_row_up_is_noop(make_builder):
    b = make_builder()
    b.add_row()
    before = b.snapshot()
    length = b.history_length

    assert not b.move_row(0, "up")
    assert b.tree == before
    assert b.history_length == length


def test_edit_preview_matches_display_after_session(make_builder, registry):
    b = make_builder()
    b.add_row("70-30")
    b.add_component(0, 0, "hero-section")
    b.add_component(0, 1, "call-to-action")
    b.select_component(0, "col_1", 0)
    b.update_component_data(0, "col_1", 0, {**registry.default_data("hero-section"), "title": "Spring Sale"})
    b.deselect()

    display = render(b.tree, "display", registry)
    edit = render(b.tree, "edit", registry)
    assert "<h1>Spring Sale</h1>" in display
    assert "<h1>Spring Sale</h1>" in edit
    assert "data-action" in edit
    assert "data-action" not in display


async def test_save_round_trip(make_builder):
    stored = {}

    async def on_save(tree):
        stored["tree"] = tree

    b = make_builder(on_save=on_save)
    b.add_row("33-33-33")
    b.add_component(0, 2, "faq-section")
    result = await b.save()

    assert result.ok
    assert stored["tree"] == b.tree
    assert stored["tree"] is not b.tree
