"""
LeeCMS Builder -- Picker / Panel State Tests

    idle-editing ──open_row_picker──▶ row-layout-picker-open ──pick_layout──▶ idle-editing
    idle-editing ──add_component_to_column──▶ component-picker-open ──pick_component──▶ idle-editing
    idle-editing ──select_component──▶ editing-component-fields ──deselect──▶ idle-editing
"""

from cms.kernel.types import BuilderState


def test_starts_idle(make_builder):
    b = make_builder()
    assert b.state is BuilderState.IDLE
    assert b.selection is None
    assert b.target is None


def test_row_picker_flow(make_builder):
    b = make_builder()
    b.open_row_picker()
    assert b.state is BuilderState.ROW_PICKER
    row = b.pick_layout("33-33-33")
    assert b.state is BuilderState.IDLE
    assert b.tree == [row]


def test_close_row_picker_without_choice(make_builder):
    b = make_builder()
    b.open_row_picker()
    b.close_picker()
    assert b.state is BuilderState.IDLE
    assert b.tree == []


def test_component_picker_remembers_target(make_builder, make_row):
    b = make_builder([make_row("50-50")])
    assert b.add_component_to_column(0, 1)
    assert b.state is BuilderState.COMPONENT_PICKER
    assert b.target == (0, 1)

    instance = b.pick_component("hero-section")

    assert b.state is BuilderState.IDLE
    assert b.target is None
    assert b.tree[0]["components"]["col_2"] == [instance]


def test_component_picker_for_missing_row(make_builder):
    b = make_builder()
    assert not b.add_component_to_column(0, 0)
    assert b.state is BuilderState.IDLE


def test_pick_component_without_target(make_builder, make_row):
    b = make_builder([make_row()])
    assert b.pick_component("text-block") is None
    assert b.history_length == 1


def test_pick_unknown_type_closes_picker(make_builder, make_row):
    b = make_builder([make_row()])
    b.add_component_to_column(0, 0)
    assert b.pick_component("nonexistent-widget") is None
    assert b.state is BuilderState.IDLE
    assert b.tree[0]["components"] == {}


def test_select_and_deselect(make_builder, make_row, make_instance):
    b = make_builder([make_row(col_1=[make_instance("text-block", id="t1")])])
    assert b.select_component(0, "col_1", 0)
    assert b.state is BuilderState.EDITING_FIELDS
    assert b.selected_component()["id"] == "t1"
    b.deselect()
    assert b.state is BuilderState.IDLE
    assert b.selected_component() is None


def test_select_missing_component(make_builder, make_row):
    b = make_builder([make_row()])
    assert not b.select_component(0, "col_1", 0)
    assert b.state is BuilderState.IDLE


def test_closing_picker_returns_to_panel_when_selected(make_builder, make_row, make_instance):
    b = make_builder([make_row(col_1=[make_instance("text-block")])])
    b.select_component(0, "col_1", 0)
    b.add_component_to_column(0, 0)
    b.close_picker()
    assert b.state is BuilderState.EDITING_FIELDS


def test_moving_rows_closes_panel(make_builder, make_row, make_instance):
    b = make_builder([make_row(id="a", col_1=[make_instance("text-block")]), make_row(id="b")])
    b.select_component(0, "col_1", 0)
    b.move_row(0, "down")
    assert b.selection is None
    assert b.state is BuilderState.IDLE
