"""
LeeCMS Builder -- Component Operation Tests

Components are addressed by (row index, column key, index in column). New
instances carry registry defaults; duplicates get a fresh id and land right
after the original. Field edits replace data wholesale and are committed to
history as one entry when the edit session ends.
"""

import pytest


@pytest.fixture
def builder(make_builder, make_row, make_instance):
    return make_builder([
        make_row(
            "50-50",
            id="row_a",
            col_1=[
                make_instance("text-block", id="t1", content="One"),
                make_instance("text-block", id="t2", content="Two"),
            ],
        ),
    ])


def column_ids(builder, key="col_1", row=0):
    return [c["id"] for c in builder.tree[row]["components"].get(key, [])]


class TestAddComponent:
    def test_uses_registry_defaults(self, builder, registry):
        instance = builder.add_component(0, 1, "faq-section")
        assert instance["type"] == "faq-section"
        assert instance["data"] == registry.default_data("faq-section")
        assert instance["id"].startswith("component_")
        assert builder.tree[0]["components"]["col_2"] == [instance]

    def test_appends_to_existing_column(self, builder):
        builder.add_component(0, 0, "image-block")
        assert len(column_ids(builder)) == 3

    def test_defaults_are_independent_copies(self, builder):
        a = builder.add_component(0, 1, "faq-section")
        b = builder.add_component(0, 1, "faq-section")
        a["data"]["faqs"].append({"question": "?", "answer": "!"})
        assert len(b["data"]["faqs"]) == 3

    def test_unknown_type_rejected(self, builder):
        assert builder.add_component(0, 0, "nonexistent-widget") is None
        assert builder.history_length == 1
        assert not builder.has_unsaved_changes()

    def test_column_outside_layout_rejected(self, builder):
        assert builder.add_component(0, 2, "text-block") is None
        assert "col_3" not in builder.tree[0]["components"]

    def test_missing_row_rejected(self, builder):
        assert builder.add_component(5, 0, "text-block") is None

    def test_row_without_components_mapping(self, make_builder):
        b = make_builder([{"id": "r", "layout": "100"}])
        b.add_component(0, 0, "text-block")
        assert len(b.tree[0]["components"]["col_1"]) == 1


class TestDeleteComponent:
    def test_removes_instance(self, builder):
        assert builder.delete_component(0, "col_1", 0)
        assert column_ids(builder) == ["t2"]
        assert builder.history_length == 2

    @pytest.mark.parametrize("address", [(0, "col_1", 2), (0, "col_2", 0), (3, "col_1", 0), (0, "bogus", 0)])
    def test_missing_address_is_noop(self, builder, address):
        assert not builder.delete_component(*address)
        assert column_ids(builder) == ["t1", "t2"]
        assert builder.history_length == 1

    def test_clears_selection_in_column(self, builder):
        builder.select_component(0, "col_1", 1)
        builder.delete_component(0, "col_1", 0)
        assert builder.selection is None


class TestDuplicateComponent:
    def test_inserts_copy_after_original(self, builder):
        clone = builder.duplicate_component(0, "col_1", 0)
        assert column_ids(builder)[0] == "t1"
        assert column_ids(builder)[1] == clone["id"]
        assert column_ids(builder)[2] == "t2"
        assert clone["id"] != "t1"
        assert clone["data"] == {"content": "One"}

    def test_copy_is_deep(self, builder):
        clone = builder.duplicate_component(0, "col_1", 0)
        clone["data"]["content"] = "Changed"
        assert builder.tree[0]["components"]["col_1"][0]["data"]["content"] == "One"

    def test_missing_rejected(self, builder):
        assert builder.duplicate_component(0, "col_1", 9) is None


class TestMoveComponent:
    def test_swaps_within_column(self, builder):
        assert builder.move_component(0, "col_1", 0, "down")
        assert column_ids(builder) == ["t2", "t1"]

    def test_bounds_are_noop(self, builder):
        assert not builder.move_component(0, "col_1", 0, "up")
        assert not builder.move_component(0, "col_1", 1, "down")
        assert builder.history_length == 1

    def test_selection_follows_moved_instance(self, builder):
        builder.select_component(0, "col_1", 0)
        builder.move_component(0, "col_1", 0, "down")
        assert builder.selection == (0, "col_1", 1)
        assert builder.selected_component()["id"] == "t1"

    def test_selection_follows_instance_past_duplicate(self, builder):
        builder.select_component(0, "col_1", 1)
        builder.duplicate_component(0, "col_1", 0)
        assert builder.selection == (0, "col_1", 2)
        assert builder.selected_component()["id"] == "t2"

    def test_selection_before_duplicate_unchanged(self, builder):
        builder.select_component(0, "col_1", 0)
        builder.duplicate_component(0, "col_1", 1)
        assert builder.selection == (0, "col_1", 0)
        assert builder.selected_component()["id"] == "t1"


class TestFieldEdits:
    def test_replaces_data_wholesale(self, builder):
        assert builder.update_component_data(0, "col_1", 0, {"title1": "Hello"})
        assert builder.tree[0]["components"]["col_1"][0]["data"] == {"title1": "Hello"}
        assert builder.has_unsaved_changes()

    def test_no_snapshot_until_session_ends(self, builder):
        builder.select_component(0, "col_1", 0)
        builder.update_component_data(0, "col_1", 0, {"content": "A"})
        builder.update_component_data(0, "col_1", 0, {"content": "AB"})
        assert builder.history_length == 1
        assert builder.can_undo()
        builder.deselect()
        assert builder.history_length == 2

    def test_edit_session_undone_as_one_step(self, builder):
        builder.select_component(0, "col_1", 0)
        for text in ("A", "AB", "ABC"):
            builder.update_component_data(0, "col_1", 0, {"content": text})
        assert builder.undo()
        assert builder.tree[0]["components"]["col_1"][0]["data"] == {"content": "One"}
        assert builder.redo()
        assert builder.tree[0]["components"]["col_1"][0]["data"] == {"content": "ABC"}

    def test_selecting_another_component_commits(self, builder):
        builder.select_component(0, "col_1", 0)
        builder.update_component_data(0, "col_1", 0, {"content": "Edited"})
        builder.select_component(0, "col_1", 1)
        assert builder.history_length == 2

    def test_structural_operation_commits_pending_edit_first(self, builder):
        builder.update_component_data(0, "col_1", 0, {"content": "Edited"})
        builder.add_row()
        assert builder.history_length == 3
        builder.undo()
        assert builder.tree[0]["components"]["col_1"][0]["data"] == {"content": "Edited"}
        assert len(builder.tree) == 1

    def test_declared_fields_coerced(self, builder):
        builder.update_component_data(0, "col_1", 0, {"content": 42, "textAlign": "diagonal", "extra": [1]})
        assert builder.tree[0]["components"]["col_1"][0]["data"] == {"content": "42", "textAlign": "left", "extra": [1]}

    def test_checkbox_strings_coerced(self, make_builder, make_row, make_instance):
        b = make_builder([make_row(col_1=[make_instance("button-block")])])
        b.update_component_data(0, "col_1", 0, {"fullWidth": "false", "target": "_blank"})
        assert b.tree[0]["components"]["col_1"][0]["data"] == {"fullWidth": False, "target": "_blank"}

    def test_data_is_copied(self, builder):
        data = {"content": "X"}
        builder.update_component_data(0, "col_1", 0, data)
        data["content"] = "Y"
        assert builder.tree[0]["components"]["col_1"][0]["data"]["content"] == "X"

    def test_missing_address_rejected(self, builder):
        assert not builder.update_component_data(0, "col_2", 0, {"content": "X"})
        assert not builder.has_unsaved_changes()

    def test_non_dict_data_rejected(self, builder):
        assert not builder.update_component_data(0, "col_1", 0, "text")
