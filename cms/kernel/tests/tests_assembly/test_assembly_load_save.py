"""
LeeCMS Assembly -- Load / Save / Open Builder

load():
  - unknown page → PageNotFound
  - malformed stored tree (not a list, bad JSON text) → []
  - JSON text is decoded

open_builder() → Builder whose save() writes back through storage, with
saves of one page reaching storage in order.
"""

import asyncio
import json

import pytest

from cms.kernel.assembly import MemoryStorage, PageAssembly, PageNotFound, parse_content_tree
from cms.kernel.builder import Builder


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def assembly(storage, registry):
    return PageAssembly(storage, registry)


class TestParseContentTree:
    def test_list_passes_through(self, make_row):
        tree = [make_row()]
        assert parse_content_tree(tree) is tree

    def test_json_text_decoded(self, make_row):
        tree = [make_row()]
        assert parse_content_tree(json.dumps(tree)) == tree
        assert parse_content_tree(json.dumps(tree).encode()) == tree

    @pytest.mark.parametrize("raw", [None, {}, 7, "not json", '{"rows": []}', b"\xff\xfe"])
    def test_malformed_becomes_empty(self, raw):
        assert parse_content_tree(raw) == []

    def test_malformed_logged(self, caplog):
        parse_content_tree({"rows": []})
        assert "not a list" in caplog.text


class TestLoad:
    async def test_missing_page(self, assembly):
        with pytest.raises(PageNotFound):
            await assembly.load("42")

    async def test_loads_tree_and_metadata(self, assembly, storage, make_row):
        storage.seed("1", [make_row(id="a")], title="About", slug="about")
        page = await assembly.load("1")
        assert [r["id"] for r in page.content_tree] == ["a"]
        assert page.metadata == {"title": "About", "slug": "about"}

    async def test_malformed_tree_is_empty(self, assembly, storage):
        storage.seed("1", {"not": "a list"})
        page = await assembly.load("1")
        assert page.content_tree == []

    async def test_json_text_tree(self, assembly, storage, make_row):
        storage.seed("1", json.dumps([make_row(id="a")]))
        page = await assembly.load("1")
        assert page.content_tree[0]["id"] == "a"


class TestSave:
    async def test_writes_copy(self, assembly, storage, make_row):
        tree = [make_row(id="a")]
        await assembly.save("1", tree)
        tree.clear()
        assert storage.pages["1"].content_tree[0]["id"] == "a"

    async def test_saves_of_one_page_are_ordered(self, assembly, storage, make_row):
        trees = [[make_row(id=f"v{i}")] for i in range(5)]
        await asyncio.gather(*(assembly.save("1", t) for t in trees))
        assert [s[1][0]["id"] for s in storage.saves] == [f"v{i}" for i in range(5)]
        assert storage.pages["1"].content_tree[0]["id"] == "v4"


class TestOpenBuilder:
    async def test_returns_builder_over_stored_tree(self, assembly, storage, make_row):
        storage.seed("1", [make_row("50-50", id="a")])
        builder = await assembly.open_builder("1")
        assert isinstance(builder, Builder)
        assert builder.tree[0]["id"] == "a"
        assert not builder.has_unsaved_changes()

    async def test_missing_page(self, assembly):
        with pytest.raises(PageNotFound):
            await assembly.open_builder("nope")

    async def test_builder_save_writes_through(self, assembly, storage):
        storage.seed("1", [])
        builder = await assembly.open_builder("1")
        builder.add_row("70-30")
        builder.add_component(0, 0, "text-block")

        result = await builder.save()

        assert result.ok
        stored = (await assembly.load("1")).content_tree
        assert stored == builder.tree
        assert stored[0]["components"]["col_1"][0]["type"] == "text-block"

    async def test_reopen_sees_saved_tree(self, assembly, storage):
        storage.seed("1", None)
        first = await assembly.open_builder("1")
        first.add_row("33-33-33")
        await first.save()
        second = await assembly.open_builder("1")
        assert second.tree == first.tree

    async def test_storage_failure_reported_by_builder(self, registry):
        class BrokenStorage(MemoryStorage):
            async def save(self, identifier, tree):
                raise ConnectionError("connection refused")

        storage = BrokenStorage()
        storage.seed("1", [])
        builder = await PageAssembly(storage, registry).open_builder("1")
        builder.add_row()

        result = await builder.save()

        assert not result.ok
        assert result.error == "connection refused"
        assert builder.has_unsaved_changes()

    async def test_confirm_passed_through(self, assembly, storage, make_row):
        storage.seed("1", [make_row(id="a")])
        builder = await assembly.open_builder("1", confirm=lambda message: False)
        assert not builder.delete_row(0)
        assert len(builder.tree) == 1
