"""
LeeCMS Builder -- Save Tests

save() hands a deep copy of the live tree to the injected callback and
reports the outcome as a SaveResult. Failures are reported, never raised,
and leave the tree, history and unsaved flag alone. Overlapping saves run
one at a time.
"""

import asyncio

from cms.kernel.types import SaveResult


class Recorder:
    def __init__(self, fail=None, delay=0.0):
        self.saved = []
        self.events = []
        self.fail = fail
        self.delay = delay

    async def __call__(self, tree):
        self.events.append("start")
        if self.delay:
            await asyncio.sleep(self.delay)
        self.events.append("end")
        if self.fail:
            raise self.fail
        self.saved.append(tree)


async def test_save_success_clears_unsaved(make_builder):
    recorder = Recorder()
    b = make_builder(on_save=recorder)
    b.add_row("50-50")

    result = await b.save()

    assert result == SaveResult(ok=True)
    assert recorder.saved == [b.tree]
    assert not b.has_unsaved_changes()
    assert b.last_error is None


async def test_save_passes_a_copy(make_builder):
    recorder = Recorder()
    b = make_builder(on_save=recorder)
    b.add_row()
    await b.save()
    recorder.saved[0].clear()
    assert len(b.tree) == 1


async def test_save_failure_is_reported(make_builder, caplog):
    b = make_builder(on_save=Recorder(fail=RuntimeError("database unavailable")))
    b.add_row()
    before = b.snapshot()

    result = await b.save()

    assert not result.ok
    assert result.error == "database unavailable"
    assert b.last_error == "database unavailable"
    assert b.has_unsaved_changes()
    assert b.tree == before
    assert b.history_length == 2
    assert not b.is_saving()
    assert "save failed" in caplog.text


async def test_save_failure_without_message_uses_exception_name(make_builder):
    b = make_builder(on_save=Recorder(fail=TimeoutError()))
    result = await b.save()
    assert result.error == "TimeoutError"


async def test_success_after_failure_clears_error(make_builder):
    recorder = Recorder(fail=RuntimeError("boom"))
    b = make_builder(on_save=recorder)
    b.add_row()
    await b.save()
    recorder.fail = None
    result = await b.save()
    assert result.ok
    assert b.last_error is None
    assert not b.has_unsaved_changes()


async def test_no_handler(make_builder):
    b = make_builder()
    result = await b.save()
    assert not result.ok
    assert result.error == "No save handler configured"


async def test_overlapping_saves_are_serialized(make_builder):
    recorder = Recorder(delay=0.01)
    b = make_builder(on_save=recorder)
    b.add_row()

    results = await asyncio.gather(b.save(), b.save(), b.save())

    assert all(r.ok for r in results)
    assert recorder.events == ["start", "end"] * 3


async def test_edit_during_save_stays_unsaved(make_builder):
    gate = asyncio.Event()
    saved = []

    async def slow_save(tree):
        await gate.wait()
        saved.append(tree)

    b = make_builder(on_save=slow_save)
    b.add_row()
    task = asyncio.create_task(b.save())
    await asyncio.sleep(0)
    assert b.is_saving()

    b.add_row("50-50")
    gate.set()
    result = await task

    assert result.ok
    assert len(saved[0]) == 1
    assert b.has_unsaved_changes()
    assert not b.is_saving()


async def test_later_save_writes_latest_tree(make_builder):
    recorder = Recorder(delay=0.01)
    b = make_builder(on_save=recorder)
    b.add_row()
    first = asyncio.create_task(b.save())
    await asyncio.sleep(0)
    b.add_row("70-30")
    second = asyncio.create_task(b.save())
    await asyncio.gather(first, second)
    assert [len(t) for t in recorder.saved] == [1, 2]
    assert not b.has_unsaved_changes()
