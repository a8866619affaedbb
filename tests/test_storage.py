"""Tests for habitlog/storage.py: local vault and change notifier."""

import pytest

from habitlog.models import ChangeEvent, JournalFile
from habitlog.storage import ChangeNotifier, LocalJournalStorage, is_journal_path


def test_is_journal_path():
    assert is_journal_path("journals/2024-05-01.md", "journals")
    assert is_journal_path("journals/2024/2024-05-01.md", "journals")
    assert not is_journal_path("journals/notes.md", "journals")
    assert not is_journal_path("journals/2024-05-01.txt", "journals")
    assert not is_journal_path("archive/2024-05-01.md", "journals")


def test_notifier_delivers_to_all_even_if_one_fails():
    notifier = ChangeNotifier()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    notifier.subscribe(broken)
    notifier.subscribe(seen.append)
    event = ChangeEvent("modify", "journals/2024-05-01.md")
    notifier.emit(event)
    assert seen == [event]


def test_notifier_unsubscribe_handle():
    notifier = ChangeNotifier()
    seen = []
    unsubscribe = notifier.subscribe(seen.append)
    unsubscribe()
    notifier.emit(ChangeEvent("create", "journals/2024-05-01.md"))
    assert seen == []
    assert notifier.subscriber_count == 0


@pytest.mark.asyncio
async def test_list_files_sorted_under_prefix(vault):
    files = await LocalJournalStorage(vault).list_files("journals")
    assert [f.path for f in files] == [
        "journals/2024-04-20.md",
        "journals/2024-05-08.md",
        "journals/2024-05-09.md",
        "journals/2024-05-10.md",
        "journals/scratch.md",
    ]
    assert files[0].name == "2024-04-20.md"


@pytest.mark.asyncio
async def test_list_files_missing_vault(tmp_path):
    with pytest.raises(FileNotFoundError):
        await LocalJournalStorage(tmp_path / "nope").list_files("journals")


@pytest.mark.asyncio
async def test_read(vault):
    storage = LocalJournalStorage(vault)
    content = await storage.read(JournalFile("journals/2024-04-20.md", "2024-04-20.md"))
    assert content == "- #exercise 5km run\n"


@pytest.mark.asyncio
async def test_read_missing_file_raises(vault):
    storage = LocalJournalStorage(vault)
    with pytest.raises(FileNotFoundError):
        await storage.read(JournalFile("journals/1999-01-01.md", "1999-01-01.md"))


@pytest.mark.asyncio
async def test_create_modify_delete_emit_events(vault):
    storage = LocalJournalStorage(vault)
    events = []
    storage.notifier.subscribe(events.append)
    path = "journals/2024-07-01.md"

    await storage.create(path, "a\n")
    with pytest.raises(FileExistsError):
        await storage.create(path, "b\n")
    await storage.modify(path, "c\n")
    assert (vault / path).read_text(encoding="utf-8") == "c\n"
    await storage.delete(path)

    assert not storage.exists(path)
    assert [e.kind for e in events] == ["create", "modify", "delete"]


@pytest.mark.asyncio
async def test_modify_missing_file(vault):
    with pytest.raises(FileNotFoundError):
        await LocalJournalStorage(vault).modify("journals/2030-01-01.md", "x")
