"""Tests for navigation state transitions."""

import pytest

from conftest import callback_data, make_messages, make_threads
from telegram_bridge.models import MessageSummary, ThreadSummary
from telegram_bridge.navigation import View, parse_action
from telegram_bridge.navigation.machine import NO_THREAD_TEXT, SELECTED_THREAD_KEY


async def run(machine, state, data: str):
    return await machine.handle(state, parse_action(data))


@pytest.mark.asyncio
async def test_messages_without_any_thread_prompts_selection(machine, state) -> None:
    """No selection and no active host thread routes to the thread picker."""
    screen = await run(machine, state, "messages:0")
    assert screen.text == NO_THREAD_TEXT
    assert callback_data(screen.keyboard) == ["threads:0"]


@pytest.mark.asyncio
async def test_refresh_clears_caches_and_selection(machine, state, host) -> None:
    host.threads = make_threads(3)
    host.messages[host.threads[1].id] = make_messages(4)

    await run(machine, state, "threads:0")
    await run(machine, state, "select:1")
    await run(machine, state, "messages:0")
    assert state.message_cache

    screen = await run(machine, state, "refresh")
    assert screen.notice == "Refreshed!"
    assert state.view is View.MENU
    assert state.thread_cache == []
    assert state.message_cache == []
    assert state.selected_thread_id is None
    assert state.message_page == 0

    screen = await run(machine, state, "messages:0")
    assert screen.text == NO_THREAD_TEXT


@pytest.mark.asyncio
async def test_threads_are_cached_up_to_fifty(machine, state, host) -> None:
    host.threads = make_threads(60)
    screen = await run(machine, state, "threads:1")

    assert len(state.thread_cache) == 50
    assert state.view is View.THREAD_LIST
    assert state.view_arg == 1
    assert screen.text.startswith("📋 Threads (50 total)")
    assert callback_data(screen.keyboard)[:5] == [f"select:{i}" for i in range(5, 10)]


@pytest.mark.asyncio
async def test_thread_fetch_failure_leaves_state(machine, state, host) -> None:
    """A failing host answers with a notice and changes nothing."""
    state.thread_cache = make_threads(2)
    host.fail_threads = True

    screen = await run(machine, state, "threads:0")
    assert screen.text is None
    assert screen.notice == "Error loading threads"
    assert len(state.thread_cache) == 2
    assert state.view is View.MENU


@pytest.mark.asyncio
async def test_select_persists_choice(machine, state, host, store) -> None:
    host.threads = make_threads(3)
    await run(machine, state, "threads:0")

    screen = await run(machine, state, "select:2")
    thread = host.threads[2]
    assert state.selected_thread_id == thread.id
    assert store.data[SELECTED_THREAD_KEY] == thread.id
    assert state.view is View.THREAD_DETAIL
    assert screen.notice == "Selected!"
    assert f"ID: {thread.id[:12]}..." in screen.text
    assert callback_data(screen.keyboard) == ["messages:0", "menu"]


@pytest.mark.asyncio
async def test_select_survives_storage_failure(machine, state, host, store) -> None:
    host.threads = make_threads(1)
    store.fail = True
    await run(machine, state, "threads:0")
    await run(machine, state, "select:0")
    assert state.selected_thread_id == host.threads[0].id


@pytest.mark.asyncio
async def test_select_out_of_range_is_ignored(machine, state, host) -> None:
    host.threads = make_threads(2)
    await run(machine, state, "threads:0")

    screen = await run(machine, state, "select:5")
    assert screen.text is None
    assert state.selected_thread_id is None
    assert state.view is View.THREAD_LIST


@pytest.mark.asyncio
async def test_messages_fall_back_to_active_thread(machine, state, host) -> None:
    """Without a selection the host's active thread is shown, fetched once."""
    active = ThreadSummary(id="active-thread", title="Active")
    host.active = active
    host.messages[active.id] = make_messages(12)

    screen = await run(machine, state, "messages:1")
    assert state.message_page == 1
    assert state.view is View.MESSAGE_LIST
    assert "💬 Messages (12 total)" in screen.text
    assert "👤 User: 6 | 🤖 AI: 6" in screen.text
    assert "📄 Page 2/3 [1000]" in screen.text

    await run(machine, state, "messages:0")
    assert host.message_fetches == ["active-thread"]
    assert state.message_page == 0
    assert state.selected_thread_id is None


@pytest.mark.asyncio
async def test_empty_thread_shows_single_page(machine, state, host) -> None:
    host.active = ThreadSummary(id="quiet", title="Quiet")
    host.messages["quiet"] = []

    screen = await run(machine, state, "messages:0")
    assert "💬 Messages (0 total)" in screen.text
    assert "📄 Page 1/1 [1000]" in screen.text


@pytest.mark.asyncio
async def test_message_fetch_failure_leaves_state(machine, state, host) -> None:
    host.active = ThreadSummary(id="t1", title="T")
    host.fail_messages = True
    state.message_page = 0

    screen = await run(machine, state, "messages:2")
    assert screen.notice == "Error loading messages"
    assert state.message_cache == []
    assert state.message_page == 0
    assert state.view is View.MENU


@pytest.mark.asyncio
async def test_selecting_another_thread_drops_message_cache(machine, state, host) -> None:
    host.threads = make_threads(2)
    host.messages[host.threads[0].id] = make_messages(3)
    host.messages[host.threads[1].id] = make_messages(8)

    await run(machine, state, "threads:0")
    await run(machine, state, "select:0")
    await run(machine, state, "messages:0")
    assert len(state.message_cache) == 3

    await run(machine, state, "select:1")
    assert state.message_cache == []
    await run(machine, state, "messages:0")
    assert len(state.message_cache) == 8


@pytest.mark.asyncio
async def test_view_renders_html_detail(machine, state, host) -> None:
    host.active = ThreadSummary(id="t1", title="T")
    host.messages["t1"] = [
        MessageSummary(id="a", role="assistant", content={"parts": [{"type": "text", "text": "**hi** <there>"}]}),
    ] + make_messages(9)

    await run(machine, state, "messages:1")
    screen = await run(machine, state, "view:0")

    assert screen.html is True
    assert screen.text.startswith("🤖 Assistant\n📅 ")
    assert screen.text.endswith("<b>hi</b> &lt;there&gt;")
    assert callback_data(screen.keyboard) == ["messages:1", "menu"]
    assert state.view is View.MESSAGE_DETAIL


@pytest.mark.asyncio
async def test_view_truncates_long_messages(machine, state, host) -> None:
    host.active = ThreadSummary(id="t1", title="T")
    host.messages["t1"] = [MessageSummary(id="a", role="user", content="x" * 5000)]

    await run(machine, state, "messages:0")
    screen = await run(machine, state, "view:0")
    assert screen.text.endswith("x" * 10 + "\n\n... (truncated)")
    assert screen.text.count("x") == 3500


@pytest.mark.asyncio
async def test_view_out_of_range_is_ignored(machine, state) -> None:
    screen = await run(machine, state, "view:3")
    assert screen.text is None
    assert state.view is View.MENU


@pytest.mark.asyncio
async def test_current_thread_variants(machine, state, host) -> None:
    screen = await run(machine, state, "current")
    assert screen.text == "❌ No thread selected"

    host.active = ThreadSummary(id="active-thread-id", title="Live")
    screen = await run(machine, state, "current")
    assert screen.text.startswith("📍 Using Active Thread:\n\nLive")

    state.selected_thread_id = "unknown-thread-id"
    screen = await run(machine, state, "current")
    assert screen.text.startswith("📍 Current Thread:\n\nUnknown")
    assert state.view is View.CURRENT_THREAD


@pytest.mark.asyncio
async def test_debug_reports_counters(machine, state) -> None:
    state.thread_cache = make_threads(4)
    state.message_cache = make_messages(7)
    screen = await run(machine, state, "debug")

    assert "Cached Threads: 4" in screen.text
    assert "Cached Messages: 7" in screen.text
    assert "Selected Thread: None" in screen.text
    assert "Bot Token: ✅ Set" in screen.text
    assert "Chat ID: 4242" in screen.text
    assert state.view is View.DEBUG


@pytest.mark.asyncio
async def test_unknown_action_only_acknowledges(machine, state) -> None:
    state.move_to(View.DEBUG)
    screen = await run(machine, state, "launch:rockets")
    assert screen.text is None
    assert screen.notice is None
    assert state.view is View.DEBUG
