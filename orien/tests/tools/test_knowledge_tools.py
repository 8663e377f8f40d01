"""Tests for the knowledge tools."""

import pytest

from orien.tools import ToolCall, ToolContext, ToolExecutor, build_chat_tools


@pytest.fixture
def setup(db, persona):
    context = ToolContext(persona=persona)
    return context, ToolExecutor(build_chat_tools(db, context), timeout=5.0)


async def test_search_respects_max_results(db, setup):
    context, executor = setup
    db.knowledge.add("Notes", "\n".join(f"line {i} mentions Tea" for i in range(5)))

    result = await executor.execute(
        ToolCall(tool="search_knowledge", arguments={"query": "tea", "maxResults": 3})
    )

    matches = result.result.matches
    assert len(matches) == 3
    assert all(len(m.context) <= 500 for m in matches)
    assert [m.line_number for m in matches] == [1, 2, 3]
    assert context.search_results == [result.result]


async def test_search_context_lines_and_truncation(db, setup):
    _, executor = setup
    lines = ["a" * 300, "b" * 300, "needle here", "c" * 300, "d" * 300, "e"]
    db.knowledge.add("Long", "\n".join(lines))

    result = await executor.execute(
        ToolCall(tool="search_knowledge", arguments={"query": "NEEDLE"})
    )

    [match] = result.result.matches
    assert match.line_number == 3
    assert len(match.context) == 500
    assert match.context.startswith("a" * 300)


async def test_search_caps_max_results(db, setup):
    _, executor = setup
    db.knowledge.add("Big", "\n".join("hit" for _ in range(20)))

    result = await executor.execute(
        ToolCall(tool="search_knowledge", arguments={"query": "hit", "maxResults": 50})
    )

    assert len(result.result.matches) == 10


async def test_search_restricted_to_files(db, setup):
    _, executor = setup
    db.knowledge.add("Recipes", "tea with honey")
    db.knowledge.add("Diary", "tea at noon")

    result = await executor.execute(
        ToolCall(tool="search_knowledge", arguments={"query": "tea", "files": ["diary"]})
    )

    assert [m.file for m in result.result.matches] == ["Diary"]


async def test_search_no_matches(db, setup):
    _, executor = setup
    db.knowledge.add("Recipes", "bread")

    result = await executor.execute(ToolCall(tool="search_knowledge", arguments={"query": "tea"}))

    assert str(result.result) == "No matches for 'tea'."


async def test_load_by_title_is_case_insensitive(db, setup):
    _, executor = setup
    db.knowledge.add("Recipes", "bread")

    result = await executor.execute(
        ToolCall(tool="load_knowledge_by_title", arguments={"titles": ["RECIPES", "Missing"]})
    )

    assert result.result == "Loaded 1 knowledge file(s): Recipes"


async def test_list_knowledge_files(db, setup):
    _, executor = setup
    db.knowledge.add("Recipes", "bread")

    result = await executor.execute(ToolCall(tool="list_knowledge_files"))

    assert result.result.startswith("1 knowledge file(s) available.")
    assert '"title": "Recipes"' in result.result
    assert '"size": 5' in result.result
