"""Knowledge tools: load_knowledge_by_title, list_knowledge_files, search_knowledge."""

import json
import logging

from orien.constants import (
    SEARCH_CONTEXT_LINES,
    SEARCH_CONTEXT_MAX_CHARS,
    SEARCH_MAX_RESULTS_CAP,
    ToolName,
)
from orien.database.models import KnowledgeFile
from orien.responses import OrienResponse
from orien.tools.base import Tool
from orien.tools.context import ToolContext
from orien.tools.models import (
    KnowledgeSearchResult,
    LoadKnowledgeByTitleArgs,
    NoArgs,
    SearchKnowledgeArgs,
    SearchMatch,
)

logger = logging.getLogger(__name__)


class LoadKnowledgeByTitleTool(Tool):
    """Look up knowledge files by exact title (case-insensitive)."""

    name = ToolName.LOAD_KNOWLEDGE_BY_TITLE
    description = "Load one or more knowledge files by their exact titles."
    parameters = {
        "type": "object",
        "properties": {
            "titles": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Titles of the knowledge files to load",
            },
        },
        "required": ["titles"],
    }
    args_model = LoadKnowledgeByTitleArgs

    def __init__(self, db):
        self.db = db

    async def execute(self, args: LoadKnowledgeByTitleArgs) -> str:
        files = self.db.knowledge.find_by_titles(args.titles)
        if len(files) < len(args.titles):
            found = {f.title.lower() for f in files}
            missing = [t for t in args.titles if t.strip().lower() not in found]
            logger.info("Knowledge titles not found: %s", missing)
        return OrienResponse.KNOWLEDGE_LOADED.format(
            count=len(files), titles=", ".join(f.title for f in files)
        )


class ListKnowledgeFilesTool(Tool):
    name = ToolName.LIST_KNOWLEDGE_FILES
    description = "List every knowledge file with its size and upload time."
    args_model = NoArgs

    def __init__(self, db):
        self.db = db

    async def execute(self, args: NoArgs) -> str:
        files = self.db.knowledge.list_all()
        catalog = [
            {"title": f.title, "size": f.size, "uploadedAt": f.uploaded_at.isoformat()}
            for f in files
        ]
        return f"{OrienResponse.KNOWLEDGE_LISTED.format(count=len(files))}\n{json.dumps(catalog)}"


class SearchKnowledgeTool(Tool):
    """Line-level substring search across knowledge files.

    Each matching line yields one result with up to two lines of context on
    either side, truncated to SEARCH_CONTEXT_MAX_CHARS. Results are also
    collected on the request context so the caller can return them.
    """

    name = ToolName.SEARCH_KNOWLEDGE
    description = (
        "Search the knowledge files for lines containing a phrase. "
        "Returns matching lines with surrounding context."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Text to look for (case-insensitive)"},
            "files": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Optional titles to restrict the search to",
            },
            "maxResults": {
                "type": "integer",
                "description": (
                    f"Maximum matches to return (default 5, max {SEARCH_MAX_RESULTS_CAP})"
                ),
            },
        },
        "required": ["query"],
    }
    args_model = SearchKnowledgeArgs

    def __init__(self, db, context: ToolContext):
        self.db = db
        self.context = context

    def _select_files(self, titles: list[str] | None) -> list[KnowledgeFile]:
        if titles:
            return self.db.knowledge.find_by_titles(titles)
        return self.db.knowledge.list_all()

    async def execute(self, args: SearchKnowledgeArgs) -> KnowledgeSearchResult:
        limit = max(1, min(args.max_results, SEARCH_MAX_RESULTS_CAP))
        needle = args.query.lower()
        result = KnowledgeSearchResult(query=args.query)

        for file in self._select_files(args.files):
            lines = file.content.splitlines()
            for index, line in enumerate(lines):
                if needle not in line.lower():
                    continue
                start = max(0, index - SEARCH_CONTEXT_LINES)
                end = min(len(lines), index + SEARCH_CONTEXT_LINES + 1)
                context = "\n".join(lines[start:end])[:SEARCH_CONTEXT_MAX_CHARS]
                result.matches.append(
                    SearchMatch(file=file.title, line_number=index + 1, context=context)
                )
                if len(result.matches) >= limit:
                    break
            if len(result.matches) >= limit:
                break

        logger.info("search_knowledge '%s': %d match(es)", args.query, len(result.matches))
        self.context.search_results.append(result)
        return result
