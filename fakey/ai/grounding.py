"""
grounding.py — Pull citations out of a Google-Search-grounded response.

Gemini attaches grounding chunks to the first candidate. Only chunks with a
`web` record are citations; the rest (retrieved context, etc.) are dropped.
Input order is kept and duplicates are not collapsed.
"""

from typing import Any, Iterable, Optional

from fakey.ai.normalizer import as_text, pick, pick_path
from fakey.models.text_analysis import Source

DEFAULT_SOURCE_TITLE = "Verified Source"


def grounding_chunks(response: Any) -> list:
    """candidates[0].grounding_metadata.grounding_chunks, or [] if any link is missing."""
    chunks = pick_path(response, "candidates", 0, "grounding_metadata", "grounding_chunks")
    return list(chunks) if isinstance(chunks, (list, tuple)) else []


def extract_sources(
    chunks: Optional[Iterable[Any]],
    placeholder: str = DEFAULT_SOURCE_TITLE,
) -> list[Source]:
    sources = []
    for chunk in chunks or ():
        web = pick(chunk, "web")
        if web is None:
            continue
        sources.append(Source(
            title=as_text(pick(web, "title"), placeholder),
            url=as_text(pick(web, "uri"), ""),
        ))
    return sources
