"""Markdown + LaTeX rendering for question text and quiz descriptions.

The service returns HTML fragments only. Math stays as ``$...$`` markup in
the output so that whichever client displays it can typeset it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str | None) -> str | None:
        """Render a markdown string into an HTML fragment, or ``None`` when blank."""

        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return None
        return self._markdown.render(sanitized)


# Shared by the FastAPI thread pool; rendering does not mutate the parser.
renderer = MarkdownMathRenderer()
