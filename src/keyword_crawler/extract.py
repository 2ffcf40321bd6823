"""Visible text extraction from HTML using selectolax."""

import logging
from collections.abc import Callable
from typing import NamedTuple

from selectolax.lexbor import LexborHTMLParser, LexborNode

from .errors import ParseError

logger = logging.getLogger(__name__)

INVISIBLE_TAGS = ["script", "style", "noscript", "template"]

ENCYCLOPEDIA_SELECTOR = "#mw-content-text"

# Tried in this order; the first selector with a match wins
MAIN_CONTENT_SELECTORS = (
    "main",
    '[role="main"]',
    "article",
    "#main-content",
    "#main",
    "#content",
    ".main-content",
    ".post-content",
    ".article-content",
    ".entry-content",
)

CHROME_SELECTORS = (
    "nav",
    "header",
    "footer",
    "aside",
    "menu",
    '[role="navigation"]',
    '[role="banner"]',
    '[role="contentinfo"]',
    ".nav", "#nav",
    ".navbar", "#navbar",
    ".menu", "#menu",
    ".navigation", "#navigation",
    ".header", "#header",
    ".footer", "#footer",
    ".sidebar", "#sidebar",
)

STAT_SELECTORS = {
    "elements": "*",
    "links": "a",
    "images": "img",
    "paragraphs": "p",
    "divs": "div",
    "spans": "span",
    "headings": "h1, h2, h3, h4, h5, h6",
    "forms": "form",
}


class ContentRule(NamedTuple):
    """A named content selector; ``select`` returns None when it does not apply."""

    name: str
    select: Callable[[LexborHTMLParser], LexborNode | None]


class ExtractedText(NamedTuple):
    text: str
    raw_html: str
    rule: str | None = None


def _select_encyclopedia(tree: LexborHTMLParser) -> LexborNode | None:
    return tree.css_first(ENCYCLOPEDIA_SELECTOR)


def _select_main(tree: LexborHTMLParser) -> LexborNode | None:
    for selector in MAIN_CONTENT_SELECTORS:
        node = tree.css_first(selector)
        if node is not None:
            return node
    return None


def _select_body_without_chrome(tree: LexborHTMLParser) -> LexborNode | None:
    # One selector at a time so descendants of removed nodes are never matched;
    # reverse document order removes nested matches before their ancestors
    for selector in CHROME_SELECTORS:
        for node in reversed(tree.css(selector)):
            node.decompose()
    return tree.body


CONTENT_RULES: tuple[ContentRule, ...] = (
    ContentRule("encyclopedia", _select_encyclopedia),
    ContentRule("main", _select_main),
    ContentRule("body", _select_body_without_chrome),
)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs into single spaces."""
    return " ".join(text.split())


class Extractor:
    """Select the main readable text of an HTML document."""

    def __init__(self, html: bytes | str, rules: tuple[ContentRule, ...] = CONTENT_RULES):
        if not isinstance(html, (bytes, str)):
            raise ParseError(f"cannot parse {type(html).__name__} as HTML")

        self.source = html
        self.rules = rules
        try:
            self.tree = LexborHTMLParser(html)
        except (TypeError, ValueError, RuntimeError) as e:
            raise ParseError(f"failed to parse HTML: {e}", cause=e) from e

        if self.tree.root is None:
            raise ParseError("document has no root element")

        # Snapshot before any rule mutates the tree
        self.raw_html = self._serialize()
        self._stats = {name: len(self.tree.css(sel)) for name, sel in STAT_SELECTORS.items()}

    def _serialize(self) -> str:
        html = self.tree.html
        if html:
            return html

        if isinstance(self.source, bytes):
            return self.source.decode("utf-8", errors="replace")
        return self.source

    def stats(self) -> dict[str, int]:
        """Element counts of the document as parsed."""
        return dict(self._stats)

    def extract(self) -> ExtractedText:
        """Apply the content rules in order; the first match wins."""
        self.tree.strip_tags(INVISIBLE_TAGS)

        for rule in self.rules:
            node = rule.select(self.tree)
            if node is not None:
                text = normalize_whitespace(node.text(separator=" "))
                return ExtractedText(text=text, raw_html=self.raw_html, rule=rule.name)

        logger.debug("No content rule matched, document has no body")
        return ExtractedText(text="", raw_html=self.raw_html)


def extract_text(html: bytes | str) -> ExtractedText:
    """Extract the visible text and serialized markup of a document."""
    return Extractor(html).extract()
