"""Plain-text helpers for chapter HTML."""

import re
from html.parser import HTMLParser

_BLOCK_TAGS = {"p", "div", "br", "li", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote"}


class _TextExtractor(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag in _BLOCK_TAGS and self.parts:
            self.parts.append("\n")

    def handle_data(self, data):
        self.parts.append(data)


def html_to_text(html: str) -> str:
    """Strip tags and decode entities; block elements become line breaks."""
    if not html:
        return ""
    parser = _TextExtractor()
    parser.feed(html)
    parser.close()
    return "".join(parser.parts).strip()


def count_words(html: str) -> int:
    return len(re.findall(r"\S+", html_to_text(html)))


def paragraph(text: str) -> str:
    """Wrap generated text as a paragraph of chapter HTML."""
    return f"<p>{text}</p>"
