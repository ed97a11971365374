"""
Inline markup ("formatting codes") of POD paragraphs.

A formatting code is an uppercase letter followed by one or more C{<}; it is
closed by a run of as many C{>}.  Shorter runs of C{>} inside the code are
plain text, which is what the C{C<< $a->b >>} form is for.

L{parse_inline()} turns one paragraph into inline nodes; L{zap()} then
erases the content of C{Z<...>} codes from a complete block.
"""
from html import escape, unescape
from html.entities import name2codepoint
from typing import Dict, List, Optional

import attr

from poddoctor.markup import ParseError, append_warning
from poddoctor.markup.nodes import (
    BLOCK_END_NODES, InlineMarkupEnd, InlineMarkupStart, InlineText,
    MarkupKind, Node
)

# Codes whose content is not ordinary text, so they can't hold other codes.
_OPAQUE_KINDS = (MarkupKind.ZAP, MarkupKind.ESCAPE, MarkupKind.INDEX)

# E<...> names that are not HTML entity names.
_POD_ESCAPES = {'verbar': 124, 'sol': 47}

def escape_codepoint(code: str) -> Optional[int]:
    """
    Get the character designated by the content of an C{E<...>} code.

    @param code: An entity name (C{lt}, C{eacute}, C{verbar}), or a decimal,
        hexadecimal (C{0x201E}) or octal (C{075}) number.
    @return: The code point or C{None} if C{code} is not valid.
    """
    if code in _POD_ESCAPES:
        return _POD_ESCAPES[code]
    try:
        if code[:2].lower() == '0x':
            codepoint = int(code[2:], 16)
        elif code[:1] == '0' and len(code) > 1:
            codepoint = int(code, 8)
        elif code.isdigit():
            codepoint = int(code)
        else:
            return name2codepoint.get(code)
    except ValueError:
        return None
    if 0 < codepoint <= 0x10FFFF:
        return codepoint
    return None


@attr.s(auto_attribs=True)
class _Frame:
    """An open formatting code."""
    letter: str
    kind: MarkupKind
    closing: str
    """The run of C{>} that closes this code."""
    start: int
    """Index of the L{InlineMarkupStart} node of this code."""


class _InlineParser:
    """
    Parses one paragraph.  All the scratch buffers live here and are
    discarded with the parser.
    """

    def __init__(self, text: str, lineno: Optional[int],
                 errors: List[ParseError], index: Dict[str, str]):
        self.text = text
        self.lineno = lineno
        self.errors = errors
        self.index = index

        self.nodes: List[Node] = []
        self.stack: List[_Frame] = []

        self.escape_buffer = ''
        self.keyword_buffer = ''
        self.link_buffer = ''
        self.link_bar_seen = False

    def warn(self, descr: str) -> None:
        append_warning(self.errors, descr, self.lineno)

    def is_active(self, kind: MarkupKind) -> bool:
        return any(frame.kind is kind for frame in reversed(self.stack))

    def parse(self) -> List[Node]:
        text = self.text
        pos = 0
        while pos < len(text):
            char = text[pos]
            if 'A' <= char <= 'Z' and text.startswith('<', pos + 1):
                pos = self._open(pos)
            elif char == '>' and self.stack and text.startswith(self.stack[-1].closing, pos):
                pos += self._close()
            else:
                self._add_char(char)
                pos += 1
        self._close_unterminated()
        return self.nodes

    def _open(self, pos: int) -> int:
        text = self.text
        letter = text[pos]
        end = pos + 1
        while end < len(text) and text[end] == '<':
            end += 1

        kind = MarkupKind.from_letter(letter)
        if kind is MarkupKind.NONE:
            self.warn(f"Unknown formatting code {letter}<>.")
        for frame in reversed(self.stack):
            if frame.kind in _OPAQUE_KINDS:
                self.warn(f"{frame.letter}<> may not contain further formatting codes.")
                break
        else:
            if self.link_bar_seen and self.is_active(MarkupKind.LINK):
                self.warn("The target of L<> may not contain further formatting codes.")

        if kind is MarkupKind.LINK and not self.is_active(MarkupKind.LINK):
            self.link_buffer = ''
            self.link_bar_seen = False
        elif kind is MarkupKind.ESCAPE:
            self.escape_buffer = ''
        elif kind is MarkupKind.INDEX:
            self.keyword_buffer = ''

        self.stack.append(_Frame(letter, kind, '>' * (end - pos - 1), len(self.nodes)))
        self.nodes.append(InlineMarkupStart(kind))

        # Spaces after the opening brackets are not part of the content.
        while end < len(text) and text[end] == ' ':
            end += 1
        return end

    def _close(self) -> int:
        """
        Close the innermost code.

        @return: The length of the closing run.
        """
        frame = self.stack.pop()

        if self.nodes and isinstance(self.nodes[-1], InlineText):
            last = self.nodes[-1]
            last.text = last.text.rstrip()
            if not last.text:
                self.nodes.pop()

        self.nodes.append(self._end_node(frame))
        return len(frame.closing)

    def _end_node(self, frame: _Frame) -> InlineMarkupEnd:
        if frame.kind is MarkupKind.ESCAPE:
            code = self.escape_buffer.strip()
            self.escape_buffer = ''
            if escape_codepoint(code) is None:
                self.warn(f"Unknown escape code E<{code}>.")
            return InlineMarkupEnd(frame.kind, [code])

        if frame.kind is MarkupKind.INDEX:
            keyword = self.keyword_buffer.strip()
            self.keyword_buffer = ''
            target = keyword.replace(' ', '_')
            self.index[keyword] = target
            return InlineMarkupEnd(frame.kind, [target])

        if frame.kind is MarkupKind.LINK:
            payload = self.link_buffer.strip()
            target = payload.split('|', 1)[-1].strip()
            if not target:
                self.warn("Empty link target.")
            elif '<' in target:
                self.warn("Formatting codes are not supported in link targets.")
            start = self.nodes[frame.start]
            assert isinstance(start, InlineMarkupStart)
            start.args = [payload]
            if not self.is_active(MarkupKind.LINK):
                self.link_buffer = ''
                self.link_bar_seen = False
            return InlineMarkupEnd(frame.kind, [payload])

        return InlineMarkupEnd(frame.kind)

    def _close_unterminated(self) -> None:
        # zap() erases an open Z<> up to the end of the block, so the codes
        # around it are ended just before its start node.
        zap_start: Optional[int] = None
        while self.stack:
            frame = self.stack[-1]
            self.warn(f"Unterminated formatting code {frame.letter}<>.")
            if frame.kind is MarkupKind.ZAP:
                self.stack.pop()
                zap_start = frame.start
            elif zap_start is None:
                self._close()
            else:
                self.stack.pop()
                self.nodes.insert(zap_start, self._end_node(frame))
                zap_start += 1

    def _add_char(self, char: str) -> None:
        if self.is_active(MarkupKind.ESCAPE):
            self.escape_buffer += char
            return
        if self.is_active(MarkupKind.INDEX):
            self.keyword_buffer += char
            return
        if self.is_active(MarkupKind.LINK):
            self.link_buffer += char
            if self.link_bar_seen:
                return
            if char == '|':
                self.link_bar_seen = True
                return

        if char == ' ' and self.is_active(MarkupKind.NON_BREAKING_SPACE):
            escaped = '&nbsp;'
        else:
            escaped = escape(char, quote=False)

        if self.nodes and isinstance(self.nodes[-1], InlineText):
            self.nodes[-1].add_text(escaped)
        else:
            self.nodes.append(InlineText(escaped))


def parse_inline(text: str, lineno: Optional[int], errors: List[ParseError],
                 index: Dict[str, str]) -> List[Node]:
    """
    Parse the formatting codes of a paragraph.

    @param text: The paragraph, lines already joined with spaces.
    @param lineno: The line the paragraph starts on, for error reporting.
    @param errors: Where non fatal errors are appended.
    @param index: Receives the keywords of C{X<...>} codes, mapped to
        their anchor ids.
    @return: The inline nodes of the paragraph.  Unterminated codes are
        closed, except C{Z<...>}, which is left for L{zap()}.
    """
    return _InlineParser(text, lineno, errors, index).parse()


def zap(nodes: List[Node]) -> None:
    """
    Erase the content of C{Z<...>} codes, delimiters included, from the
    nodes of a complete block.

    A zap left open stops at the end of its block; the block end node is kept.
    """
    kept: List[Node] = []
    depth = 0
    for node in nodes:
        if isinstance(node, InlineMarkupStart) and node.kind is MarkupKind.ZAP:
            depth += 1
        elif depth == 0:
            kept.append(node)
        elif isinstance(node, InlineMarkupEnd) and node.kind is MarkupKind.ZAP:
            depth -= 1
        elif isinstance(node, BLOCK_END_NODES):
            depth = 0
            kept.append(node)
    nodes[:] = kept


def plain_text(text: str) -> str:
    """
    Get the text a reader sees in C{text}: formatting codes are dropped,
    as well as zapped content, index keywords and link targets.
    """
    nodes = parse_inline(text, None, [], {})
    zap(nodes)
    parts = []
    for node in nodes:
        if isinstance(node, InlineText):
            parts.append(unescape(node.text))
        elif isinstance(node, InlineMarkupEnd) and node.kind is MarkupKind.ESCAPE:
            codepoint = escape_codepoint(node.args[0])
            if codepoint is not None:
                parts.append(chr(codepoint))
    return ''.join(parts)
