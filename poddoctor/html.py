"""
Render parsed POD documents to HTML.

Each node kind has a C{visit_<NodeKind>} method returning its HTML fragment;
a document is the concatenation of the fragments of its nodes.  Tags are
built as stan and flattened by Twisted, so attribute values are escaped.
"""
from typing import Callable, Dict, Iterable

from twisted.web.template import CharRef, Tag, tags

from poddoctor.links import MANPAGE_URL_TEMPLATE, LinkKind, parse_link_target
from poddoctor.markup import DocumentLinker
from poddoctor.markup.inline import escape_codepoint
from poddoctor.markup.nodes import (
    Back, Data, HeadEnd, HeadStart, InlineMarkupEnd, InlineMarkupStart,
    InlineText, ItemEnd, ItemStart, ListType, MarkupKind, Node, Over,
    ParaEnd, ParaStart, Verbatim
)
from poddoctor.stanutils import end_tag, flatten, start_tag

_LIST_TAGS = {
    ListType.UNORDERED: 'ul',
    ListType.ORDERED: 'ol',
    ListType.DESCRIPTION: 'dl',
}

# Formatting codes that simply wrap their content.
_MARKUP_TAGS: Dict[MarkupKind, Callable[[], Tag]] = {
    MarkupKind.ITALIC: lambda: tags.em(),
    MarkupKind.BOLD: lambda: tags.strong(),
    MarkupKind.CODE: lambda: tags.code(),
    MarkupKind.FILENAME: lambda: tags.em(class_='filename'),
}

class HTMLRenderer:
    """
    Renders a list of POD nodes.  The renderer keeps no state between
    nodes, rendering the same nodes twice gives the same HTML.
    """

    def __init__(self, linker: DocumentLinker,
                 manpage_url_template: str = MANPAGE_URL_TEMPLATE):
        self.linker = linker
        self.manpage_url_template = manpage_url_template

    def render(self, nodes: Iterable[Node]) -> str:
        return ''.join(self.visit(node) for node in nodes)

    def visit(self, node: Node) -> str:
        method = getattr(self, f'visit_{node.__class__.__name__}', None)
        if method is None:
            raise AssertionError(f"Unknown POD node {node!r}")
        html: str = method(node)
        return html

    def visit_ParaStart(self, node: ParaStart) -> str:
        return '<p>'

    def visit_ParaEnd(self, node: ParaEnd) -> str:
        return '</p>\n'

    def visit_HeadStart(self, node: HeadStart) -> str:
        return start_tag(getattr(tags, f'h{node.level:d}')(id=node.anchor))

    def visit_HeadEnd(self, node: HeadEnd) -> str:
        return end_tag(f'h{node.level:d}') + '\n'

    def visit_Over(self, node: Over) -> str:
        return f'<{_LIST_TAGS[node.list_type]}>\n'

    def visit_Back(self, node: Back) -> str:
        return end_tag(_LIST_TAGS[node.list_type]) + '\n'

    def visit_ItemStart(self, node: ItemStart) -> str:
        if node.list_type is not ListType.DESCRIPTION:
            return '<li>'
        label = node.label
        if label.startswith('[') and label.endswith(']'):
            label = label[1:-1]
        return flatten(tags.dt(label)) + '<dd>'

    def visit_ItemEnd(self, node: ItemEnd) -> str:
        if node.list_type is ListType.DESCRIPTION:
            return '</dd>\n'
        return '</li>\n'

    def visit_Verbatim(self, node: Verbatim) -> str:
        return flatten(tags.pre(node.text)) + '\n'

    def visit_Data(self, node: Data) -> str:
        # Only data for this output format is kept.
        if node.args and node.args[0].lower() == 'html':
            return node.body
        return ''

    def visit_InlineText(self, node: InlineText) -> str:
        return node.text

    def visit_InlineMarkupStart(self, node: InlineMarkupStart) -> str:
        if node.kind in _MARKUP_TAGS:
            return start_tag(_MARKUP_TAGS[node.kind]())
        if node.kind is MarkupKind.LINK:
            payload, = node.args
            target = parse_link_target(payload)
            href = target.href(self.linker, self.manpage_url_template)
            if target.kind in (LinkKind.URL, LinkKind.MANPAGE):
                return start_tag(tags.a(href=href, class_='external-link'))
            return start_tag(tags.a(href=href, class_='internal-link'))
        return ''

    def visit_InlineMarkupEnd(self, node: InlineMarkupEnd) -> str:
        if node.kind in _MARKUP_TAGS:
            return end_tag(_MARKUP_TAGS[node.kind]().tagName)
        if node.kind is MarkupKind.LINK:
            return end_tag('a')
        if node.kind is MarkupKind.INDEX:
            target, = node.args
            return flatten(tags.a(id=target))
        if node.kind is MarkupKind.ESCAPE:
            code, = node.args
            codepoint = escape_codepoint(code)
            return '' if codepoint is None else flatten(CharRef(codepoint))
        return ''
