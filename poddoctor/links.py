"""
Classification of C{L<...>} targets, and a L{DocumentLinker} implementation.

The payload of a link is C{text|target} or just C{target}.  Targets are, in
order of precedence:

    - URLs (C{http://example.com}), linked as is;
    - man pages (C{printf(3)});
    - methods: C{Foo#bar} (instance method), C{Foo::bar} (class method),
      C{#bar} (a method of the current document);
    - sections: C{Foo/Section} (a section of another document),
      C{/Section}, C{"Section"} or C{Section} (a section of the current
      document).
"""
import enum
import re
from typing import Optional

import attr

from poddoctor.markup import DocumentLinker
from poddoctor.markup.nodes import make_anchor

MANPAGE_URL_TEMPLATE = 'https://man7.org/linux/man-pages/man{section}/{name}.{section}.html'

# Only single digit sections: printf(3) but not printf(3p).
_MANPAGE_RE = re.compile(r'^(\S+)\((\d)\)$')

class LinkKind(enum.Enum):
    URL = 'url'
    MANPAGE = 'manpage'
    METHOD = 'method'
    SECTION = 'section'

@attr.s(auto_attribs=True, frozen=True)
class LinkTarget:
    """
    A parsed link target.

    C{document} is C{None} for links into the current document.
    """
    kind: LinkKind
    text: str
    """The text shown for the link."""
    target: str
    document: Optional[str] = None
    """The class or module name, or the man page name."""
    section: Optional[str] = None
    """The heading title, or the man page section."""
    method: Optional[str] = None
    is_cmethod: bool = False

    def href(self, linker: DocumentLinker,
             manpage_url_template: str = MANPAGE_URL_TEMPLATE) -> str:
        """
        Compute the address this link points to.

        @param linker: Resolves other documents and method anchors. Not used
            for URLs and man pages.
        """
        if self.kind is LinkKind.URL:
            return self.target
        if self.kind is LinkKind.MANPAGE:
            return manpage_url_template.format(name=self.document, section=self.section)

        url = '' if self.document is None else linker.resolve_document(self.document)
        if self.kind is LinkKind.METHOD:
            assert self.method is not None
            return f'{url}#{linker.resolve_method(self.is_cmethod, self.method)}'
        if self.section:
            return f'{url}#{make_anchor(self.section)}'
        return url or '#'


def _unquote(section: str) -> str:
    if len(section) > 1 and section[0] == section[-1] == '"':
        return section[1:-1]
    return section

def parse_link_target(payload: str) -> LinkTarget:
    """
    Classify the payload of a C{L<...>} code.
    """
    if '|' in payload:
        text, target = (part.strip() for part in payload.split('|', 1))
    else:
        text = target = payload.strip()

    if '://' in target:
        return LinkTarget(LinkKind.URL, text, target)

    match = _MANPAGE_RE.match(target)
    if match:
        return LinkTarget(LinkKind.MANPAGE, text, target,
                          document=match.group(1), section=match.group(2))

    # The first delimiter wins.
    hash_pos, colons_pos = target.find('#'), target.find('::')
    if hash_pos >= 0 or colons_pos >= 0:
        is_cmethod = colons_pos >= 0 and (hash_pos < 0 or colons_pos < hash_pos)
        pos = colons_pos if is_cmethod else hash_pos
        return LinkTarget(LinkKind.METHOD, text, target,
                          document=target[:pos] or None,
                          method=target[pos + (2 if is_cmethod else 1):],
                          is_cmethod=is_cmethod)

    if '/' in target:
        document, section = target.split('/', 1)
        return LinkTarget(LinkKind.SECTION, text, target,
                          document=document or None, section=_unquote(section))
    # Without a document name, the whole target is a section of this document.
    return LinkTarget(LinkKind.SECTION, text, target, section=_unquote(target))


class TemplateLinker(DocumentLinker):
    """
    Resolves documents and method anchors with format strings.

    @ivar document_template: Format string for the address of a document,
        gets C{{name}}.  C{::} in names is replaced with C{/}, so
        C{Foo::Bar} goes to C{Foo/Bar.html} by default.
    @ivar method_template: Format string for a method anchor, gets
        C{{name}} and C{{kind}}, which is C{c} for class methods and
        C{i} for instance methods.
    """

    def __init__(self, document_template: str = '{name}.html',
                 method_template: str = 'method-{kind}-{name}'):
        self.document_template = document_template
        self.method_template = method_template

    def resolve_document(self, name: str) -> str:
        return self.document_template.format(name=name.replace('::', '/'))

    def resolve_method(self, is_cmethod: bool, name: str) -> str:
        return self.method_template.format(kind='c' if is_cmethod else 'i', name=name)
