"""
POD markup support.

L{pod.parse_pod()<poddoctor.markup.pod.parse_pod>} converts a POD document
to a L{ParsedPod}, the intermediate representation used to generate output:
a flat list of L{nodes<poddoctor.markup.nodes>} plus the table of index
keywords collected from C{X<...>} codes.

The C{ParsedPod} output generation method (L{to_html()<ParsedPod.to_html>})
uses a L{DocumentLinker} to compute the addresses of cross-references
(C{L<...>} codes) that point at other documents or at methods.

Markup problems are represented using L{ParseError}s.  None of them stop the
parser: the offending construct is dropped or given a sensible default, and
the error is recorded.
"""
from typing import Callable, Dict, List, Optional, Sequence

from poddoctor.markup.nodes import Node

##################################################
## Contents
##################################################
#
# 1. ParsedPod
# 2. Document Linker
# 3. ParseError
#

##################################################
## ParsedPod
##################################################
class ParsedPod:
    """
    The result of parsing a POD document.
    """

    def __init__(self, nodes: Sequence[Node], index: Dict[str, str],
                 errors: Sequence['ParseError'] = ()):
        self.nodes = nodes
        """The document, as an ordered list of nodes."""

        self.index = index
        """Maps each C{X<...>} keyword to its anchor id."""

        self.errors = errors
        """The non fatal errors reported while parsing."""

    def to_html(self, linker: 'DocumentLinker') -> str:
        """
        Render this document to an HTML fragment.

        @param linker: Resolves links to other documents and to methods.
        """
        from poddoctor.html import HTMLRenderer
        return HTMLRenderer(linker).render(self.nodes)

    def __repr__(self) -> str:
        return f'<ParsedPod: {len(self.nodes)} nodes>'

##################################################
## Document Linker (resolves crossreferences)
##################################################
class DocumentLinker:
    """
    A resolver for crossreference links out of a L{ParsedPod}.

    Implementations must be pure functions of their arguments if documents
    are rendered in parallel.
    """

    def resolve_document(self, name: str) -> str:
        """
        @param name: A class or module name, like C{Foo::Bar}.
        @return: The address of the rendered document for C{name}.
        """
        raise NotImplementedError()

    def resolve_method(self, is_cmethod: bool, name: str) -> str:
        """
        @param is_cmethod: Whether C{name} is a class method (C{Foo::bar})
            rather than an instance method (C{Foo#bar}).
        @param name: The method name.
        @return: The anchor id of the method inside its document.
        """
        raise NotImplementedError()

class CallbackLinker(DocumentLinker):
    """
    A L{DocumentLinker} built from two plain callables.
    """

    def __init__(self, document_locator: Callable[[str], str],
                 method_anchor: Callable[[bool, str], str]):
        self._document_locator = document_locator
        self._method_anchor = method_anchor

    def resolve_document(self, name: str) -> str:
        return self._document_locator(name)

    def resolve_method(self, is_cmethod: bool, name: str) -> str:
        return self._method_anchor(is_cmethod, name)

##################################################
## ParseError
##################################################

class ParseError(Exception):
    """
    A problem found while parsing a POD document.
    """

    def __init__(self,
            descr: str,
            linenum: Optional[int] = None,
            is_fatal: bool = False
            ):
        """
        @param descr: A description of the error.
        @param linenum: The line on which the error occured within
            the document.  The first line is 1.
        @param is_fatal: True if the output of the parser should not be used.
        """
        super().__init__(descr)
        self._descr = descr
        self._linenum = linenum
        self._fatal = is_fatal

    def is_fatal(self) -> bool:
        return self._fatal

    def linenum(self) -> Optional[int]:
        """
        @return: The line number on which the error occured, or C{None} if
            it's unknown.
        """
        return self._linenum

    def descr(self) -> str:
        return self._descr

    def __str__(self) -> str:
        if self._linenum is not None:
            return f'Line {self._linenum:d}: {self.descr()}'
        else:
            return self.descr()

    def __repr__(self) -> str:
        if self._linenum is None:
            return '<ParseError on unknown line>'
        else:
            return f'<ParseError on line {self._linenum:d}>'


def append_warning(errors: List[ParseError], descr: str, lineno: Optional[int]) -> None:
    """
    Create a non fatal L{ParseError} and append it to C{errors}.
    """
    errors.append(ParseError(descr, linenum=lineno, is_fatal=False))
