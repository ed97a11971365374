"""
The node model produced by the POD parser.

A parsed document is a flat, ordered list of nodes.  Block structure is
expressed with start/end pairs (L{ParaStart}/L{ParaEnd}, L{Over}/L{Back},
...) rather than with nesting, so the parser can append nodes as it goes and
only needs to go back to patch list types and to erase zapped content.

The set of node classes is closed: L{Node} is the union of all of them, and
renderers are expected to handle every member.
"""
import enum
import re
from typing import List, Union

import attr


class ListType(enum.Enum):
    """
    The kind of list opened by C{=over}.
    """
    UNORDERED = 'unordered'
    ORDERED = 'ordered'
    DESCRIPTION = 'description'


class MarkupKind(enum.Enum):
    """
    The kind of an inline formatting code, selected by the letter before the C{<}.
    """
    NONE = None
    ITALIC = 'I'
    BOLD = 'B'
    CODE = 'C'
    FILENAME = 'F'
    NON_BREAKING_SPACE = 'S'
    ZAP = 'Z'
    ESCAPE = 'E'
    INDEX = 'X'
    LINK = 'L'

    @classmethod
    def from_letter(cls, letter: str) -> 'MarkupKind':
        """
        @return: The kind for this formatting letter, L{MarkupKind.NONE} if
            the letter is not a known formatting code.
        """
        try:
            return cls(letter)
        except ValueError:
            return cls.NONE


def list_type_for_label(label: str) -> ListType:
    """
    Derive the list type from an C{=item} label: a C{*} makes an unordered list,
    a leading digit an ordered one, and anything else a description list.
    """
    if label.startswith('*'):
        return ListType.UNORDERED
    if label[:1].isdigit():
        return ListType.ORDERED
    return ListType.DESCRIPTION


_WHITESPACE_RE = re.compile(r'\s+')

def make_anchor(text: str) -> str:
    """
    Normalise a heading title or a link section name into an anchor id:
    surrounding whitespace is dropped and inner whitespace becomes C{_}.
    """
    return _WHITESPACE_RE.sub('_', text.strip())


@attr.s(auto_attribs=True)
class ParaStart:
    pass

@attr.s(auto_attribs=True)
class ParaEnd:
    pass

@attr.s(auto_attribs=True)
class HeadStart:
    level: int
    title: str
    """The raw title text, formatting codes included."""

    @property
    def anchor(self) -> str:
        """
        The id of the heading, made of the text shown to the reader so that
        C{L</Title>} can point to it.
        """
        from poddoctor.markup.inline import plain_text
        return make_anchor(plain_text(self.title))

@attr.s(auto_attribs=True)
class HeadEnd:
    level: int

@attr.s(auto_attribs=True)
class Over:
    indent: float = 4.0
    list_type: ListType = ListType.UNORDERED
    """
    Placeholder until the matching C{=back} is seen, which patches in the
    type of the list's items.
    """

@attr.s(auto_attribs=True)
class ItemStart:
    label: str
    list_type: ListType

@attr.s(auto_attribs=True)
class ItemEnd:
    list_type: ListType

@attr.s(auto_attribs=True)
class Back:
    list_type: ListType

@attr.s(auto_attribs=True)
class Verbatim:
    text: str

    def add_text(self, text: str) -> None:
        self.text += text

@attr.s(auto_attribs=True)
class Data:
    body: str
    args: List[str] = attr.ib(factory=list)
    """The C{=begin}/C{=for} arguments, the format name first."""

@attr.s(auto_attribs=True)
class InlineText:
    text: str
    """HTML-escaped text."""

    def add_text(self, text: str) -> None:
        self.text += text

@attr.s(auto_attribs=True)
class InlineMarkupStart:
    kind: MarkupKind
    args: List[str] = attr.ib(factory=list)
    """For links, filled with the C{text|target} payload once the link is closed."""

@attr.s(auto_attribs=True)
class InlineMarkupEnd:
    kind: MarkupKind
    args: List[str] = attr.ib(factory=list)


Node = Union[ParaStart, ParaEnd, HeadStart, HeadEnd, Over, ItemStart, ItemEnd,
             Back, Verbatim, Data, InlineText, InlineMarkupStart, InlineMarkupEnd]

BLOCK_END_NODES = (HeadEnd, ItemEnd, ParaEnd)
