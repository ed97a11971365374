"""
Utilities related to Stan tree building and HTML flattening.
"""
from typing import List, TYPE_CHECKING

from twisted.web.template import Tag, flattenString
from twisted.python.failure import Failure

if TYPE_CHECKING:
    from twisted.web.template import Flattenable

def flatten(stan: "Flattenable") -> str:
    """
    Convert a document fragment from a Stan tree to HTML.

    @param stan: Document fragment to flatten.
    @return: An HTML string representation of the C{stan} tree.
    """
    ret: List[bytes] = []
    err: List[Failure] = []
    flattenString(None, stan).addCallback(ret.append).addErrback(err.append)
    if err:
        raise err[0].value
    else:
        return ret[0].decode()

def start_tag(tag: Tag) -> str:
    """
    Flatten the opening tag of a childless, non-void C{tag}, with its
    attributes escaped by the flattener.
    """
    assert not tag.children
    html = flatten(tag)
    end = f'</{tag.tagName}>'
    assert html.endswith(end), html
    return html[:-len(end)]

def end_tag(name: str) -> str:
    return f'</{name}>'
