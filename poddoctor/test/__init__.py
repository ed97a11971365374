"""PodDoctor's test suite."""

from typing import List, Optional, TYPE_CHECKING, Tuple

from poddoctor.markup import DocumentLinker, ParseError
from poddoctor.markup.nodes import Node
from poddoctor.markup.pod import parse_pod

# Because pytest does not export types for all fixtures, we define
# approximations that are good enough for our test cases:

if TYPE_CHECKING:
    from typing_extensions import Protocol

    class CaptureResult(Protocol):
        out: str
        err: str

    class CapSys(Protocol):
        def readouterr(self) -> CaptureResult: ...

    from _pytest.monkeypatch import MonkeyPatch
else:
    CaptureResult = CapSys = object
    MonkeyPatch = object


class RecordingLinker(DocumentLinker):
    """
    A L{DocumentLinker} with predictable results, that remembers its calls.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[object, ...]] = []

    def resolve_document(self, name: str) -> str:
        self.calls.append(('document', name))
        return f'{name}.html'

    def resolve_method(self, is_cmethod: bool, name: str) -> str:
        self.calls.append(('method', is_cmethod, name))
        return f'{"c" if is_cmethod else "i"}-{name}'


def parse(text: str, errors: Optional[List[ParseError]] = None) -> List[Node]:
    """
    Parse C{text} and return its nodes, failing on errors unless an
    C{errors} list is given.
    """
    errs: List[ParseError] = [] if errors is None else errors
    nodes = list(parse_pod(text, errs).nodes)
    if errors is None:
        assert not errs, [str(e) for e in errs]
    return nodes

def descrs(errors: List[ParseError]) -> List[str]:
    return [e.descr() for e in errors]
