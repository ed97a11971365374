#
# pod.py: POD (Plain Old Documentation) parsing
#

"""
Parser for POD documents, as described in
U{perlpod<https://perldoc.perl.org/perlpod>} and
U{perlpodspec<https://perldoc.perl.org/perlpodspec>}.

A POD document is made of blocks separated by blank lines:

    - I{command paragraphs} start with C{=}: C{=head1} to C{=head4},
      C{=over}/C{=item}/C{=back} lists, C{=begin}/C{=end} and C{=for}
      data regions, C{=cut}/C{=pod}, and C{=encoding}.
    - I{verbatim paragraphs} start with a space or a tab.  Their line breaks
      are kept, and the indentation of their first line is removed from
      every line.
    - I{ordinary paragraphs} are everything else.  Lines are joined with
      spaces and the text is parsed for formatting codes by
      L{poddoctor.markup.inline}.

The parser reads the document line by line and appends L{nodes
<poddoctor.markup.nodes>} to a flat list.  List structure is only known
afterwards: the C{=back} command goes back in the list to close the last item
and to set the type of the C{=over} node.
"""

# Code organization..
#   1. PodParser: line loop
#   2. command paragraphs
#   3. backward lookups
#   4. parse_pod()

import enum
import logging
from typing import Dict, List, Optional

from poddoctor.markup import ParsedPod, ParseError, append_warning
from poddoctor.markup.inline import parse_inline, zap
from poddoctor.markup.nodes import (
    Back, Data, HeadEnd, HeadStart, ItemEnd, ItemStart, ListType, Node,
    Over, ParaEnd, ParaStart, Verbatim, list_type_for_label
)

logger = logging.getLogger(__name__)

_HEAD_COMMANDS = {'head1': 1, 'head2': 2, 'head3': 3, 'head4': 4}

class Mode(enum.Enum):
    """
    What the line loop is doing with the next line.
    """
    NONE = 'none'
    COMMAND = 'command'
    ORDINARY = 'ordinary'
    VERBATIM = 'verbatim'
    DATA = 'data'
    """Inside C{=begin}, until the matching C{=end}."""
    CUT = 'cut'
    """After C{=cut}, until C{=pod}."""

##################################################
## Line loop
##################################################

class PodParser:
    """
    Converts a POD document to a list of nodes.

    A parser is good for one document; it owns the node list until
    L{parse()} returns.
    """

    def __init__(self, text: str, errors: Optional[List[ParseError]] = None):
        """
        @param text: The POD document.
        @param errors: A list where the non fatal errors found while parsing
            will be stored.  If not given, they are only available from
            L{ParsedPod.errors}.
        """
        self.text = text
        self.errors: List[ParseError] = [] if errors is None else errors

        self.nodes: List[Node] = []
        self.index: Dict[str, str] = {}

        self._mode = Mode.NONE
        self._lineno = 0
        self._block_lineno = 0
        self._buffer = ''
        self._verbatim_indent = 0
        self._data_end_tag = ''
        self._data_args: List[str] = []

    def warn(self, descr: str, lineno: Optional[int] = None) -> None:
        append_warning(self.errors, descr, self._block_lineno if lineno is None else lineno)

    def parse(self) -> ParsedPod:
        """
        Parse the whole document.
        """
        lines = self.text.replace('\r\n', '\n').split('\n')
        for self._lineno, line in enumerate(lines, start=1):
            self._parse_line(line)

        # An empty line terminates whatever block is still open.
        self._parse_line('')
        self._finish()

        logger.debug("parsed %d lines into %d nodes", len(lines), len(self.nodes))
        return ParsedPod(self.nodes, self.index, self.errors)

    def _parse_line(self, line: str) -> None:
        mode = self._mode

        if mode in (Mode.COMMAND, Mode.ORDINARY):
            if line:
                # Replace end-of-line with space.
                self._buffer += line + ' '
                return
            self._mode = Mode.NONE
            if mode is Mode.COMMAND:
                self._parse_command(self._buffer)
            else:
                self._add_block(ParaStart(), self._buffer, ParaEnd())
            self._buffer = ''

        elif mode is Mode.VERBATIM:
            if line:
                self._buffer += line + '\n'
                return
            # The indentation is kept for a following verbatim paragraph.
            self._mode = Mode.NONE
            self._parse_verbatim(self._buffer)
            self._buffer = ''

        elif mode is Mode.DATA:
            if line != self._data_end_tag:
                self._buffer += line + '\n'
                return
            self._mode = Mode.NONE
            self._parse_data(self._buffer)

        elif mode is Mode.CUT:
            if line == '=pod':
                self._mode = Mode.NONE

        elif not line:
            pass

        else:
            self._block_lineno = self._lineno
            if line[0] == '=':
                self._mode = Mode.COMMAND
                self._buffer = line + ' '
            elif line[0] in ' \t':
                # Following lines don't have to be indented, they lose the
                # same number of characters anyway.
                self._verbatim_indent = len(line) - len(line.lstrip(' \t'))
                self._mode = Mode.VERBATIM
                self._buffer = line + '\n'
            else:
                self._mode = Mode.ORDINARY
                self._buffer = line + ' '

    def _finish(self) -> None:
        """
        Close what the end of the document left open.
        """
        if self._mode is Mode.DATA:
            self.warn(f"Missing {self._data_end_tag!r}, the data block runs to the end of the document.")
            self._mode = Mode.NONE
            self._parse_data(self._buffer)
        self._buffer = ''

        while self._find_preceding_over() is not None:
            self.warn("Missing =back at the end of the document.", self._lineno)
            self._parse_back()

    def _add_block(self, start: Node, text: str, end: Node) -> None:
        """
        Add a block of inline text surrounded by C{start} and C{end}.
        """
        block = [start]
        block.extend(parse_inline(text.rstrip(), self._block_lineno, self.errors, self.index))
        block.append(end)
        zap(block)
        self.nodes.extend(block)

    def _parse_verbatim(self, text: str) -> None:
        indent = self._verbatim_indent
        text = ''.join(line[indent:] + '\n' for line in text.split('\n')[:-1])

        # Adjacent verbatim paragraphs make one block.
        if self.nodes and isinstance(self.nodes[-1], Verbatim):
            self.nodes[-1].add_text('\n' + text)
        else:
            self.nodes.append(Verbatim(text))

    def _parse_data(self, text: str) -> None:
        self.nodes.append(Data(text, self._data_args))
        self._data_end_tag = ''
        self._data_args = []

    ##################################################
    ## Command paragraphs
    ##################################################

    def _parse_command(self, command: str) -> None:
        """
        Execute a command paragraph.

        @param command: The paragraph, with the leading C{=} and lines
            joined with spaces.
        """
        words = [w for w in command[1:].split(' ') if w]
        if not words:
            self.warn("Ignoring empty command.")
            return
        cmd, arguments = words[0], words[1:]

        if cmd in _HEAD_COMMANDS:
            level = _HEAD_COMMANDS[cmd]
            title = command[1:].strip()[len(cmd):].strip()
            self._add_block(HeadStart(level, title), title, HeadEnd(level))
        elif cmd == 'pod':
            # Only meaningful after =cut, which is handled by the line loop.
            pass
        elif cmd == 'cut':
            self._mode = Mode.CUT
        elif cmd == 'over':
            self._parse_over(arguments)
        elif cmd == 'item':
            self._parse_item(arguments)
        elif cmd == 'back':
            self._parse_back()
        elif cmd == 'begin':
            if not arguments:
                self.warn("=begin command lacks argument, ignoring.")
                return
            self._data_end_tag = f'=end {arguments[0]}'
            self._data_args = arguments
            self._mode = Mode.DATA
        elif cmd == 'end':
            self.warn("=end without matching =begin, ignoring.")
        elif cmd == 'for':
            self._parse_for(arguments)
        elif cmd == 'encoding':
            self.warn("The =encoding command is ignored, UTF-8 is assumed.")
        else:
            self.warn(f"Ignoring unknown command {cmd!r}.")

    def _parse_over(self, arguments: List[str]) -> None:
        if not arguments:
            self.nodes.append(Over())
            return
        try:
            indent = float(arguments[0])
        except ValueError:
            self.warn(f"Invalid =over indentation {arguments[0]!r}, using 4.")
            indent = 4.0
        self.nodes.append(Over(indent))

    def _parse_item(self, arguments: List[str]) -> None:
        arguments = list(arguments)
        if arguments:
            label = arguments.pop(0)
            # A bracketed term runs to the word holding the closing bracket.
            if label.startswith('['):
                while ']' not in label and arguments:
                    label += ' ' + arguments.pop(0)
        else:
            # A bare =item is a shorthand for "=item *".
            label = '*'

        if self._find_preceding_over() is None:
            # Nothing would close the item.
            self.warn("=item outside of =over, keeping its text as a paragraph.")
        else:
            self._close_item()
            self.nodes.append(ItemStart(label, list_type_for_label(label)))

        if arguments:
            self._add_block(ParaStart(), ' '.join(arguments), ParaEnd())

    def _parse_back(self) -> None:
        over = self._find_preceding_over()
        if over is None:
            self.warn("=back without matching =over, ignoring.")
            return

        item = self._close_item()
        if item is None:
            self.warn("=back closes a list without any =item, assuming an unordered list.")
            list_type = ListType.UNORDERED
        else:
            list_type = item.list_type

        over.list_type = list_type
        self.nodes.append(Back(list_type))

    def _parse_for(self, arguments: List[str]) -> None:
        if not arguments:
            self.warn("=for command lacks argument, ignoring.")
            return

        formatname = arguments[0]
        content = ' '.join(arguments[1:])
        if formatname.startswith(':'):
            # The content is an ordinary paragraph.
            self._add_block(ParaStart(), content, ParaEnd())
        else:
            # Shorthand for =begin/=end.
            self.nodes.append(Data(content, [formatname]))

    def _close_item(self) -> Optional[ItemStart]:
        """
        Close the item open at the current list depth, if any.

        @return: The start node of the closed item.
        """
        item = self._find_preceding_item()
        if item is not None:
            self.nodes.append(ItemEnd(item.list_type))
        return item

    ##################################################
    ## Backward lookups
    ##################################################

    def _find_preceding_item(self) -> Optional[ItemStart]:
        """
        Find the last C{=item} of the current list, skipping over the
        nested lists.  The search stops at the C{=over} of the current list.
        """
        depth = 0
        for node in reversed(self.nodes):
            if isinstance(node, Back):
                depth += 1
            elif isinstance(node, Over):
                if depth == 0:
                    return None
                depth -= 1
            elif isinstance(node, ItemStart) and depth == 0:
                return node
        return None

    def _find_preceding_over(self) -> Optional[Over]:
        """
        Find the C{=over} of the current list, skipping over the nested lists.
        """
        depth = 0
        for node in reversed(self.nodes):
            if isinstance(node, Back):
                depth += 1
            elif isinstance(node, Over):
                if depth == 0:
                    return node
                depth -= 1
        return None

#################################################################
##                    SUPPORT FOR PODDOCTOR
#################################################################

def parse_pod(text: str, errors: Optional[List[ParseError]] = None) -> ParsedPod:
    """
    Parse the given POD document and return a L{ParsedPod} representation
    of its contents.

    @param text: The document to parse.
    @param errors: A list where the errors generated during parsing
        will be stored.
    """
    return PodParser(text, errors).parse()
