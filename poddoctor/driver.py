"""The entry point."""

from typing import List, Sequence, Tuple
import sys
from pathlib import Path

import attr
from twisted.web.template import tags

from poddoctor.options import Options
from poddoctor.utils import error
from poddoctor.links import TemplateLinker
from poddoctor.markup import ParsedPod, ParseError
from poddoctor.markup.pod import parse_pod
from poddoctor.html import HTMLRenderer
from poddoctor.stanutils import flatten

@attr.s(auto_attribs=True)
class Reporter:
    """
    Prints messages to the user, depending on the verbosity level.
    """
    verbosity: int = 0
    violations: int = 0
    """Number of warnings reported so far."""

    def msg(self, section: str, msg: str, thresh: int = 0) -> None:
        """
        Log a message.

        @param section: The generation step this message belongs to.
        @param msg: The message.
        @param thresh: The minimum verbosity level for this message to be printed.
            A negative thresh counts the message as a warning, which fails
            the build if option C{-W} is passed.
        """
        if thresh < 0:
            self.violations += 1
        if thresh <= self.verbosity:
            print(msg, file=sys.stderr)

def get_documents(options: Options, reporter: Reporter) -> List[Tuple[Path, ParsedPod]]:
    """
    Read and parse the POD files given on the command line.
    """
    documents = []
    for path in options.sourcepath:
        try:
            text = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            error(f"Can't read {path}: {e}")

        reporter.msg('parsing', f'parsing {path}', thresh=1)
        errors: List[ParseError] = []
        document = parse_pod(text, errors)
        for e in errors:
            reporter.msg('parsing', f'{path}:{e.linenum()}: {e.descr()}', thresh=-1)
        documents.append((path, document))
    return documents

def make(options: Options, documents: List[Tuple[Path, ParsedPod]], reporter: Reporter) -> None:
    """
    Produce the html output, as configured in the options.
    """
    renderer = HTMLRenderer(
        TemplateLinker(options.documenturltemplate, options.methodanchortemplate),
        manpage_url_template=options.manpageurltemplate)

    if options.htmloutput == '-':
        for _, document in documents:
            sys.stdout.write(renderer.render(document.nodes))
        return

    build_directory = Path(options.htmloutput)
    build_directory.mkdir(parents=True, exist_ok=True)
    reporter.msg('html', f'writing html to {build_directory}')

    for path, document in documents:
        (build_directory / f'{path.stem}.html').write_text(
            renderer.render(document.nodes), encoding='utf-8')

    if options.makeindex:
        entries = sorted((keyword, f'{path.stem}.html#{target}')
                         for path, document in documents
                         for keyword, target in document.index.items())
        index = tags.ul(*(tags.li(tags.a(keyword, href=href)) for keyword, href in entries))
        (build_directory / 'index.html').write_text(flatten(index) + '\n', encoding='utf-8')

def main(args: Sequence[str] = sys.argv[1:]) -> int:
    """
    This is the console_scripts entry point for poddoctor CLI.

    @param args: Command line arguments to run the CLI.
    """
    options = Options.from_args(args)

    if not options.sourcepath:
        error("No source paths given.")

    reporter = Reporter(verbosity=options.verbosity)
    documents = get_documents(options, reporter)
    make(options, documents, reporter)

    if reporter.violations and options.warnings_as_errors:
        # Update exit code if the run has produced warnings.
        return 3
    return 0
