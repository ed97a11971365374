"""
The command-line parsing.
"""

from typing import List, Sequence
import functools
from pathlib import Path
from argparse import Namespace

from configargparse import ArgumentParser
import attr

from poddoctor import __version__
from poddoctor.links import MANPAGE_URL_TEMPLATE
from poddoctor.utils import parse_path, error
from poddoctor._configparser import CompositeConfigParser, IniConfigParser, TomlConfigParser

DEFAULT_CONFIG_FILES = ['./pyproject.toml', './setup.cfg', './poddoctor.ini']
CONFIG_SECTIONS = ['tool.poddoctor', 'tool:poddoctor', 'poddoctor']

__all__ = ("Options", )

# CONFIGURATION PARSING

PoddoctorConfigParser = CompositeConfigParser(
                [TomlConfigParser(CONFIG_SECTIONS),
                 IniConfigParser(CONFIG_SECTIONS)])

# ARGUMENTS PARSING

def get_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='poddoctor',
        description="POD to HTML documentation generator.",
        usage="poddoctor [options] SOURCEPATH...",
        default_config_files=DEFAULT_CONFIG_FILES,
        config_file_parser_class=PoddoctorConfigParser,
        ignore_unknown_config_file_keys=True)

    parser.add_argument(
        '-c', '--config', is_config_file=True,
        help=("Load config from this file (any command line "
              "options override settings from the file)."), metavar="PATH",)
    parser.add_argument(
        '--html-output', dest='htmloutput', default='poddocs',
        help=("Directory to save HTML files to (default 'poddocs'). "
              "Use '-' to write the HTML to the standard output."), metavar='PATH')
    parser.add_argument(
        '--document-url-template', dest='documenturltemplate', default='{name}.html',
        help=("Format string for the address of another document, "
              "'{name}' is the class or module name with '::' replaced by '/' "
              "(default '{name}.html')."), metavar='TEMPLATE')
    parser.add_argument(
        '--method-anchor-template', dest='methodanchortemplate', default='method-{kind}-{name}',
        help=("Format string for method anchors, '{kind}' is 'c' for class methods "
              "and 'i' for instance methods (default 'method-{kind}-{name}')."), metavar='TEMPLATE')
    parser.add_argument(
        '--manpage-url-template', dest='manpageurltemplate', default=MANPAGE_URL_TEMPLATE,
        help=("Format string for man page links, gets '{name}' and '{section}'."),
        metavar='TEMPLATE')
    parser.add_argument(
        '--index', action='store_true', dest='makeindex', default=False,
        help=("Also write index.html, listing the X<> keywords of all documents."))
    parser.add_argument(
        '--warnings-as-errors', '-W', action='store_true',
        dest='warnings_as_errors', default=False,
        help=("Return exit code 3 on warnings."))
    parser.add_argument(
        '--verbose', '-v', action='count', dest='verbosity',
        default=0,
        help=("Be noisier.  Can be repeated for more noise."))
    parser.add_argument(
        '--quiet', '-q', action='count', dest='quietness',
        default=0,
        help=("Be quieter."))

    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')

    parser.add_argument(
        'sourcepath', metavar='SOURCEPATH',
        help=("Path to the POD files to document."),
        nargs="*", default=[],
    )
    return parser

def parse_args(args: Sequence[str]) -> Namespace:
    parser = get_parser()
    options = parser.parse_args(args)
    assert isinstance(options, Namespace)
    options.verbosity -= options.quietness
    return options

# CONVERTERS

def _convert_sourcepath(l: List[str]) -> List[Path]:
    return list(map(functools.partial(parse_path, opt='SOURCEPATH'), l))

def _validate_template(template: str, opt: str, **fields: str) -> str:
    try:
        template.format(**fields)
    except (KeyError, IndexError, ValueError) as e:
        error(f"{opt}: invalid template {template!r}, {e!r}.")
    return template

# TYPED OPTIONS CONTAINER

@attr.s
class Options:
    """
    Container for all possible poddoctor options.

    See C{poddoctor --help} for more informations.
    """
    # Avoid to define default values for config options here because it's taken care of by argparse.

    sourcepath:             List[Path]  = attr.ib(converter=_convert_sourcepath)
    htmloutput:             str         = attr.ib()
    documenturltemplate:    str         = attr.ib(converter=functools.partial(
                                            _validate_template, opt='--document-url-template', name='x'))
    methodanchortemplate:   str         = attr.ib(converter=functools.partial(
                                            _validate_template, opt='--method-anchor-template', kind='i', name='x'))
    manpageurltemplate:     str         = attr.ib(converter=functools.partial(
                                            _validate_template, opt='--manpage-url-template', name='x', section='1'))
    makeindex:              bool        = attr.ib()
    warnings_as_errors:     bool        = attr.ib()
    verbosity:              int         = attr.ib()
    quietness:              int         = attr.ib()

    # HIGH LEVEL FACTORY METHODS

    @classmethod
    def defaults(cls,) -> 'Options':
        return cls.from_args([])

    @classmethod
    def from_args(cls, args: Sequence[str]) -> 'Options':
        return cls.from_namespace(parse_args(args))

    @classmethod
    def from_namespace(cls, args: Namespace) -> 'Options':
        argsdict = vars(args)

        # remove the config argument
        argsdict.pop('config')

        return cls(**argsdict)
