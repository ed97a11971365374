"""
Config file parsers for L{configargparse}, reading one named section of a
C{TOML} or C{INI} file.  This is what lets the options live in the
C{[tool.poddoctor]} table of C{pyproject.toml} or in the C{[tool:poddoctor]}
section of C{setup.cfg}.

>>> sections = ['tool.poddoctor', 'tool:poddoctor', 'poddoctor']
>>> parser = ArgumentParser(default_config_files=['./pyproject.toml', './setup.cfg'],
...     config_file_parser_class=CompositeConfigParser(
...         [TomlConfigParser(sections), IniConfigParser(sections)]))
"""
from __future__ import annotations

from ast import literal_eval
from collections import OrderedDict
import configparser
from typing import Any, Callable, Dict, List, Optional, TextIO, Union

from configargparse import ConfigFileParser, ConfigFileParserException
import toml

def get_toml_section(data: Dict[str, Any], section: str) -> Optional[Dict[str, Any]]:
    """
    Get a table of loaded TOML data by its dotted name, like C{tool.poddoctor}.

    @return: The table, or C{None} if there is no such table.
    """
    table: Any = data
    for name in section.split('.'):
        if not isinstance(table, dict):
            return None
        table = table.get(name.strip())
    return table if isinstance(table, dict) else None

class TomlConfigParser(ConfigFileParser):
    """
    TOML parser reading the first of C{sections} found in the file.

    Example::

        [tool.poddoctor]
        html-output = "docs/html"
        warnings-as-errors = true
        verbose = 1
    """

    def __init__(self, sections: List[str]) -> None:
        super().__init__()
        self.sections = sections

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        try:
            config = toml.load(stream)
        except Exception as e:
            raise ConfigFileParserException(f"Couldn't parse TOML file: {e}")

        result: Dict[str, Any] = OrderedDict()
        for section in self.sections:
            data = get_toml_section(config, section)
            if data:
                # Values go back through argparse, which wants strings.
                for key, value in data.items():
                    if isinstance(value, list):
                        result[key] = [str(i) for i in value]
                    elif isinstance(value, bool):
                        result[key] = str(value).lower()
                    elif value is not None:
                        result[key] = str(value)
                break
        return result

    def get_syntax_description(self) -> str:
        return ("Config file syntax is Tom's Obvious, Minimal Language. "
                "See https://toml.io for details.")

class IniConfigParser(ConfigFileParser):
    """
    INI parser reading the sections named in C{sections}.

    Lists are written with the python list syntax, or one item per line.

    Example::

        [tool:poddoctor]
        html-output = docs/html
        warnings-as-errors = true
    """

    def __init__(self, sections: List[str]) -> None:
        super().__init__()
        self.sections = sections

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        config = configparser.ConfigParser()
        try:
            config.read_string(stream.read())
        except Exception as e:
            raise ConfigFileParserException(f"Couldn't parse INI file: {e}")

        result: Dict[str, Union[str, List[str]]] = OrderedDict()
        for section in config.sections():
            if section not in self.sections:
                continue
            for key, value in config[section].items():
                if value.startswith('[') and value.endswith(']'):
                    try:
                        items = literal_eval(value)
                        assert isinstance(items, list)
                    except Exception as e:
                        raise ConfigFileParserException(f"Error evaluating list: {e}") from e
                    result[key] = [str(i) for i in items]
                elif '\n' in value:
                    result[key] = [i for i in value.split('\n') if i]
                else:
                    result[key] = value
        return result

    def get_syntax_description(self) -> str:
        return ("Uses configparser module to parse an INI file. "
                "See https://docs.python.org/3/library/configparser.html for details.")

class CompositeConfigParser(ConfigFileParser):
    """
    Tries each parser in turn until one of them can read the file.
    """

    def __init__(self, config_parser_types: List[Callable[[], ConfigFileParser]]) -> None:
        super().__init__()
        self.parsers = [p() for p in config_parser_types]

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        errors = []
        for p in self.parsers:
            try:
                return p.parse(stream) # type: ignore[no-any-return]
            except Exception as e:
                stream.seek(0)
                errors.append(e)
        raise ConfigFileParserException(
                f"Error parsing config: {', '.join(repr(str(e)) for e in errors)}")

    def get_syntax_description(self) -> str:
        return ' '.join(f"[{i+1}] {p.__class__.__name__}: {p.get_syntax_description()}"
                        for i, p in enumerate(self.parsers))
