from io import StringIO
from pathlib import Path

import pytest

from poddoctor._configparser import IniConfigParser, TomlConfigParser, get_toml_section
from poddoctor.links import MANPAGE_URL_TEMPLATE
from poddoctor.options import CONFIG_SECTIONS, Options

from poddoctor.test import MonkeyPatch

EXAMPLE_TOML_CONF = """
[tool.poetry]
name = "awesome"

[tool.poddoctor]
html-output = "build/apidocs"
document-url-template = "https://example.com/{name}.html"
warnings-as-errors = true
index = false
"""

EXAMPLE_INI_CONF = """
[metadata]
name = awesome

[tool:poddoctor]
html-output = build/apidocs
method-anchor-template = {name}
warnings-as-errors = true
"""

def test_defaults(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    options = Options.defaults()
    assert options.sourcepath == []
    assert options.htmloutput == 'poddocs'
    assert options.documenturltemplate == '{name}.html'
    assert options.methodanchortemplate == 'method-{kind}-{name}'
    assert options.manpageurltemplate == MANPAGE_URL_TEMPLATE
    assert options.makeindex is False
    assert options.warnings_as_errors is False
    assert options.verbosity == 0

def test_verbosity(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert Options.from_args(['-v', '-v']).verbosity == 2
    assert Options.from_args(['-v', '-v', '-q']).verbosity == 1
    assert Options.from_args(['-qq']).verbosity == -2

def test_sourcepath_is_absolute(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    options = Options.from_args(['Foo.pod', 'sub/Bar.pod'])
    assert all(p.is_absolute() for p in options.sourcepath)
    assert [p.name for p in options.sourcepath] == ['Foo.pod', 'Bar.pod']

def test_get_toml_section() -> None:
    data = {'tool': {'poddoctor': {'index': True}, 'other': 1}}
    assert get_toml_section(data, 'tool.poddoctor') == {'index': True}
    assert get_toml_section(data, 'tool.other') is None
    assert get_toml_section(data, 'tool.missing') is None
    assert get_toml_section(data, 'tool.other.deeper') is None

def test_toml_config_parser() -> None:
    data = TomlConfigParser(CONFIG_SECTIONS).parse(StringIO(EXAMPLE_TOML_CONF))
    assert data == {
        'html-output': 'build/apidocs',
        'document-url-template': 'https://example.com/{name}.html',
        'warnings-as-errors': 'true',
        'index': 'false',
    }

def test_ini_config_parser() -> None:
    data = IniConfigParser(CONFIG_SECTIONS).parse(StringIO(EXAMPLE_INI_CONF))
    assert data == {
        'html-output': 'build/apidocs',
        'method-anchor-template': '{name}',
        'warnings-as-errors': 'true',
    }

def test_ini_config_parser_lists() -> None:
    data = IniConfigParser(['poddoctor']).parse(StringIO(
        "[poddoctor]\nsourcepath = ['a.pod', 'b.pod']\nother =\n    c.pod\n    d.pod\n"))
    assert data == {'sourcepath': ['a.pod', 'b.pod'], 'other': ['c.pod', 'd.pod']}

def test_config_from_pyproject(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    (tmp_path / 'pyproject.toml').write_text(EXAMPLE_TOML_CONF)
    monkeypatch.chdir(tmp_path)
    options = Options.defaults()
    assert options.htmloutput == 'build/apidocs'
    assert options.documenturltemplate == 'https://example.com/{name}.html'
    assert options.warnings_as_errors is True
    assert options.makeindex is False

def test_config_from_setup_cfg(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    (tmp_path / 'setup.cfg').write_text(EXAMPLE_INI_CONF)
    monkeypatch.chdir(tmp_path)
    options = Options.defaults()
    assert options.htmloutput == 'build/apidocs'
    assert options.methodanchortemplate == '{name}'
    assert options.warnings_as_errors is True

def test_command_line_overrides_config(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    (tmp_path / 'pyproject.toml').write_text(EXAMPLE_TOML_CONF)
    monkeypatch.chdir(tmp_path)
    options = Options.from_args(['--html-output', 'elsewhere'])
    assert options.htmloutput == 'elsewhere'

def test_explicit_config_file(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    conf = tmp_path / 'docs.ini'
    conf.write_text("[poddoctor]\nhtml-output = out\n")
    monkeypatch.chdir(tmp_path)
    assert Options.from_args(['-c', str(conf)]).htmloutput == 'out'

@pytest.mark.parametrize('option', [
    '--document-url-template={nope}',
    '--method-anchor-template={name',
    '--manpage-url-template={0}',
])
def test_invalid_template(option: str, tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit):
        Options.from_args([option])
