from typing import List, Optional

import pytest

from poddoctor.html import HTMLRenderer
from poddoctor.markup import CallbackLinker, DocumentLinker, ParseError
from poddoctor.markup.pod import parse_pod
from poddoctor.test import RecordingLinker


def pod2html(text: str, linker: Optional[DocumentLinker] = None) -> str:
    errors: List[ParseError] = []
    document = parse_pod(text, errors)
    assert not errors, [str(e) for e in errors]
    return document.to_html(linker or RecordingLinker())

def test_paragraph() -> None:
    assert pod2html('Hello I<world>\n') == '<p>Hello <em>world</em></p>\n'

def test_markup_codes() -> None:
    assert pod2html('B<b> C<c> F<f>') == (
        '<p><strong>b</strong> <code>c</code> <em class="filename">f</em></p>\n')

def test_text_is_escaped() -> None:
    assert pod2html('C<< $a->b && 1 >>') == '<p><code>$a-&gt;b &amp;&amp; 1</code></p>\n'

def test_heading() -> None:
    assert pod2html('=head1 Name Here\n') == '<h1 id="Name_Here">Name Here</h1>\n'
    assert pod2html('=head3 Deeper\n') == '<h3 id="Deeper">Deeper</h3>\n'

def test_unordered_list() -> None:
    assert pod2html('=over\n\n=item * a\n\n=back\n') == '<ul>\n<li><p>a</p>\n</li>\n</ul>\n'

def test_ordered_list() -> None:
    assert pod2html('=over\n\n=item 1. a\n\n=back\n') == '<ol>\n<li><p>a</p>\n</li>\n</ol>\n'

def test_description_list() -> None:
    html = pod2html('=over\n\n=item term\n\nDef.\n\n=back\n')
    assert html == '<dl>\n<dt>term</dt><dd><p>Def.</p>\n</dd>\n</dl>\n'

def test_description_label_is_escaped() -> None:
    html = pod2html('=over\n\n=item [a<b]\n\n=back\n')
    assert '<dt>a&lt;b</dt>' in html

def test_verbatim() -> None:
    assert pod2html('  if (a < b) {\n      return;\n  }\n') == (
        '<pre>if (a &lt; b) {\n    return;\n}\n</pre>\n')

def test_data() -> None:
    assert pod2html('=for html <b>x</b>\n') == '<b>x</b>'
    assert pod2html('=for HTML <b>x</b>\n') == '<b>x</b>'
    assert pod2html('=for text plain\n') == ''
    assert pod2html('=begin html\n\n<hr/>\n\n=end html\n') == '<hr/>\n\n'

def test_escape() -> None:
    assert pod2html('E<lt>E<0x41>E<gt>\n') == '<p>&#60;&#65;&#62;</p>\n'

def test_unknown_escape_renders_nothing() -> None:
    errors: List[ParseError] = []
    assert parse_pod('aE<bogus>b', errors).to_html(RecordingLinker()) == '<p>ab</p>\n'
    assert len(errors) == 1

def test_index_anchor() -> None:
    assert pod2html('X<key word>Text\n') == '<p><a id="key_word"></a>Text</p>\n'

def test_non_breaking_space() -> None:
    assert pod2html('S<a b c>\n') == '<p>a&nbsp;b&nbsp;c</p>\n'

def test_zap() -> None:
    assert pod2html('a Z<b> c\n') == '<p>a  c</p>\n'

def test_unknown_code_keeps_content() -> None:
    errors: List[ParseError] = []
    assert parse_pod('Q<x>\n', errors).to_html(RecordingLinker()) == '<p>x</p>\n'
    assert len(errors) == 1

def test_url_link() -> None:
    html = pod2html('L<http://example.com>\n')
    assert 'href="http://example.com"' in html
    assert 'class="external-link"' in html
    assert '>http://example.com</a></p>' in html

def test_manpage_link() -> None:
    html = pod2html('L<printf(3)>\n')
    assert 'href="https://man7.org/linux/man-pages/man3/printf.3.html"' in html
    assert 'class="external-link"' in html

def test_method_link() -> None:
    linker = RecordingLinker()
    html = pod2html('L<Foo::bar>\n', linker)
    assert 'href="Foo.html#c-bar"' in html
    assert 'class="internal-link"' in html
    assert '>Foo::bar</a>' in html
    assert linker.calls == [('document', 'Foo'), ('method', True, 'bar')]

def test_link_text() -> None:
    html = pod2html('L<the B<docs>|Foo/Usage>\n')
    assert 'href="Foo.html#Usage"' in html
    assert '>the <strong>docs</strong></a>' in html
    assert 'Foo/Usage<' not in html

def test_callback_linker() -> None:
    linker = CallbackLinker(
        lambda name: f'/api/{name.lower()}',
        lambda is_cmethod, name: ('cls-' if is_cmethod else 'obj-') + name)
    html = pod2html('L<Foo#run> L<Foo/Usage>\n', linker)
    assert 'href="/api/foo#obj-run"' in html
    assert 'href="/api/foo#Usage"' in html

def test_rendering_is_idempotent() -> None:
    document = parse_pod('=head1 A\n\nL<Foo/A> X<a> E<eacute>\n\n=over\n\n=item *\n\nx\n\n=back\n')
    renderer = HTMLRenderer(RecordingLinker())
    assert renderer.render(document.nodes) == renderer.render(document.nodes)
    assert document.to_html(RecordingLinker()) == renderer.render(document.nodes)

def test_unknown_node() -> None:
    with pytest.raises(AssertionError):
        HTMLRenderer(RecordingLinker()).visit(object())  # type:ignore[arg-type]

def test_heading_anchor_matches_section_link() -> None:
    html = pod2html('=head1 Some B<Title>\n\nSee L</Some Title>.\n')
    assert html.startswith('<h1 id="Some_Title">Some <strong>Title</strong></h1>\n')
    assert 'href="#Some_Title"' in html

def test_bare_link_is_a_local_section() -> None:
    linker = RecordingLinker()
    html = pod2html('L<Usage>\n', linker)
    assert 'href="#Usage"' in html
    assert 'class="internal-link"' in html
    assert linker.calls == []

def test_unterminated_zap_keeps_markup_balanced() -> None:
    errors: List[ParseError] = []
    html = parse_pod('a B<b Z<secret\n', errors).to_html(RecordingLinker())
    assert html == '<p>a <strong>b </strong></p>\n'
