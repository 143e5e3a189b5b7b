# tests/core/test_attribute_rules.py
import pytest

from htmlint.model import Severity
from htmlint.rules import names


def by_rule(results, rule):
    return [r for r in results if r.rule == rule]


# --- valid-id ---

@pytest.mark.parametrize("html, severity", [
    ('<div id="">Content</div>', Severity.ERROR),
    ('<div id="foo bar">Content</div>', Severity.ERROR),
    ('<div id="123abc">Content</div>', Severity.WARNING),
    ('<div id="a.b">Content</div>', Severity.WARNING),
    ('<div id="my-id">Content</div>', None),
    ('<div id="my_id">Content</div>', None),
    ('<div id="_Private9">Content</div>', None),
    ('<div>Content</div>', None),
    ('<div id="row-{{ .ID }}">Content</div>', None),
])
def test_valid_id(lint, html, severity):
    results = by_rule(lint(html), names.RULE_VALID_ID)
    if severity is None:
        assert results == []
    else:
        assert [r.severity for r in results] == [severity]


# --- attribute-allowed-values ---

@pytest.mark.parametrize("html, flagged", [
    ('<input type="text">', False),
    ('<input type="TEXT">', False),
    ('<input type="foobar">', True),
    ('<button type="submit">Click</button>', False),
    ('<button type="invalid">Click</button>', True),
    ('<form method="post"></form>', False),
    ('<form method="put"></form>', True),
    ('<input type="{{ .Kind }}">', False),
    ('<link rel="stylesheet" href="a.css">', False),
    ('<link rel="bogus" href="a.css">', True),
    ('<a href="/" rel="noopener noreferrer">x</a>', False),
    ('<iframe src="/x" sandbox="allow-scripts allow-bogus"></iframe>', True),
    ('<td colspan="2">x</td>', False),
    ('<td colspan="0">x</td>', True),
    ('<div tabindex="-1">x</div>', False),
    ('<div tabindex="first">x</div>', True),
    ('<ol start="-3"><li>x</li></ol>', False),
    ('<textarea rows="-3"></textarea>', True),
])
def test_attribute_allowed_values(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_ATTRIBUTE_ALLOWED_VALUES)) is flagged


def test_allowed_values_message_names_the_options(lint):
    results = by_rule(lint('<form method="put"></form>'), names.RULE_ATTRIBUTE_ALLOWED_VALUES)
    assert results[0].message == (
        "invalid value 'put' for attribute 'method' on <form>; expected one of: dialog, get, post"
    )


@pytest.mark.parametrize("value, flagged", [
    ("_blank", False),
    ("_SELF", False),
    ("preview", False),
    ("_new", True),
])
def test_target_keywords(lint, value, flagged):
    results = by_rule(lint(f'<a href="/" target="{value}">x</a>'), names.RULE_ATTRIBUTE_ALLOWED_VALUES)
    assert bool(results) is flagged


@pytest.mark.parametrize("html, flagged", [
    ('<input autocomplete="off">', False),
    ('<input autocomplete="email">', False),
    ('<input autocomplete="shipping street-address">', False),
    ('<input autocomplete="section-checkout billing tel webauthn">', False),
    ('<input autocomplete="work email">', False),
    ('<input autocomplete="nonsense">', True),
    ('<input autocomplete="on email">', True),
    ('<input autocomplete="email name">', True),
    ('<form autocomplete="email"></form>', True),
    ('<form autocomplete="off"></form>', False),
])
def test_autocomplete_grammar(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_ATTRIBUTE_ALLOWED_VALUES)) is flagged


# --- attribute-misuse ---

def test_attribute_on_wrong_element(lint):
    results = by_rule(lint('<div href="/x">x</div>'), names.RULE_ATTRIBUTE_MISUSE)
    assert [r.message for r in results] == ["attribute 'href' is not valid on <div>"]
    assert results[0].severity == Severity.WARNING


def test_deprecated_presentational_attribute(lint):
    results = by_rule(lint('<table><tr><td align="left">x</td></tr></table>'), names.RULE_ATTRIBUTE_MISUSE)
    assert len(results) == 1
    assert results[0].message.startswith("attribute 'align' is deprecated")


def test_custom_elements_have_open_attribute_sets(lint):
    assert by_rule(lint('<my-link href="/x">x</my-link>'), names.RULE_ATTRIBUTE_MISUSE) == []


def test_htmx_attribute_without_htmx_enabled(lint):
    results = by_rule(lint('<input type="text" hx-get="/api">'), names.RULE_ATTRIBUTE_MISUSE)
    assert [r.message for r in results] == ["htmx attribute 'hx-get' used but htmx not enabled"]


def test_htmx_attribute_with_htmx_enabled(lint):
    assert by_rule(lint('<input type="text" hx-get="/api">', htmx=True), names.RULE_ATTRIBUTE_MISUSE) == []


# --- input-attributes ---

def test_input_attribute_unsupported_by_type(lint):
    results = by_rule(lint('<input type="checkbox" placeholder="x">'), names.RULE_INPUT_ATTRIBUTES)
    assert [r.message for r in results] == ['attribute \'placeholder\' is not supported on <input type="checkbox">']
    assert results[0].severity == Severity.WARNING


@pytest.mark.parametrize("html", [
    '<input placeholder="x" maxlength="10">',
    '<input type="number" min="0" max="9" step="1">',
    '<input type="file" accept="image/*" multiple>',
    '<input type="{{ .T }}" placeholder="x">',
])
def test_input_attributes_supported(lint, html):
    assert by_rule(lint(html), names.RULE_INPUT_ATTRIBUTES) == []


# --- no-dup-class / no-inline-style ---

@pytest.mark.parametrize("html, flagged", [
    ("<p>text</p>", False),
    ('<p class="foo bar">text</p>', False),
    ('<p attr="foo bar foo">text</p>', False),
    ('<p class="foo bar foo">text</p>', True),
])
def test_no_dup_class(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_NO_DUP_CLASS)) is flagged


def test_duplicated_class_reported_once(lint):
    results = by_rule(lint('<p class="a a a">x</p>'), names.RULE_NO_DUP_CLASS)
    assert [r.message for r in results] == ["class 'a' is duplicated"]


def test_no_inline_style(lint):
    results = by_rule(lint('<div style="color: red;">Red text</div>'), names.RULE_NO_INLINE_STYLE)
    assert len(results) == 1
    assert results[0].severity == Severity.WARNING
    assert by_rule(lint('<div class="red">Red text</div>'), names.RULE_NO_INLINE_STYLE) == []


# --- allowed-links ---

@pytest.mark.parametrize("html, flagged", [
    ('<a href="https://example.com">Link</a>', False),
    ('<a href="/page">Link</a>', False),
    ('<a href="#section">Link</a>', False),
    ('<a href="javascript:alert(1)">Link</a>', True),
    ('<a href="JavaScript:void(0)">Link</a>', True),
    ('<a href="java&#9;script:alert(1)">Link</a>', True),
    ('<a href="data:text/html,<h1>Hi</h1>">Link</a>', True),
    ('<form action="vbscript:x"></form>', True),
    ('<img src="data:image/png;base64,AAAA" alt="">', False),
    ('<a href="TMPL">Link</a>', False),
    ('<a href="{{ .URL }}">Link</a>', False),
])
def test_allowed_links(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_ALLOWED_LINKS)) is flagged


# --- form-dup-name / map-id-name ---

@pytest.mark.parametrize("html, flagged", [
    ('<form><input name="a"><input name="b"></form>', False),
    ('<form><input name="a"><input name="a"></form>', True),
    ('<form><input type="radio" name="choice"><input type="radio" name="choice"></form>', False),
    ('<form><input type="checkbox" name="opts"><input type="checkbox" name="opts">'
     '<input type="checkbox" name="opts"></form>', False),
    ('<form><input name="tags[]"><input name="tags[]"></form>', False),
    ('<form><input type="submit" name="go"><input type="submit" name="go"></form>', False),
    ('<form><input name="q"><div><select name="q"></select></div></form>', True),
    ('<input name="a"><input name="a">', False),
    ('<form><input name="{{ .N }}"><input name="{{ .N }}"></form>', False),
])
def test_form_dup_name(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_FORM_DUP_NAME)) is flagged


def test_form_dup_name_points_at_first_use(lint):
    results = by_rule(lint('<form>\n<input name="a">\n<input name="a">\n</form>'), names.RULE_FORM_DUP_NAME)
    assert len(results) == 1
    assert results[0].line == 3
    assert "first used on line 2" in results[0].message


@pytest.mark.parametrize("html, flagged", [
    ('<map id="nav" name="nav"></map>', False),
    ('<map id="nav1" name="nav2"></map>', True),
    ('<map name="nav"></map>', False),
    ('<map id="nav"></map>', True),
])
def test_map_id_name(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_MAP_ID_NAME)) is flagged


# --- no-missing-references / valid-for ---

@pytest.mark.parametrize("html, flagged", [
    ('<label for="name">Name</label><input id="name">', False),
    ('<label for="missing">Name</label><input id="name">', True),
    ('<span id="label">Label</span><input aria-labelledby="label">', False),
    ('<input aria-labelledby="missing">', True),
    ('<span id="a">A</span><input aria-describedby="a b">', True),
    ('<label for="TMPL">Name</label>', False),
    ('<input aria-labelledby="{{ .LabelID }} hint"><p id="hint">x</p>', False),
    ('{{define "field"}}<label for="elsewhere">Name</label>{{end}}', False),
])
def test_no_missing_references(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_NO_MISSING_REFERENCES)) is flagged


def test_missing_reference_names_the_id(lint):
    results = by_rule(lint('<input aria-labelledby="missing">'), names.RULE_NO_MISSING_REFERENCES)
    assert results[0].message == "<input> aria-labelledby references non-existent id 'missing'"


@pytest.mark.parametrize("html", [
    '<label for="name">Name</label><input id="name">',
    '<label for="bio">Bio</label><textarea id="bio"></textarea>',
    '<label for="color">Color</label><select id="color"><option>Red</option></select>',
    '<label for="btn">Action</label><button id="btn">Click</button>',
    '<label for="result">Result</label><output id="result">42</output>',
    '<label for="fuel">Fuel</label><meter id="fuel" value="0.5">50%</meter>',
    '<label for="prog">Progress</label><progress id="prog" value="50" max="100">50%</progress>',
    '<label for="missing">Name</label>',
    '<label>Name <input></label>',
    '<label for="TMPL">Name</label>',
])
def test_valid_for_passes(lint, html):
    assert by_rule(lint(html), names.RULE_VALID_FOR) == []


@pytest.mark.parametrize("html, message", [
    ('<label for="foo">Name</label><div id="foo">text</div>',
     "label for attribute references non-labelable element <div>"),
    ('<label for="foo">Name</label><p id="foo">text</p>',
     "label for attribute references non-labelable element <p>"),
    ('<label for="foo">Name</label><span id="foo">text</span>',
     "label for attribute references non-labelable element <span>"),
    ('<label for="tok">Token</label><input type="hidden" id="tok">',
     "label for attribute references hidden input"),
])
def test_valid_for_flags(lint, html, message):
    results = by_rule(lint(html), names.RULE_VALID_FOR)
    assert [r.message for r in results] == [message]
    assert results[0].severity == Severity.ERROR


# --- require-lang / long-title ---

@pytest.mark.parametrize("html, flagged", [
    ("<div>Content</div>", False),
    ("<main>Content</main>", False),
    ('<html lang="en"><body></body></html>', False),
    ("<html><body></body></html>", True),
    ('<html lang=""><body></body></html>', True),
    ('<html lang="{{ .Lang }}"><body></body></html>', False),
    ('{{define "layout"}}<html><body></body></html>{{end}}', False),
])
def test_require_lang(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_REQUIRE_LANG)) is flagged


def test_require_lang_for_full_document_without_html(make_controller):
    results = make_controller().lint_document("page.html", "<title>x</title><p>body</p>")
    assert len(by_rule(results, names.RULE_REQUIRE_LANG)) == 1


def test_long_title(lint):
    long_html = ("<html><head><title>This is a very long title that exceeds the recommended "
                 "seventy character limit for SEO</title></head></html>")
    results = by_rule(lint(long_html), names.RULE_LONG_TITLE)
    assert len(results) == 1
    assert results[0].severity == Severity.WARNING

    short_html = "<html><head><title>Short Title</title></head></html>"
    assert by_rule(lint(short_html), names.RULE_LONG_TITLE) == []


# --- unrecognized-char-ref ---

@pytest.mark.parametrize("html, flagged", [
    ("<p>Tom &amp; Jerry</p>", False),
    ("<p>1 &lt; 2</p>", False),
    ("<p>&copy; 2024</p>", False),
    ("<p>&aacute;</p>", False),
    ("<p>hello&nbsp;world</p>", False),
    ("<p>&foobar;</p>", True),
    ("<p>&bloop;</p>", True),
    ("<p>&#8212;</p>", False),
    ("<p>&#x2014;</p>", False),
    ('<p>{{ "&bogus;" }}</p>', False),
])
def test_unrecognized_char_ref(lint, html, flagged):
    results = by_rule(lint(html), names.RULE_UNRECOGNIZED_CHAR_REF)
    assert bool(results) is flagged
    assert all(r.severity == Severity.WARNING for r in results)


def test_unrecognized_char_ref_position(lint):
    results = by_rule(lint("<div>\n  <p>a &foobar; b</p>\n</div>"), names.RULE_UNRECOGNIZED_CHAR_REF)
    assert (results[0].line, results[0].col) == (2, 8)
    assert results[0].message == "unrecognized character reference &foobar;"


# --- ARIA ---

@pytest.mark.parametrize("html, flagged", [
    ('<div role="widget">x</div>', True),
    ('<div role="landmark">x</div>', True),
    ('<div role="button" tabindex="0">x</div>', False),
    ('<div role="{{ .Role }}">x</div>', False),
])
def test_no_abstract_role(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_NO_ABSTRACT_ROLE)) is flagged


@pytest.mark.parametrize("html, flagged", [
    ('<div aria-label="Box">x</div>', True),
    ('<span aria-labelledby="t">x</span><p id="t">t</p>', True),
    ('<span role="presentation" aria-label="x">x</span>', True),
    ('<button aria-label="Close">x</button>', False),
    ('<nav aria-label="Main">x</nav>', False),
    ('<div role="region" aria-label="Results">x</div>', False),
    ('<div tabindex="0" aria-label="Scrollable">x</div>', False),
    ('<a href="/" aria-label="Home">x</a>', False),
    ('<ul aria-label="Steps"><li>x</li></ul>', False),
    ('<my-widget aria-label="Widget"></my-widget>', False),
])
def test_aria_label_misuse(lint, html, flagged):
    results = by_rule(lint(html), names.RULE_ARIA_LABEL_MISUSE)
    assert bool(results) is flagged
    assert all(r.severity == Severity.WARNING for r in results)
