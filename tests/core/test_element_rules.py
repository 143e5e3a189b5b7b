# tests/core/test_element_rules.py
import pytest

from htmlint.model import Severity
from htmlint.rules import names


def by_rule(results, rule):
    return [r for r in results if r.rule == rule]


@pytest.mark.parametrize("html, flagged", [
    ("<div>content</div>", False),
    ("<my-component>content</my-component>", False),
    ("<foobar>content</foobar>", True),
    ("<center>old</center>", False),
])
def test_element_name(lint, html, flagged):
    assert bool(by_rule(lint(html), names.RULE_ELEMENT_NAME)) is flagged


def test_misplaced_cell_reports_every_violation(lint):
    results = lint("<div><td>x</td></div>")
    parent = by_rule(results, names.RULE_ELEMENT_PERMITTED_PARENT)
    ancestor = by_rule(results, names.RULE_ELEMENT_REQUIRED_ANCESTOR)
    assert len(parent) == 1
    assert "<td> is not permitted as a child of <div>" in parent[0].message
    assert len(ancestor) == 1
    assert "<table>" in ancestor[0].message


def test_required_ancestor_uses_the_whole_chain(lint):
    results = lint("<table><tbody><tr><td><div><span>x</span></div></td></tr></tbody></table>")
    assert by_rule(results, names.RULE_ELEMENT_REQUIRED_ANCESTOR) == []
    assert by_rule(results, names.RULE_ELEMENT_PERMITTED_PARENT) == []


def test_list_item_outside_list(lint):
    results = by_rule(lint("<li>orphan</li>"), names.RULE_ELEMENT_REQUIRED_ANCESTOR)
    assert len(results) == 1
    assert results[0].severity == Severity.ERROR


def test_partial_top_level_gets_context_from_includer(lint):
    html = '{{define "items"}}<li>a</li><li>b</li>{{end}}'
    assert by_rule(lint(html), names.RULE_ELEMENT_REQUIRED_ANCESTOR) == []


def test_partial_rows_get_table_from_includer(lint):
    html = ('{{define "rows"}}\n{{range .Items}}\n<tr>\n  <td>{{ .Name }}</td>\n  <td>b</td>\n</tr>\n'
            '{{end}}\n{{end}}')
    results = lint(html)
    assert by_rule(results, names.RULE_ELEMENT_REQUIRED_ANCESTOR) == []
    assert by_rule(results, names.RULE_ELEMENT_PERMITTED_PARENT) == []


def test_rows_outside_a_partial_still_need_a_table(lint):
    results = by_rule(lint("<tr><td>a</td></tr>"), names.RULE_ELEMENT_REQUIRED_ANCESTOR)
    assert sorted(r.message.split(">")[0] for r in results) == ["<td", "<tr"]


def test_template_element_content_is_inert(lint):
    assert by_rule(lint("<template><li>x</li><td>y</td></template>"), names.RULE_ELEMENT_REQUIRED_ANCESTOR) == []


def test_permitted_content(lint):
    results = by_rule(lint("<ul><li>a</li><div>b</div><script></script></ul>"), names.RULE_ELEMENT_PERMITTED_CONTENT)
    assert len(results) == 1
    assert results[0].message == "<div> is not permitted content of <ul>"


def test_whitespace_between_list_items_is_fine(lint):
    assert by_rule(lint("<ul>\n  <li>a</li>\n  <li>b</li>\n</ul>"), names.RULE_ELEMENT_PERMITTED_CONTENT) == []


@pytest.mark.parametrize("html, ancestor", [
    ('<a href="/"><span><a href="/x">x</a></span></a>', "a"),
    ('<button><a href="/">x</a></button>', "button"),
    ("<form><div><form></form></div></form>", "form"),
    ("<label>outer<label>inner</label></label>", "label"),
])
def test_forbidden_descendants_at_any_depth(lint, html, ancestor):
    results = by_rule(lint(html), names.RULE_ELEMENT_PERMITTED_CONTENT)
    assert len(results) == 1
    assert results[0].message.endswith(f"must not be a descendant of <{ancestor}>")


def test_hidden_input_inside_button_is_allowed(lint):
    html = '<button type="button"><input type="hidden" name="x">go</button>'
    assert by_rule(lint(html), names.RULE_ELEMENT_PERMITTED_CONTENT) == []

    visible = by_rule(lint('<button type="button"><input type="text" name="x"></button>'),
                      names.RULE_ELEMENT_PERMITTED_CONTENT)
    assert [r.message for r in visible] == ["<input> must not be a descendant of <button>"]


@pytest.mark.parametrize("html", ["<br></br>", '<input type="text"></input>', "<p>a<BR>b</br></p>"])
def test_void_end_tag(lint, html):
    results = by_rule(lint(html), names.RULE_VOID_CONTENT)
    assert len(results) == 1
    assert "must not have an end tag" in results[0].message


def test_void_end_tag_position(lint):
    results = by_rule(lint("<p>\n  x</br></p>"), names.RULE_VOID_CONTENT)
    assert (results[0].line, results[0].col) == (2, 4)


def test_void_end_tag_inside_directive_is_ignored(lint):
    assert by_rule(lint('<p>{{ "</br>" }}</p><br>'), names.RULE_VOID_CONTENT) == []


def test_required_content(lint):
    results = by_rule(lint('<html lang="en"><head></head><body></body></html>'), names.RULE_ELEMENT_REQUIRED_CONTENT)
    assert len(results) == 1
    assert results[0].message == "<head> is missing required child <title>"


def test_required_content_skipped_for_partials(lint):
    html = '{{define "head"}}<head><meta charset="utf-8"></head>{{end}}'
    assert by_rule(lint(html), names.RULE_ELEMENT_REQUIRED_CONTENT) == []


def test_required_attributes_name_the_missing_item(lint):
    results = by_rule(lint('<img src="a.png">'), names.RULE_ELEMENT_REQUIRED_ATTRIBUTES)
    assert [r.message for r in results] == ["<img> is missing required attribute 'alt'"]
    assert by_rule(lint('<img src="a.png" alt="">'), names.RULE_ELEMENT_REQUIRED_ATTRIBUTES) == []


def test_obsolete_element_is_deprecated(lint):
    results = by_rule(lint("<center>x</center>"), names.RULE_DEPRECATED)
    assert len(results) == 1
    assert results[0].message.startswith("<center> is deprecated: ")


def test_spec_deprecated_element(lint):
    results = by_rule(lint('<object><param name="a" value="b"></object>'), names.RULE_DEPRECATED)
    assert [r.message for r in results] == ["<param> is deprecated: use object data attribute"]


def test_svg_children_are_not_html(lint):
    html = '<svg viewBox="0 0 10 10"><path d="M0 0"></path><lineargradient></lineargradient></svg>'
    assert by_rule(lint(html), names.RULE_ELEMENT_NAME) == []
