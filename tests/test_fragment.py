# Standard Library
import pytest

# Local modules
import erb_lint.analyzer
import erb_lint.fragment
import erb_lint.parser


#============================================


def test_normalize_without_block_suffix() -> None:
	fragment = erb_lint.fragment.normalize("if foo.present?", 0)
	assert fragment.prefix == ""
	assert fragment.suffix == ""
	assert fragment.body == "if foo.present?"
	assert fragment.text == "if foo.present?"


def test_normalize_block_suffix() -> None:
	fragment = erb_lint.fragment.normalize("items.each do |i|", 0)
	assert fragment.suffix == " do |i|"
	assert fragment.body == "items.each"


def test_normalize_pads_to_column() -> None:
	fragment = erb_lint.fragment.normalize(" items.map { |i| ", 4)
	assert fragment.prefix == " "
	assert fragment.suffix == " { |i| "
	assert fragment.body == "items.map"
	assert fragment.text == "    items.map"


@pytest.mark.parametrize(
	"raw_text",
	[
		" foo ",
		"  link_to(path) do ",
		"items.map { |i| ",
		"",
		"   ",
		"\tfoo.bar {",
		"  {",
		"x.each do\n",
		" render partial: 'row' ",
	],
)
def test_split_round_trip(raw_text: str) -> None:
	prefix, body, suffix = erb_lint.fragment.split_fragment(raw_text)
	assert prefix + body + suffix == raw_text
	fragment = erb_lint.fragment.normalize(raw_text, 3)
	assert fragment.prefix + fragment.text[fragment.column:] + fragment.suffix == raw_text


def test_translate_maps_to_document_offsets() -> None:
	text = "<p>\n  <%=  foo(  1) %>\n</p>"
	document = erb_lint.parser.parse_document(text)
	erb_node = document.erb_nodes()[0]
	assert document.code_source(erb_node) == "  foo(  1) "
	fragment = erb_lint.fragment.normalize_erb_node(document, erb_node)
	assert fragment.text == "  foo(  1) "

	diagnostic = erb_lint.analyzer.RawDiagnostic(
		begin=6,
		end=8,
		message=" Extra space inside parentheses. ",
		corrected_text="  foo(1) ",
	)
	offense = erb_lint.fragment.translate(fragment, diagnostic, erb_node, "Rubocop")
	assert text[offense["start"]:offense["end"]] == fragment.text[6:8]
	assert offense["message"] == "Extra space inside parentheses."
	assert offense["replacement"] == "  foo(1) "
	start = offense["replacement_start"]
	end = offense["replacement_end"]
	corrected = text[:start] + offense["replacement"] + text[end:]
	assert corrected == "<p>\n  <%=  foo(1) %>\n</p>"


def test_translate_keeps_block_suffix_on_correction() -> None:
	text = "<% items.each  do |i| %>"
	document = erb_lint.parser.parse_document(text)
	erb_node = document.erb_nodes()[0]
	fragment = erb_lint.fragment.normalize_erb_node(document, erb_node)
	assert fragment.text == "items.each"
	diagnostic = erb_lint.analyzer.RawDiagnostic(
		begin=0,
		end=5,
		message="Use map.",
		corrected_text="items.map",
	)
	offense = erb_lint.fragment.translate(fragment, diagnostic, erb_node, "Rubocop")
	assert text[offense["start"]:offense["end"]] == "items"
	assert offense["replacement"] == " items.map  do |i| "


def test_translate_without_correction_has_no_replacement() -> None:
	fragment = erb_lint.fragment.normalize("foo", 0, code_start=10)
	erb_node = erb_lint.parser.ErbNode(7, 15, "=", 10, 13, 0)
	diagnostic = erb_lint.analyzer.RawDiagnostic(begin=0, end=3, message="msg")
	offense = erb_lint.fragment.translate(fragment, diagnostic, erb_node, "Rubocop")
	assert (offense["start"], offense["end"]) == (10, 13)
	assert "replacement" not in offense
