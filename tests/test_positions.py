# Local modules
import erb_lint.parser
import erb_lint.positions


#============================================


def _text_node(text: str) -> tuple[erb_lint.parser.Document, erb_lint.parser.Node]:
	document = erb_lint.parser.parse_document(text)
	node = document.nodes_of_kind("text")[0]
	return document, node


def test_find_range_returns_absolute_range() -> None:
	document, node = _text_node("<p>  Hello world  </p>")
	found = erb_lint.positions.find_range(document, node, "Hello world")
	assert found == (5, 16)
	assert document.source(*found) == "Hello world"


def test_find_range_missing_substring() -> None:
	document, node = _text_node("<p>Hello</p>")
	assert erb_lint.positions.find_range(document, node, "Goodbye") is None
	assert erb_lint.positions.find_range(document, node, "") is None


def test_find_range_is_literal_not_pattern() -> None:
	document, node = _text_node("<p>Price (USD) $5.00</p>")
	found = erb_lint.positions.find_range(document, node, "(USD) $5.00")
	assert document.source(*found) == "(USD) $5.00"


def test_find_range_first_occurrence_and_search_from() -> None:
	document, node = _text_node("<p>ab ab</p>")
	assert erb_lint.positions.find_range(document, node, "ab") == (3, 5)
	assert erb_lint.positions.find_range(document, node, "ab", search_from=4) == (6, 8)


def test_offset_conversion() -> None:
	assert erb_lint.positions.to_document_offset(10, 3) == 13
	assert erb_lint.positions.to_local_offset(10, 13) == 3
