# Standard Library

# Local modules
import erb_lint.parser


#============================================


def find_range(
	document: erb_lint.parser.Document,
	node: object,
	needle: str,
	search_from: int | None = None,
) -> tuple[int, int] | None:
	"""
	Locate a literal substring inside a node and return its absolute range.

	The first occurrence wins. When search_from is given the search starts at
	that absolute offset instead of the node start, so a repeated substring
	earlier in the node cannot shadow the one being looked up.

	Args:
		document: Parsed document.
		node: Node (or ERB node) owning the text.
		needle: Substring to find, already stripped.
		search_from: Optional absolute offset to search from.

	Returns:
		tuple[int, int] | None: Half-open absolute range, or None when absent.
	"""
	if not needle:
		return None
	node_text = document.node_source(node)
	local_from = 0
	if search_from is not None:
		local_from = max(0, search_from - node.start)
	index = node_text.find(needle, local_from)
	if index == -1:
		return None
	range_start = node.start + index
	range_end = range_start + len(needle)
	return range_start, range_end


#============================================


def to_document_offset(base: int, local_offset: int) -> int:
	"""
	Convert a fragment-relative offset to a document offset.

	Args:
		base: Document offset of local position zero.
		local_offset: Offset inside the fragment.

	Returns:
		int: Document offset.
	"""
	return base + local_offset


#============================================


def to_local_offset(base: int, document_offset: int) -> int:
	"""
	Convert a document offset to a fragment-relative offset.

	Args:
		base: Document offset of local position zero.
		document_offset: Offset in the document.

	Returns:
		int: Offset inside the fragment.
	"""
	return document_offset - base
