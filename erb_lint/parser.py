# Standard Library
import bisect
import dataclasses
import re


ERB_OPEN = "<%"
ERB_ESCAPED_OPEN = "<%%"
ERB_CLOSE = "%>"
ERB_INDICATORS = ("==", "=", "#")
OUTPUT_INDICATORS = ("=", "==")

TAG_NAME_RX = re.compile(r"[A-Za-z][A-Za-z0-9:_.-]*")
MARKUP_START_RX = re.compile(r"<(?:[A-Za-z!]|/[A-Za-z])")

# Tags whose content is scanned as raw text up to the matching close tag
RAW_TEXT_TAGS = ("script", "style")


#============================================


@dataclasses.dataclass(frozen=True)
class Literal:
	start: int
	end: int


@dataclasses.dataclass(frozen=True)
class ErbNode:
	"""
	One <% ... %> region.

	start/end cover the whole tag, code_start/code_end the code between the
	indicator and the closing delimiter. column is the 0-based column of "<".
	"""

	start: int
	end: int
	indicator: str
	code_start: int
	code_end: int
	column: int
	ltrim: bool = False
	rtrim: bool = False

	@property
	def is_output(self) -> bool:
		return self.indicator in OUTPUT_INDICATORS

	@property
	def is_comment(self) -> bool:
		return self.indicator == "#"


@dataclasses.dataclass(frozen=True)
class Node:
	kind: str
	index: int
	start: int
	end: int
	children: tuple = ()
	name: str = ""
	closing: bool = False
	self_closing: bool = False


#============================================


class Document:
	"""Parsed template: raw text plus a flat arena of top-level nodes."""

	def __init__(self, text: str, nodes: list[Node], newlines: list[int]) -> None:
		self.text = text
		self.nodes = nodes
		self.newlines = newlines

	def source(self, start: int, end: int) -> str:
		return self.text[start:end]

	def node_source(self, node: object) -> str:
		return self.text[node.start:node.end]

	def code_source(self, erb_node: ErbNode) -> str:
		return self.text[erb_node.code_start:erb_node.code_end]

	def previous_sibling(self, node: Node) -> Node | None:
		if node.index <= 0:
			return None
		return self.nodes[node.index - 1]

	def nodes_of_kind(self, kind: str) -> list[Node]:
		return [node for node in self.nodes if node.kind == kind]

	def erb_children(self, node: Node) -> list[ErbNode]:
		return [child for child in node.children if isinstance(child, ErbNode)]

	def erb_nodes(self) -> list[ErbNode]:
		"""
		Return every ERB node in document order.

		Returns:
			list[ErbNode]: ERB nodes from text, tag and comment nodes.
		"""
		erb_nodes: list[ErbNode] = []
		for node in self.nodes:
			erb_nodes.extend(self.erb_children(node))
		return erb_nodes

	def line_and_column(self, pos: int) -> tuple[int, int]:
		"""
		Map an offset to a 1-based (line, column) pair.

		Args:
			pos: Character offset in the text.

		Returns:
			tuple[int, int]: Line and column, both 1-based.
		"""
		line = pos_to_line(self.newlines, pos)
		column = pos_to_column(self.newlines, pos) + 1
		return line, column


#============================================


def build_newline_index(text: str) -> list[int]:
	"""
	Return sorted positions of "\n" characters.

	Args:
		text: Input text.

	Returns:
		list[int]: Sorted newline positions.
	"""
	newlines: list[int] = []
	pos = text.find("\n")
	while pos != -1:
		newlines.append(pos)
		pos = text.find("\n", pos + 1)
	return newlines


#============================================


def pos_to_line(newlines: list[int], pos: int) -> int:
	"""
	Map a character offset to 1-based line number using a newline index.

	Args:
		newlines: Sorted newline positions.
		pos: Character position in text.

	Returns:
		int: 1-based line number.
	"""
	return bisect.bisect_left(newlines, pos) + 1


#============================================


def line_offset(newlines: list[int], line: int) -> int:
	"""
	Return the offset of the first character of a 1-based line.

	Args:
		newlines: Sorted newline positions.
		line: 1-based line number.

	Returns:
		int: Character offset of the line start.
	"""
	if line <= 1:
		return 0
	return newlines[line - 2] + 1


#============================================


def pos_to_column(newlines: list[int], pos: int) -> int:
	"""
	Map a character offset to its 0-based column.

	Args:
		newlines: Sorted newline positions.
		pos: Character position in text.

	Returns:
		int: 0-based column.
	"""
	line = pos_to_line(newlines, pos)
	return pos - line_offset(newlines, line)


#============================================


def _scan_erb(text: str, pos: int, newlines: list[int]) -> ErbNode | None:
	"""
	Scan one ERB tag starting at pos.

	Args:
		text: Full template text.
		pos: Offset of the opening "<%".
		newlines: Newline index.

	Returns:
		ErbNode | None: Node, or None when the tag is never closed.
	"""
	i = pos + len(ERB_OPEN)
	indicator = ""
	ltrim = False
	for candidate in ERB_INDICATORS:
		if text.startswith(candidate, i):
			indicator = candidate
			i += len(candidate)
			break
	else:
		if text.startswith("-", i):
			ltrim = True
			i += 1

	close = text.find(ERB_CLOSE, i)
	if close == -1:
		return None

	code_end = close
	rtrim = False
	if close > i and text[close - 1] == "-":
		rtrim = True
		code_end = close - 1

	erb_node = ErbNode(
		start=pos,
		end=close + len(ERB_CLOSE),
		indicator=indicator,
		code_start=i,
		code_end=code_end,
		column=pos_to_column(newlines, pos),
		ltrim=ltrim,
		rtrim=rtrim,
	)
	return erb_node


#============================================


def _starts_markup(text: str, pos: int) -> bool:
	return MARKUP_START_RX.match(text, pos) is not None


#============================================


def _scan_text(text: str, pos: int, newlines: list[int], stop) -> tuple[list[object], int]:
	"""
	Scan literal text and ERB tags until stop(text, i) is true.

	Args:
		text: Full template text.
		pos: Start offset.
		newlines: Newline index.
		stop: Predicate marking where the text node ends.

	Returns:
		tuple[list[object], int]: Children and end offset.
	"""
	children: list[object] = []
	literal_start = pos
	i = pos
	while i < len(text):
		if text.startswith(ERB_ESCAPED_OPEN, i):
			i += len(ERB_ESCAPED_OPEN)
			continue
		if text.startswith(ERB_OPEN, i):
			erb_node = _scan_erb(text, i, newlines)
			if erb_node is None:
				# unterminated tag, keep it as literal text
				i += len(ERB_OPEN)
				continue
			if i > literal_start:
				children.append(Literal(literal_start, i))
			children.append(erb_node)
			i = erb_node.end
			literal_start = i
			continue
		if stop(text, i):
			break
		i += 1

	if i > literal_start:
		children.append(Literal(literal_start, i))
	return children, i


#============================================


def _scan_tag(text: str, pos: int, newlines: list[int], index: int) -> Node:
	"""
	Scan a markup tag, collecting ERB tags found in its attributes.

	Args:
		text: Full template text.
		pos: Offset of "<".
		newlines: Newline index.
		index: Arena index for the node.

	Returns:
		Node: Tag node.
	"""
	i = pos + 1
	closing = False
	if text.startswith("/", i):
		closing = True
		i += 1
	if text.startswith("!", i):
		i += 1
	name = ""
	match = TAG_NAME_RX.match(text, i)
	if match:
		name = match.group(0).lower()
		i = match.end()

	children: list[object] = []
	quote: str | None = None
	while i < len(text):
		if text.startswith(ERB_OPEN, i) and not text.startswith(ERB_ESCAPED_OPEN, i):
			erb_node = _scan_erb(text, i, newlines)
			if erb_node is not None:
				children.append(erb_node)
				i = erb_node.end
				continue
		ch = text[i]
		i += 1
		if quote is not None:
			if ch == quote:
				quote = None
			continue
		if ch in ("'", '"'):
			quote = ch
			continue
		if ch == ">":
			break

	head = text[pos:i]
	self_closing = head.endswith(">") and head[:-1].rstrip().endswith("/")
	node = Node(
		kind="tag",
		index=index,
		start=pos,
		end=i,
		children=tuple(children),
		name=name,
		closing=closing,
		self_closing=self_closing,
	)
	return node


#============================================


def _scan_comment(text: str, pos: int, newlines: list[int], index: int) -> Node:
	close = text.find("-->", pos + 4)
	end = len(text) if close == -1 else close + 3
	children: list[object] = []
	i = pos
	while True:
		i = text.find(ERB_OPEN, i, end)
		if i == -1:
			break
		erb_node = _scan_erb(text, i, newlines)
		if erb_node is None or erb_node.end > end:
			break
		children.append(erb_node)
		i = erb_node.end
	node = Node(kind="comment", index=index, start=pos, end=end, children=tuple(children))
	return node


#============================================


def _raw_text_stop(tag_name: str):
	close_rx = re.compile(r"</" + re.escape(tag_name) + r"\b", re.IGNORECASE)

	def stop(text: str, pos: int) -> bool:
		return close_rx.match(text, pos) is not None

	return stop


#============================================


def parse_document(text: str) -> Document:
	"""
	Parse template text into a Document.

	Top-level nodes are text, tag and comment nodes in source order. The
	content of an open script or style tag becomes a single text node.

	Args:
		text: Template text.

	Returns:
		Document: Parsed document.
	"""
	newlines = build_newline_index(text)
	nodes: list[Node] = []
	raw_text_tag: str | None = None
	markup_stop = _starts_markup

	pos = 0
	while pos < len(text):
		if raw_text_tag is not None:
			children, end = _scan_text(text, pos, newlines, _raw_text_stop(raw_text_tag))
			raw_text_tag = None
			if end > pos:
				nodes.append(Node("text", len(nodes), pos, end, tuple(children)))
			pos = end
			continue

		if text.startswith("<!--", pos):
			node = _scan_comment(text, pos, newlines, len(nodes))
			nodes.append(node)
			pos = node.end
			continue

		if _starts_markup(text, pos):
			node = _scan_tag(text, pos, newlines, len(nodes))
			nodes.append(node)
			if node.name in RAW_TEXT_TAGS and not node.closing and not node.self_closing:
				raw_text_tag = node.name
			pos = node.end
			continue

		children, end = _scan_text(text, pos, newlines, markup_stop)
		nodes.append(Node("text", len(nodes), pos, end, tuple(children)))
		pos = end

	document = Document(text, nodes, newlines)
	return document
