# Standard Library
import re

# Local modules
import erb_lint.core
import erb_lint.parser
import erb_lint.positions


WHITESPACE_RX = re.compile(r"\s+")
IGNORED_STRINGS = frozenset(["&nbsp;"])
SCRIPT_TAG = "script"
MESSAGE_PREFIX = "String not translated: "


#============================================


def check_string(string: str) -> bool:
	"""
	Decide whether a string is worth checking for translation.

	Args:
		string: Candidate text.

	Returns:
		bool: False for one-character strings and ignored tokens.
	"""
	compact = WHITESPACE_RX.sub("", string)
	return len(compact) > 1 and compact not in IGNORED_STRINGS


#============================================


def inside_script(document: erb_lint.parser.Document, node: erb_lint.parser.Node) -> bool:
	"""
	Check whether a text node directly follows an opening script tag.

	Args:
		document: Parsed document.
		node: Text node.

	Returns:
		bool: True for script content.
	"""
	previous = document.previous_sibling(node)
	if previous is None or previous.kind != "tag":
		return False
	return previous.name == SCRIPT_TAG and not previous.closing and not previous.self_closing


#============================================


def _literal_pieces(document: erb_lint.parser.Document, literal: erb_lint.parser.Literal) -> list[tuple[int, int]]:
	"""
	Split a literal child into per-line spans, dropping blank lines.
	"""
	pieces: list[tuple[int, int]] = []
	start = literal.start
	for line in document.source(literal.start, literal.end).split("\n"):
		end = start + len(line)
		if line.strip():
			pieces.append((start, end))
		start = end + 1
	return pieces


#============================================


def candidate_pieces(
	document: erb_lint.parser.Document,
	node: erb_lint.parser.Node,
) -> list[tuple[int, int, bool]]:
	"""
	List the spans of a text node that can contribute to runs.

	Args:
		document: Parsed document.
		node: Text node.

	Returns:
		list[tuple[int, int, bool]]: (start, end, is_literal) in document order.
	"""
	pieces: list[tuple[int, int, bool]] = []
	for child in node.children:
		if isinstance(child, erb_lint.parser.Literal):
			for start, end in _literal_pieces(document, child):
				pieces.append((start, end, True))
		elif child.is_output:
			pieces.append((child.start, child.end, False))
	return pieces


#============================================


def _node_runs(document: erb_lint.parser.Document, node: erb_lint.parser.Node) -> list[dict[str, object]]:
	runs: list[dict[str, object]] = []
	for start, end, is_literal in candidate_pieces(document, node):
		string = document.source(start, end)
		accepted = check_string(string)
		touches = bool(runs) and runs[-1]["end"] == start
		# short pieces only join a run that already carries visible text
		if touches and (accepted or runs[-1]["has_text"]):
			run = runs[-1]
			run["text"] = str(run["text"]) + string
			run["end"] = end
			run["has_text"] = bool(run["has_text"]) or (is_literal and accepted)
			continue
		if not accepted:
			continue
		runs.append({
			"node": node,
			"start": start,
			"end": end,
			"text": string,
			"has_text": is_literal,
		})

	erb_sources = {document.node_source(erb_node) for erb_node in document.erb_children(node)}
	kept = [
		run for run in runs
		if run["text"] not in erb_sources and check_string(str(run["text"]))
	]
	return kept


#============================================


def collect_runs(document: erb_lint.parser.Document) -> list[dict[str, object]]:
	"""
	Collect runs of visible text from every text node.

	A run grows while the next piece starts exactly where it ends, so literal
	text and output tags that touch merge into one run. Short pieces such as
	punctuation or &nbsp; join a run only once it holds literal text, so an
	output tag followed by "." stays a bare tag. Runs that are only the
	source of an ERB tag in the same node are dropped.

	Args:
		document: Parsed document.

	Returns:
		list[dict[str, object]]: Run dicts with node, start, end and text.
	"""
	runs: list[dict[str, object]] = []
	for node in document.nodes_of_kind("text"):
		if inside_script(document, node):
			continue
		runs.extend(_node_runs(document, node))
	return runs


#============================================


def message(string: str) -> str:
	return f"{MESSAGE_PREFIX}{string.strip()}"


#============================================


def emit_offense(
	document: erb_lint.parser.Document,
	run: dict[str, object],
	linter: str,
) -> dict[str, object] | None:
	"""
	Build an offense for a run.

	Args:
		document: Parsed document.
		run: Run dict.
		linter: Linter id.

	Returns:
		dict[str, object] | None: Offense, or None when the text is not found.
	"""
	trimmed = str(run["text"]).strip()
	found = erb_lint.positions.find_range(document, run["node"], trimmed, int(run["start"]))
	if found is None:
		return None
	start, end = found
	offense = erb_lint.core.make_offense(linter, start, end, message(document.source(start, end)))
	return offense
