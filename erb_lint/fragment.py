"""Embedded code fragments: normalization for analysis and offset translation."""

# Standard Library
import dataclasses
import re

# Local modules
import erb_lint.core
import erb_lint.parser
import erb_lint.positions


PREFIX_RX = re.compile(r"\A[ \t]*")
# Rails erubi block expression: trailing "do", "{" and an optional |params| list
BLOCK_RX = re.compile(r"\s*((\s+|\))do|\{)(\s*\|[^|]*\|)?\s*\Z")


#============================================


@dataclasses.dataclass(frozen=True)
class Fragment:
	text: str
	prefix: str
	body: str
	suffix: str
	column: int
	code_start: int = 0

	@property
	def offset(self) -> int:
		"""Document offset of local position zero in text."""
		return self.code_start - self.column + len(self.prefix)


#============================================


def split_fragment(raw_text: str) -> tuple[str, str, str]:
	"""
	Split raw code into leading blanks, body and block-opening suffix.

	Args:
		raw_text: Code between the ERB delimiters.

	Returns:
		tuple[str, str, str]: (prefix, body, suffix); joined they equal raw_text.
	"""
	prefix = PREFIX_RX.match(raw_text).group(0)
	rest = raw_text[len(prefix):]
	suffix = ""
	match = BLOCK_RX.search(rest)
	if match:
		suffix = match.group(0)
	body = rest[:len(rest) - len(suffix)]
	return prefix, body, suffix


#============================================


def normalize(raw_text: str, column: int, code_start: int = 0) -> Fragment:
	"""
	Build an analyzer-ready fragment from one ERB code region.

	The body is padded with column spaces so column-sensitive rules see the
	code where it sits in the template.

	Args:
		raw_text: Code between the ERB delimiters.
		column: 0-based column of the ERB tag.
		code_start: Document offset of raw_text.

	Returns:
		Fragment: Normalized fragment.
	"""
	prefix, body, suffix = split_fragment(raw_text)
	fragment = Fragment(
		text=" " * column + body,
		prefix=prefix,
		body=body,
		suffix=suffix,
		column=column,
		code_start=code_start,
	)
	return fragment


#============================================


def normalize_erb_node(
	document: erb_lint.parser.Document,
	erb_node: erb_lint.parser.ErbNode,
) -> Fragment:
	raw_text = document.code_source(erb_node)
	return normalize(raw_text, erb_node.column, erb_node.code_start)


#============================================


def reconstruct(fragment: Fragment, corrected_text: str) -> str:
	"""
	Rebuild full ERB code from an analyzer's corrected fragment text.

	Args:
		fragment: Fragment that was analyzed.
		corrected_text: Corrected version of fragment.text.

	Returns:
		str: prefix + corrected body + suffix.
	"""
	return f"{fragment.prefix}{corrected_text[fragment.column:]}{fragment.suffix}"


#============================================


def translate(
	fragment: Fragment,
	diagnostic: object,
	erb_node: erb_lint.parser.ErbNode,
	linter: str,
) -> dict[str, object]:
	"""
	Map a fragment-local diagnostic to a document offense.

	Autocorrections always replace the whole code body of the ERB tag.

	Args:
		fragment: Fragment the diagnostic belongs to.
		diagnostic: RawDiagnostic with local begin/end offsets.
		erb_node: ERB node the fragment was built from.
		linter: Linter id.

	Returns:
		dict[str, object]: Offense dict.
	"""
	start = erb_lint.positions.to_document_offset(fragment.offset, diagnostic.begin)
	end = erb_lint.positions.to_document_offset(fragment.offset, diagnostic.end)
	offense = erb_lint.core.make_offense(
		linter,
		start,
		end,
		diagnostic.message.strip(),
		diagnostic.severity,
	)
	if diagnostic.corrected_text is not None:
		offense["replacement_start"] = erb_node.code_start
		offense["replacement_end"] = erb_node.code_end
		offense["replacement"] = reconstruct(fragment, diagnostic.corrected_text)
	return offense
