"""Rewrite ERB delimiters into string interpolation and parse the result."""

# Standard Library
import dataclasses


# Applied in order; longer delimiters first so "<%=" is not read as "<%"
INTERPOLATION_TABLE = (
	("<%==", "#{ "),
	("<%=", "#{ "),
	("<%-", "#{"),
	("<%", "#{"),
	("-%>", " }"),
	("%>", " }"),
)
INTERPOLATION_OPEN = "#{"
INTERPOLATION_CLOSE = "}"
QUOTE = '"'


#============================================


@dataclasses.dataclass(frozen=True)
class StringPart:
	value: str


@dataclasses.dataclass(frozen=True)
class Interpolation:
	code: str


@dataclasses.dataclass(frozen=True)
class InterpolatedString:
	parts: tuple

	def literal_text(self) -> str:
		return "".join(part.value for part in self.parts if isinstance(part, StringPart))

	def interpolations(self) -> list[Interpolation]:
		return [part for part in self.parts if isinstance(part, Interpolation)]


#============================================


def replace_erb_symbols_for_interpolation(string: str) -> str:
	"""
	Turn template text into a double-quoted interpolated string literal.

	Args:
		string: Template text with ERB tags.

	Returns:
		str: Literal such as "Hello #{  name  }!".
	"""
	for delimiter, replacement in INTERPOLATION_TABLE:
		string = string.replace(delimiter, replacement)
	return f"{QUOTE}{string}{QUOTE}"


#============================================


def _find_interpolation_end(body: str, start: int) -> int:
	"""
	Return the index of the brace closing an interpolation, or -1.

	Args:
		body: Literal body without the outer quotes.
		start: Index just after "#{".

	Returns:
		int: Index of the closing brace.
	"""
	depth = 1
	quote: str | None = None
	i = start
	while i < len(body):
		ch = body[i]
		if quote is not None:
			if ch == "\\":
				i += 2
				continue
			if ch == quote:
				quote = None
		elif ch in ("'", '"'):
			quote = ch
		elif ch == "{":
			depth += 1
		elif ch == "}":
			depth -= 1
			if depth == 0:
				return i
		i += 1
	return -1


#============================================


def parse_interpolated_string(literal: str) -> InterpolatedString | None:
	"""
	Parse a double-quoted literal with #{...} interpolations.

	Args:
		literal: Literal produced by replace_erb_symbols_for_interpolation.

	Returns:
		InterpolatedString | None: Parsed node, or None if malformed.
	"""
	if len(literal) < 2 or not (literal.startswith(QUOTE) and literal.endswith(QUOTE)):
		return None
	body = literal[1:-1]

	parts: list[object] = []
	buffer: list[str] = []
	i = 0
	while i < len(body):
		if body.startswith(INTERPOLATION_OPEN, i):
			end = _find_interpolation_end(body, i + len(INTERPOLATION_OPEN))
			if end == -1:
				return None
			if buffer:
				parts.append(StringPart("".join(buffer)))
				buffer = []
			code = body[i + len(INTERPOLATION_OPEN):end].strip()
			parts.append(Interpolation(code))
			i = end + 1
			continue
		if body[i] == "\\" and i + 1 < len(body):
			buffer.append(body[i + 1])
			i += 2
			continue
		buffer.append(body[i])
		i += 1

	if buffer:
		parts.append(StringPart("".join(buffer)))
	return InterpolatedString(tuple(parts))
