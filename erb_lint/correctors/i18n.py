# Standard Library
import re

# Local modules
import erb_lint.interpolation


NON_WORD_RX = re.compile(r"[^a-z0-9]+")
MAX_KEY_WORDS = 6
FALLBACK_KEY = "text"


#============================================


def _slug(text: str) -> str:
	return NON_WORD_RX.sub("_", text.lower()).strip("_")


#============================================


class I18nCorrector:
	"""
	Replace hard-coded text with a lazy t() lookup.

	"Hello <%= name %>!" becomes "<%= t('.hello', name: name) %>" and the
	matching translation "Hello %{name}!" is kept on the instance.
	"""

	def __init__(self, file_path: str | None, start: int, end: int) -> None:
		self.file_path = file_path
		self.start = start
		self.end = end
		self.key: str | None = None
		self.translation: str | None = None

	def translation_key(self, node: erb_lint.interpolation.InterpolatedString) -> str:
		words = _slug(node.literal_text()).split("_")
		key = "_".join(word for word in words[:MAX_KEY_WORDS] if word)
		return f".{key or FALLBACK_KEY}"

	def arguments(self, node: erb_lint.interpolation.InterpolatedString) -> list[tuple[str, str]]:
		"""
		Name each interpolation for use as a translation argument.

		Args:
			node: Parsed string.

		Returns:
			list[tuple[str, str]]: (argument name, code) pairs.
		"""
		arguments: list[tuple[str, str]] = []
		used: set[str] = set()
		for index, interpolation in enumerate(node.interpolations(), start=1):
			name = _slug(interpolation.code) or f"value{index}"
			if name[0].isdigit() or name in used:
				name = f"value{index}"
			used.add(name)
			arguments.append((name, interpolation.code))
		return arguments

	def build_translation(self, node: erb_lint.interpolation.InterpolatedString, arguments: list[tuple[str, str]]) -> str:
		names = iter(name for name, _ in arguments)
		pieces: list[str] = []
		for part in node.parts:
			if isinstance(part, erb_lint.interpolation.Interpolation):
				pieces.append(f"%{{{next(names)}}}")
			else:
				pieces.append(part.value)
		return "".join(pieces).strip()

	def autocorrect(self, node: erb_lint.interpolation.InterpolatedString, tag_start: str, tag_end: str):
		"""
		Return a patch replacing the offense range with a t() call.

		Args:
			node: Parsed string.
			tag_start: ERB open delimiter for the replacement.
			tag_end: ERB close delimiter for the replacement.

		Returns:
			Callable taking a Corrector.
		"""
		arguments = self.arguments(node)
		self.key = self.translation_key(node)
		self.translation = self.build_translation(node, arguments)

		call_args = [f"'{self.key}'"]
		for name, code in arguments:
			call_args.append(f"{name}: {code}")
		replacement = f"{tag_start}t({', '.join(call_args)}){tag_end}"

		def patch(corrector) -> None:
			corrector.replace(self.start, self.end, replacement)

		return patch
