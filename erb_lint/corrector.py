# Standard Library
import logging


logger = logging.getLogger(__name__)


#============================================


class Corrector:
	"""Collect replacements for a text buffer and apply them."""

	def __init__(self, text: str) -> None:
		self.text = text
		self._patches: list[tuple[int, int, str]] = []
		self.skipped: set[int] = set()

	@property
	def patch_count(self) -> int:
		return len(self._patches)

	def replace(self, start: int, end: int, replacement: str) -> int:
		"""
		Queue a replacement of text[start:end].

		Args:
			start: Start offset.
			end: End offset (exclusive).
			replacement: New text.

		Returns:
			int: Index of the queued replacement.
		"""
		if start < 0 or end > len(self.text) or start > end:
			raise ValueError(f"Replacement range out of bounds: {start}..{end}")
		self._patches.append((start, end, replacement))
		return len(self._patches) - 1

	def apply(self) -> str:
		"""
		Apply queued replacements, skipping ones that overlap an earlier patch.

		Indexes of skipped replacements are left in self.skipped.

		Returns:
			str: Corrected text.
		"""
		accepted: list[tuple[int, int, str]] = []
		self.skipped = set()
		for index, patch in enumerate(self._patches):
			start, end, _ = patch
			if any(start < other_end and other_start < end for other_start, other_end, _ in accepted):
				logger.debug("Skipping overlapping replacement %d..%d", start, end)
				self.skipped.add(index)
				continue
			accepted.append(patch)

		text = self.text
		for start, end, replacement in sorted(accepted, key=lambda item: item[0], reverse=True):
			text = text[:start] + replacement + text[end:]
		return text
