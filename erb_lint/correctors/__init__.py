"""Allow-listed correctors for hard-coded strings."""

# Standard Library
import importlib
import importlib.util
import logging
import os

# Local modules
import erb_lint.errors
import erb_lint.interpolation


logger = logging.getLogger(__name__)

ALLOWED_CORRECTORS = frozenset(
	[
		"I18nCorrector",
		"RuboCop::I18nCorrector",
	]
)
TAG_START = "<%= "
TAG_END = " %>"


#============================================


def validate_corrector_config(corrector_config: dict[str, object]) -> None:
	"""
	Reject corrector names that are not allow-listed.

	Args:
		corrector_config: Mapping with optional "name" and "path".
	"""
	if not isinstance(corrector_config, dict):
		raise erb_lint.errors.ConfigError("corrector must be a mapping with name and path")
	name = corrector_config.get("name")
	if name is None:
		return
	if name not in ALLOWED_CORRECTORS:
		raise erb_lint.errors.ForbiddenCorrector(f"Corrector is not allowed: {name}")


#============================================


def _import_path(path: str) -> object:
	"""
	Import a corrector module from a dotted module path or a .py file.

	Args:
		path: Module path.

	Returns:
		object: Module object.
	"""
	if path.endswith(".py"):
		abs_path = os.path.abspath(path)
		spec = importlib.util.spec_from_file_location("erb_lint_corrector", abs_path)
		if spec is None or spec.loader is None:
			raise erb_lint.errors.MissingCorrector(f"Unable to load corrector module: {path}")
		module = importlib.util.module_from_spec(spec)
		try:
			spec.loader.exec_module(module)
		except FileNotFoundError as err:
			raise erb_lint.errors.MissingCorrector(f"Corrector module not found: {path}") from err
		return module
	try:
		module = importlib.import_module(path)
	except ImportError as err:
		raise erb_lint.errors.MissingCorrector(f"Unable to import corrector module: {path}") from err
	return module


#============================================


def load_corrector(corrector_config: dict[str, object]) -> type:
	"""
	Resolve the configured corrector class.

	Args:
		corrector_config: Mapping with "name" and "path".

	Returns:
		type: Corrector class.
	"""
	name = corrector_config.get("name")
	if not name:
		raise erb_lint.errors.MissingCorrector("No corrector name configured")
	if name not in ALLOWED_CORRECTORS:
		raise erb_lint.errors.ForbiddenCorrector(f"Corrector is not allowed: {name}")
	path = corrector_config.get("path")
	if not path:
		raise erb_lint.errors.MissingCorrector(f"No path configured for corrector {name}")

	module = _import_path(str(path))
	class_name = str(name).split("::")[-1]
	corrector_class = getattr(module, class_name, None)
	if corrector_class is None:
		raise erb_lint.errors.MissingCorrector(f"{path} does not define {class_name}")
	return corrector_class


#============================================


def correct(
	string: str,
	file_path: str | None,
	start: int,
	end: int,
	corrector_config: dict[str, object],
):
	"""
	Build a patch that rewrites a hard-coded string with the corrector.

	Args:
		string: Offending source text.
		file_path: Template path, passed to the corrector.
		start: Offense start offset.
		end: Offense end offset.
		corrector_config: Mapping with "name" and "path".

	Returns:
		Patch callable taking a Corrector, or None when nothing is corrected.
	"""
	try:
		corrector_class = load_corrector(corrector_config)
	except erb_lint.errors.MissingCorrector as err:
		logger.debug("No corrector available: %s", err)
		return None
	if len(string.strip()) <= 1:
		return None

	literal = erb_lint.interpolation.replace_erb_symbols_for_interpolation(string)
	node = erb_lint.interpolation.parse_interpolated_string(literal)
	if node is None:
		logger.debug("Unable to parse %r for correction", literal)
		return None

	corrector = corrector_class(file_path, start, end)
	return corrector.autocorrect(node, tag_start=TAG_START, tag_end=TAG_END)
