# Standard Library
import importlib
import importlib.util
import os

# Local modules
import erb_lint.config
import erb_lint.errors
import erb_lint.linters


REQUIRED_ATTRIBUTES = ("LINTER_ID", "LINTER_NAME", "run")


#============================================


def linter_from_module(module: object) -> dict[str, object]:
	"""
	Describe a linter module as a metadata dict.

	A linter module exposes LINTER_ID, LINTER_NAME and run(context), and may
	add prepare(linter_config, config) and autocorrect(context, offense).

	Args:
		module: Imported linter module.

	Returns:
		dict[str, object]: Linter metadata.
	"""
	missing = [name for name in REQUIRED_ATTRIBUTES if not hasattr(module, name)]
	if missing:
		module_name = getattr(module, "__name__", "?")
		raise erb_lint.errors.ConfigError(
			f"Linter module {module_name} is missing: {', '.join(missing)}"
		)
	linter = {
		"id": str(module.LINTER_ID),
		"name": str(module.LINTER_NAME),
		"run": module.run,
		"prepare": getattr(module, "prepare", None),
		"autocorrect": getattr(module, "autocorrect", None),
	}
	return linter


#============================================


class Registry:
	"""Known linters, keyed by the id used under "linters:" in the config."""

	def __init__(self) -> None:
		self._linters: dict[str, dict[str, object]] = {}

	def add(self, linter: dict[str, object]) -> None:
		linter_id = str(linter["id"])
		if linter_id in self._linters:
			raise erb_lint.errors.ConfigError(f"Linter {linter_id} is registered twice")
		self._linters[linter_id] = linter

	def linters(self) -> list[dict[str, object]]:
		return list(self._linters.values())

	def _check_known(self, linter_ids: set[str], flag: str) -> None:
		unknown = sorted(linter_id for linter_id in linter_ids if linter_id not in self._linters)
		if unknown:
			raise erb_lint.errors.ConfigError(f"Unknown linter for {flag}: {', '.join(unknown)}")

	def resolve_linters(
		self,
		config: dict[str, object],
		only_ids: set[str] = frozenset(),
		enable_ids: set[str] = frozenset(),
		disable_ids: set[str] = frozenset(),
	) -> list[dict[str, object]]:
		"""
		Pick the linters to run for a config and command-line overrides.

		The config decides first: only linters listed with "enabled: true"
		run. --only replaces that choice, --enable adds to it and --disable
		removes from it.

		Args:
			config: Loaded config.
			only_ids: Linter ids to run exclusively.
			enable_ids: Linter ids to run in addition to the config's.
			disable_ids: Linter ids to skip.

		Returns:
			list[dict[str, object]]: Linters in registration order.
		"""
		self._check_known(only_ids, "--only")
		self._check_known(enable_ids, "--enable")
		if only_ids:
			selected = set(only_ids)
		else:
			selected = erb_lint.config.enabled_linter_ids(config) | set(enable_ids)
		selected -= set(disable_ids)
		return [linter for linter_id, linter in self._linters.items() if linter_id in selected]

	def load_linter_path(self, path: str) -> dict[str, object]:
		"""
		Import a custom linter from a .py file and register it.

		Args:
			path: Path to the linter module.

		Returns:
			dict[str, object]: The registered linter.
		"""
		abs_path = os.path.abspath(path)
		module_name = "erb_lint_custom_" + os.path.splitext(os.path.basename(abs_path))[0]
		spec = importlib.util.spec_from_file_location(module_name, abs_path)
		if spec is None or spec.loader is None:
			raise erb_lint.errors.ConfigError(f"Unable to load linter module: {path}")
		module = importlib.util.module_from_spec(spec)
		try:
			spec.loader.exec_module(module)
		except OSError as err:
			raise erb_lint.errors.ConfigError(f"Unable to load linter module {path}: {err}") from err
		linter = linter_from_module(module)
		self.add(linter)
		return linter


#============================================


def build_registry(linter_paths: list[str] | None = None) -> Registry:
	"""
	Build a registry of the built-in linters plus any custom linter files.

	Args:
		linter_paths: Optional paths of custom linter modules.

	Returns:
		Registry: Linter registry.
	"""
	registry = Registry()
	for module_name in erb_lint.linters.BUILTIN_LINTERS:
		registry.add(linter_from_module(importlib.import_module(module_name)))
	for path in linter_paths or []:
		registry.load_linter_path(path)
	return registry
