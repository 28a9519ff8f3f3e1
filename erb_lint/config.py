# Standard Library
import copy
import logging
import os
import re
import urllib.error
import urllib.parse
import urllib.request

# PIP3 modules
import yaml

# Local modules
import erb_lint.errors


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".erb-lint.yml"
REMOTE_CONFIG_RX = re.compile(r"\Ahttps?://", re.IGNORECASE)
REMOTE_TIMEOUT = 30

DEFAULT_CONFIG: dict[str, object] = {
	"linters": {
		"HardCodedString": {"enabled": True},
		"Rubocop": {"enabled": False},
	},
}


#============================================


def _parse_yaml(text: str, location: str) -> dict[str, object]:
	"""
	Parse YAML text that must hold a mapping.

	Args:
		text: YAML text.
		location: File path or URL, for error messages.

	Returns:
		dict[str, object]: Parsed mapping (empty for an empty document).
	"""
	try:
		data = yaml.safe_load(text)
	except yaml.YAMLError as err:
		raise erb_lint.errors.ConfigError(f"Invalid YAML in {location}: {err}") from err
	if data is None:
		return {}
	if not isinstance(data, dict):
		raise erb_lint.errors.ConfigError(f"Expected a mapping at the top of {location}")
	return data


#============================================


def load_yaml_file(path: str) -> dict[str, object]:
	try:
		with open(path, "r", encoding="utf-8") as handle:
			text = handle.read()
	except OSError as err:
		raise erb_lint.errors.ConfigError(f"Unable to read config file {path}: {err}") from err
	return _parse_yaml(text, path)


#============================================


def fetch_remote_yaml(url: str) -> dict[str, object]:
	"""
	Download and parse a remote YAML config.

	Args:
		url: http(s) URL.

	Returns:
		dict[str, object]: Parsed mapping.
	"""
	logger.debug("Fetching remote config %s", url)
	try:
		with urllib.request.urlopen(url, timeout=REMOTE_TIMEOUT) as response:
			text = response.read().decode("utf-8")
	except (urllib.error.URLError, TimeoutError) as err:
		raise erb_lint.errors.ConfigError(f"Unable to fetch remote config {url}: {err}") from err
	return _parse_yaml(text, url)


#============================================


def merge_config(base: dict[str, object], override: dict[str, object]) -> dict[str, object]:
	"""
	Merge two config mappings; override wins and nested mappings merge.

	Args:
		base: Parent config.
		override: Child config.

	Returns:
		dict[str, object]: New merged mapping.
	"""
	merged = copy.deepcopy(base)
	for key, value in override.items():
		if isinstance(value, dict) and isinstance(merged.get(key), dict):
			merged[key] = merge_config(merged[key], value)
		else:
			merged[key] = copy.deepcopy(value)
	return merged


#============================================


def _is_remote(location: str) -> bool:
	return REMOTE_CONFIG_RX.match(location) is not None


def _resolve_location(base: str, name: str) -> str:
	if _is_remote(name):
		return name
	if _is_remote(base):
		return urllib.parse.urljoin(base, name)
	return os.path.normpath(os.path.join(base, name))


def _location_base(location: str) -> str:
	if _is_remote(location):
		return location
	return os.path.dirname(location)


#============================================


def resolve_rubocop_config(
	config: dict[str, object],
	base: str,
	seen: frozenset = frozenset(),
) -> dict[str, object]:
	"""
	Resolve inherit_from in a rubocop config mapping.

	Parents are merged in listed order, then the mapping itself overrides
	them. Local names are relative to base (a directory or a URL).

	Args:
		config: Config mapping, possibly holding inherit_from.
		base: Directory or URL that relative names are resolved against.
		seen: Locations already being resolved, to detect cycles.

	Returns:
		dict[str, object]: Resolved mapping without inherit_from.
	"""
	child = copy.deepcopy(config)
	inherit_from = child.pop("inherit_from", None)
	if inherit_from is None:
		return child
	if isinstance(inherit_from, str):
		inherit_from = [inherit_from]
	if not isinstance(inherit_from, list):
		raise erb_lint.errors.ConfigError("inherit_from must be a string or a list of strings")

	resolved: dict[str, object] = {}
	for name in inherit_from:
		location = _resolve_location(base, str(name))
		if location in seen:
			raise erb_lint.errors.ConfigError(f"Circular inherit_from: {location}")
		if _is_remote(location):
			parent = fetch_remote_yaml(location)
		else:
			parent = load_yaml_file(location)
		parent = resolve_rubocop_config(parent, _location_base(location), seen | {location})
		resolved = merge_config(resolved, parent)
	return merge_config(resolved, child)


#============================================


def load_config(config_file: str | None) -> dict[str, object]:
	"""
	Load the lint configuration or fall back to defaults.

	Args:
		config_file: Optional path to a YAML config file. When None the
			default file in the current directory is used if present.

	Returns:
		dict[str, object]: Config with "linters" and "config_dir" keys.
	"""
	if config_file is None:
		if not os.path.isfile(DEFAULT_CONFIG_FILE):
			logger.debug("No %s found, using defaults", DEFAULT_CONFIG_FILE)
			config = copy.deepcopy(DEFAULT_CONFIG)
			config["config_dir"] = os.getcwd()
			return config
		config_file = DEFAULT_CONFIG_FILE

	data = load_yaml_file(config_file)
	linters = data.get("linters", {})
	if not isinstance(linters, dict):
		raise erb_lint.errors.ConfigError(f"'linters' must be a mapping in {config_file}")
	config = dict(data)
	config["linters"] = linters
	config["config_dir"] = os.path.dirname(os.path.abspath(config_file))
	logger.debug("Loaded config from %s", config_file)
	return config


#============================================


def linter_config(config: dict[str, object], linter_id: str) -> dict[str, object]:
	linters = config.get("linters", {})
	section = linters.get(linter_id) or {}
	if not isinstance(section, dict):
		raise erb_lint.errors.ConfigError(f"Config for linter {linter_id} must be a mapping")
	return section


#============================================


def enabled_linter_ids(config: dict[str, object]) -> set[str]:
	"""
	Return linter ids switched on in the config.

	Args:
		config: Loaded config.

	Returns:
		set[str]: Ids with "enabled: true".
	"""
	linters = config.get("linters", {})
	enabled: set[str] = set()
	for linter_id, section in linters.items():
		if isinstance(section, dict) and section.get("enabled") is True:
			enabled.add(str(linter_id))
	return enabled

