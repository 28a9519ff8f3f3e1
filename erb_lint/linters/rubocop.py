# Standard Library
import os

# Local modules
import erb_lint.analyzer
import erb_lint.config
import erb_lint.errors
import erb_lint.fragment
import erb_lint.parser


LINTER_ID = "Rubocop"
LINTER_NAME = "RuboCop on embedded Ruby"


#============================================


def prepare(linter_config: dict[str, object], config: dict[str, object]) -> dict[str, object]:
	"""
	Resolve the rubocop configuration and build the analyzer.

	Args:
		linter_config: Rubocop section of the config.
		config: Full config.

	Returns:
		dict[str, object]: Linter settings.
	"""
	only = linter_config.get("only") or []
	if not isinstance(only, list) or not all(isinstance(item, str) for item in only):
		raise erb_lint.errors.ConfigError("Rubocop 'only' must be a list of rule names")
	rubocop_config = linter_config.get("rubocop_config") or {}
	if not isinstance(rubocop_config, dict):
		raise erb_lint.errors.ConfigError("Rubocop 'rubocop_config' must be a mapping")

	config_dir = str(config.get("config_dir") or os.getcwd())
	resolved = erb_lint.config.resolve_rubocop_config(rubocop_config, config_dir)
	target_version = linter_config.get("target_ruby_version")
	analyzer = erb_lint.analyzer.RubocopAnalyzer(
		resolved,
		only=only,
		target_version=None if target_version is None else str(target_version),
		executable=str(linter_config.get("executable", "rubocop")),
	)
	settings = {
		"only": only,
		"rubocop_config": resolved,
		"analyzer": analyzer,
	}
	return settings


#============================================


def inspect_content(
	document: erb_lint.parser.Document,
	erb_node: erb_lint.parser.ErbNode,
	analyzer: erb_lint.analyzer.Analyzer,
) -> list[dict[str, object]]:
	"""
	Analyze the code of one ERB tag and map findings to the template.

	Args:
		document: Parsed document.
		erb_node: ERB node to inspect.
		analyzer: Analyzer used for the fragment.

	Returns:
		list[dict[str, object]]: Offense list.
	"""
	if erb_node.is_comment:
		return []
	fragment = erb_lint.fragment.normalize_erb_node(document, erb_node)
	if not fragment.body.strip():
		return []
	diagnostics = erb_lint.analyzer.analyze(fragment, analyzer)
	offenses = [
		erb_lint.fragment.translate(fragment, diagnostic, erb_node, LINTER_ID)
		for diagnostic in diagnostics
	]
	return offenses


#============================================


def run(context: dict[str, object]) -> list[dict[str, object]]:
	"""
	Run the analyzer on every ERB tag in the document.

	Args:
		context: Shared lint context.

	Returns:
		list[dict[str, object]]: Offense list.
	"""
	settings = context.get("settings", {}).get(LINTER_ID)
	if settings is None:
		settings = prepare({}, {})
	analyzer = settings["analyzer"]
	document = context["document"]
	offenses: list[dict[str, object]] = []
	for erb_node in document.erb_nodes():
		offenses.extend(inspect_content(document, erb_node, analyzer))
	return offenses


#============================================


def autocorrect(context: dict[str, object], offense: dict[str, object]):
	replacement = offense.get("replacement")
	if replacement is None:
		return None
	start = int(offense["replacement_start"])
	end = int(offense["replacement_end"])

	def patch(corrector) -> None:
		corrector.replace(start, end, str(replacement))

	return patch
