# Local modules
import erb_lint.correctors
import erb_lint.runs


LINTER_ID = "HardCodedString"
LINTER_NAME = "Hard-coded strings in templates"


#============================================


def prepare(linter_config: dict[str, object], config: dict[str, object]) -> dict[str, object]:
	"""
	Validate the linter config once, before any file is linted.

	Args:
		linter_config: HardCodedString section of the config.
		config: Full config.

	Returns:
		dict[str, object]: Linter settings.
	"""
	corrector_config = linter_config.get("corrector") or {}
	erb_lint.correctors.validate_corrector_config(corrector_config)
	settings = {"corrector": corrector_config}
	return settings


#============================================


def run(context: dict[str, object]) -> list[dict[str, object]]:
	"""
	Report text runs that are not passed through a translation helper.

	Args:
		context: Shared lint context.

	Returns:
		list[dict[str, object]]: Offense list.
	"""
	document = context["document"]
	offenses: list[dict[str, object]] = []
	for text_run in erb_lint.runs.collect_runs(document):
		offense = erb_lint.runs.emit_offense(document, text_run, LINTER_ID)
		if offense is not None:
			offenses.append(offense)
	return offenses


#============================================


def autocorrect(context: dict[str, object], offense: dict[str, object]):
	"""
	Return a patch for an offense when a corrector is configured.

	Args:
		context: Shared lint context.
		offense: Offense produced by run().

	Returns:
		Patch callable, or None.
	"""
	settings = context.get("settings", {}).get(LINTER_ID, {})
	corrector_config = settings.get("corrector", {})
	start = int(offense["start"])
	end = int(offense["end"])
	string = str(context["text"])[start:end]
	patch = erb_lint.correctors.correct(
		string,
		context.get("file_path"),
		start,
		end,
		corrector_config,
	)
	return patch
