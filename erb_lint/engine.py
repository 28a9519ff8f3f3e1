# Standard Library
import logging

# Local modules
import erb_lint.config
import erb_lint.corrector
import erb_lint.parser


logger = logging.getLogger(__name__)


#============================================


def prepare_linters(
	linters: list[dict[str, object]],
	config: dict[str, object],
) -> dict[str, dict[str, object]]:
	"""
	Resolve per-linter settings once, before any file is linted.

	Configuration errors raised here abort the run.

	Args:
		linters: Enabled linters.
		config: Loaded config.

	Returns:
		dict[str, dict[str, object]]: Settings keyed by linter id.
	"""
	settings: dict[str, dict[str, object]] = {}
	for linter in linters:
		linter_id = str(linter.get("id"))
		prepare = linter.get("prepare")
		if prepare is None:
			settings[linter_id] = {}
			continue
		linter_config = erb_lint.config.linter_config(config, linter_id)
		settings[linter_id] = prepare(linter_config, config)
	return settings


#============================================


def build_context(
	text: str,
	file_path: str | None,
	settings: dict[str, dict[str, object]],
) -> dict[str, object]:
	"""
	Build a shared context dict for linters.

	Args:
		text: Full file contents.
		file_path: Optional file path.
		settings: Prepared linter settings.

	Returns:
		dict[str, object]: Context dict.
	"""
	document = erb_lint.parser.parse_document(text)
	context = {
		"file_path": file_path,
		"text": text,
		"document": document,
		"newlines": document.newlines,
		"settings": settings,
	}
	return context


#============================================


def _sort_offenses(offenses: list[dict[str, object]]) -> list[dict[str, object]]:
	def offense_key(offense: dict[str, object]) -> tuple[int, int, str, str]:
		return (
			int(offense.get("start", 0)),
			int(offense.get("end", 0)),
			str(offense.get("linter", "")),
			str(offense.get("message", "")),
		)

	return sorted(offenses, key=offense_key)


#============================================


def run_linters(
	context: dict[str, object],
	linters: list[dict[str, object]],
) -> list[dict[str, object]]:
	"""
	Run linters and return aggregated offenses.

	Args:
		context: Shared context dict.
		linters: Linter metadata list.

	Returns:
		list[dict[str, object]]: Offenses with line and column filled in.
	"""
	document = context["document"]
	offenses: list[dict[str, object]] = []
	for linter in linters:
		linter_id = str(linter.get("id"))
		linter_run = linter.get("run")
		for offense in linter_run(context):
			if offense.get("linter") is None:
				offense["linter"] = linter_id
			line, column = document.line_and_column(int(offense["start"]))
			offense["line"] = line
			offense["column"] = column
			offenses.append(offense)
	return _sort_offenses(offenses)


#============================================


def lint_text(
	text: str,
	file_path: str | None,
	linters: list[dict[str, object]],
	settings: dict[str, dict[str, object]],
) -> list[dict[str, object]]:
	"""
	Lint a text blob with configured linters.

	Args:
		text: File contents.
		file_path: Optional file path.
		linters: Enabled linters.
		settings: Prepared linter settings.

	Returns:
		list[dict[str, object]]: Offense list.
	"""
	context = build_context(text, file_path, settings)
	offenses = run_linters(context, linters)
	return offenses


#============================================


def lint_file(
	file_path: str,
	linters: list[dict[str, object]],
	settings: dict[str, dict[str, object]],
) -> list[dict[str, object]]:
	with open(file_path, "r", encoding="utf-8") as handle:
		text = handle.read()
	offenses = lint_text(text, file_path, linters, settings)
	return offenses


#============================================


def autocorrect_text(
	text: str,
	file_path: str | None,
	linters: list[dict[str, object]],
	settings: dict[str, dict[str, object]],
) -> tuple[str, list[dict[str, object]]]:
	"""
	Lint text and apply every available autocorrect patch.

	Args:
		text: File contents.
		file_path: Optional file path.
		linters: Enabled linters.
		settings: Prepared linter settings.

	Returns:
		tuple[str, list[dict[str, object]]]: Corrected text and the offenses found.
	"""
	context = build_context(text, file_path, settings)
	offenses = run_linters(context, linters)
	linters_by_id = {str(linter.get("id")): linter for linter in linters}
	corrector = erb_lint.corrector.Corrector(text)
	queued: list[tuple[dict[str, object], range]] = []
	for offense in offenses:
		linter = linters_by_id.get(str(offense.get("linter")))
		if linter is None or linter.get("autocorrect") is None:
			continue
		patch = linter["autocorrect"](context, offense)
		if patch is None:
			continue
		first = corrector.patch_count
		patch(corrector)
		queued.append((offense, range(first, corrector.patch_count)))
	corrected_text = corrector.apply()
	for offense, indexes in queued:
		offense["corrected"] = len(indexes) > 0 and not corrector.skipped.intersection(indexes)
	return corrected_text, offenses



#============================================


def autocorrect_file(
	file_path: str,
	linters: list[dict[str, object]],
	settings: dict[str, dict[str, object]],
) -> list[dict[str, object]]:
	"""
	Autocorrect a file in place.

	Args:
		file_path: Path to file.
		linters: Enabled linters.
		settings: Prepared linter settings.

	Returns:
		list[dict[str, object]]: Offenses found before correction.
	"""
	with open(file_path, "r", encoding="utf-8") as handle:
		text = handle.read()
	corrected_text, offenses = autocorrect_text(text, file_path, linters, settings)
	if corrected_text != text:
		logger.debug("Writing corrections to %s", file_path)
		with open(file_path, "w", encoding="utf-8") as handle:
			handle.write(corrected_text)
	return offenses
