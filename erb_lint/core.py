# Standard Library


SEVERITY_ERROR = "ERROR"
SEVERITY_WARNING = "WARNING"


#============================================


def make_offense(
	linter: str,
	start: int,
	end: int,
	message: str,
	severity: str = SEVERITY_WARNING,
) -> dict[str, object]:
	"""
	Create an offense dict.

	Args:
		linter: Linter id that produced the offense.
		start: Absolute start offset in the document.
		end: Absolute end offset (exclusive).
		message: Offense message.
		severity: Severity label.

	Returns:
		dict[str, object]: Offense dict.
	"""
	offense: dict[str, object] = {
		"linter": linter,
		"start": int(start),
		"end": int(end),
		"message": message,
		"severity": severity,
	}
	return offense


#============================================


def summarize_offenses(offenses: list[dict[str, object]]) -> tuple[int, int]:
	"""
	Summarize offense counts.

	Args:
		offenses: Offense list.

	Returns:
		tuple[int, int]: (errors, warnings)
	"""
	errors = len([offense for offense in offenses if offense.get("severity") == SEVERITY_ERROR])
	warnings = len([offense for offense in offenses if offense.get("severity") != SEVERITY_ERROR])
	return errors, warnings


#============================================


def format_offense(file_path: str, offense: dict[str, object], show_linter: bool) -> str:
	"""
	Format an offense for display.

	Args:
		file_path: Path to the file.
		offense: Offense dict.
		show_linter: Whether to include the linter id in output.

	Returns:
		str: Formatted offense line.
	"""
	severity = str(offense.get("severity", SEVERITY_WARNING))
	linter = offense.get("linter")
	if show_linter and linter:
		severity = f"{severity}({linter})"
	message = str(offense.get("message", ""))
	line = offense.get("line")
	column = offense.get("column")
	if isinstance(line, int) and isinstance(column, int):
		formatted = f"{file_path}:{line}:{column}: {severity}: {message}"
		return formatted
	if isinstance(line, int):
		formatted = f"{file_path}:{line}: {severity}: {message}"
		return formatted
	formatted = f"{file_path}: {severity}: {message}"
	return formatted
