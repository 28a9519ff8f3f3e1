# Standard Library
import copy
import dataclasses
import json
import logging
import os
import subprocess
import tempfile

# PIP3 modules
import yaml

# Local modules
import erb_lint.core
import erb_lint.errors
import erb_lint.parser


logger = logging.getLogger(__name__)

# rubocop prints this line between the report and the corrected --stdin source
STDIN_SEPARATOR = "=" * 20
STDIN_FILENAME = "erb_fragment.rb"
ERROR_SEVERITIES = {"error", "fatal"}


#============================================


@dataclasses.dataclass(frozen=True)
class RawDiagnostic:
	"""
	Analyzer finding in fragment-local offsets.

	corrected_text holds the full corrected fragment text when the analyzer
	rewrote the fragment while producing this diagnostic.
	"""

	begin: int
	end: int
	message: str
	rule: str = ""
	severity: str = erb_lint.core.SEVERITY_WARNING
	corrected: bool = False
	corrected_text: str | None = None
	disabled: bool = False


#============================================


class Analyzer:
	"""
	Interface for analyzers that inspect standalone code fragments.

	Subclasses must override both valid_syntax() and inspect().
	"""

	def valid_syntax(self, text: str) -> bool:
		raise NotImplementedError

	def inspect(self, text: str) -> list[RawDiagnostic]:
		raise NotImplementedError


#============================================


def analyze(fragment: object, analyzer: Analyzer) -> list[RawDiagnostic]:
	"""
	Run an analyzer on a normalized fragment.

	Fragments that do not parse on their own are skipped.

	Args:
		fragment: Normalized fragment.
		analyzer: Analyzer instance.

	Returns:
		list[RawDiagnostic]: Enabled diagnostics.
	"""
	if not analyzer.valid_syntax(fragment.text):
		logger.debug("Skipping fragment with invalid syntax: %r", fragment.body)
		return []
	diagnostics = analyzer.inspect(fragment.text)
	enabled = [diagnostic for diagnostic in diagnostics if not diagnostic.disabled]
	return enabled


#============================================


class RubocopAnalyzer(Analyzer):
	"""Run the rubocop executable on fragments passed through stdin."""

	def __init__(
		self,
		config: dict[str, object],
		only: list[str] | None = None,
		target_version: str | None = None,
		executable: str = "rubocop",
		ruby: str = "ruby",
	) -> None:
		self.config = config
		self.only = list(only or [])
		self.target_version = target_version
		self.executable = executable
		self.ruby = ruby

	def _run(self, command: list[str], text: str) -> subprocess.CompletedProcess:
		try:
			result = subprocess.run(
				command,
				input=text,
				capture_output=True,
				text=True,
				check=False,
			)
		except FileNotFoundError as err:
			raise erb_lint.errors.AnalyzerError(f"Analyzer executable not found: {command[0]}") from err
		return result

	def valid_syntax(self, text: str) -> bool:
		"""
		Check the fragment with "ruby -c".

		Args:
			text: Fragment text.

		Returns:
			bool: True when ruby accepts the syntax.
		"""
		result = self._run([self.ruby, "-c"], text)
		return result.returncode == 0

	def build_config(self) -> dict[str, object]:
		config = copy.deepcopy(self.config)
		if self.target_version is not None:
			all_cops = config.setdefault("AllCops", {})
			all_cops["TargetRubyVersion"] = self.target_version
		return config

	def build_command(self, config_path: str) -> list[str]:
		"""
		Build the rubocop command line.

		Args:
			config_path: Path to the temporary config file.

		Returns:
			list[str]: Command argv.
		"""
		command = [
			self.executable,
			"--stdin",
			STDIN_FILENAME,
			"--format",
			"json",
			"--autocorrect",
			"--cache",
			"false",
			"--config",
			config_path,
		]
		if self.only:
			command.extend(["--only", ",".join(self.only)])
		return command

	def inspect(self, text: str) -> list[RawDiagnostic]:
		"""
		Run rubocop on one fragment.

		A fresh config file and process are used for every call.

		Args:
			text: Fragment text.

		Returns:
			list[RawDiagnostic]: Diagnostics in fragment-local offsets.
		"""
		with tempfile.TemporaryDirectory(prefix="erb-lint-") as temp_dir:
			config_path = os.path.join(temp_dir, ".erb-lint-rubocop.yml")
			with open(config_path, "w", encoding="utf-8") as handle:
				yaml.safe_dump(self.build_config(), handle, default_flow_style=False)
			result = self._run(self.build_command(config_path), text)

		if result.returncode not in (0, 1):
			message = result.stderr.strip() or f"exit status {result.returncode}"
			raise erb_lint.errors.AnalyzerError(f"rubocop failed: {message}")
		return parse_rubocop_output(result.stdout, text)


#============================================


def parse_rubocop_output(output: str, text: str) -> list[RawDiagnostic]:
	"""
	Parse rubocop JSON output for a --stdin run.

	Args:
		output: rubocop stdout, optionally followed by the corrected source.
		text: Fragment text that was inspected.

	Returns:
		list[RawDiagnostic]: Diagnostics with local offsets.
	"""
	report_text, separator, corrected_source = output.partition(STDIN_SEPARATOR)
	try:
		report = json.loads(report_text)
	except json.JSONDecodeError as err:
		raise erb_lint.errors.AnalyzerError("rubocop returned unreadable JSON output") from err

	corrected_text: str | None = None
	if separator:
		if corrected_source.startswith("\n"):
			corrected_source = corrected_source[1:]
		if corrected_source != text:
			corrected_text = corrected_source

	newlines = erb_lint.parser.build_newline_index(text)
	diagnostics: list[RawDiagnostic] = []
	for file_report in report.get("files", []):
		for item in file_report.get("offenses", []):
			location = item.get("location", {})
			line_start = erb_lint.parser.line_offset(newlines, int(location.get("start_line", 1)))
			begin = line_start + int(location.get("start_column", 1)) - 1
			end = begin + int(location.get("length", 0))
			severity = erb_lint.core.SEVERITY_WARNING
			if item.get("severity") in ERROR_SEVERITIES:
				severity = erb_lint.core.SEVERITY_ERROR
			rule = str(item.get("cop_name", ""))
			message = str(item.get("message", ""))
			diagnostic = RawDiagnostic(
				begin=begin,
				end=end,
				message=message,
				rule=rule,
				severity=severity,
				corrected=bool(item.get("corrected", False)),
				corrected_text=corrected_text,
			)
			diagnostics.append(diagnostic)
	return diagnostics
