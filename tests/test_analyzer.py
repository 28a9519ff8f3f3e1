# Standard Library
import json
import os
import subprocess

import pytest

# Local modules
import erb_lint.analyzer
import erb_lint.core
import erb_lint.errors
import erb_lint.fragment


#============================================


class FakeAnalyzer(erb_lint.analyzer.Analyzer):
	def __init__(self, valid: bool, diagnostics: list) -> None:
		self.valid = valid
		self.diagnostics = diagnostics
		self.inspected: list[str] = []

	def valid_syntax(self, text: str) -> bool:
		return self.valid

	def inspect(self, text: str) -> list:
		self.inspected.append(text)
		return self.diagnostics


def _rubocop_output(offenses: list[dict], corrected: str | None = None) -> str:
	report = {"files": [{"path": "erb_fragment.rb", "offenses": offenses}]}
	output = json.dumps(report)
	if corrected is not None:
		output += "\n" + "=" * 20 + "\n" + corrected
	return output


#============================================


def test_analyze_skips_invalid_syntax() -> None:
	fragment = erb_lint.fragment.normalize("end", 0)
	analyzer = FakeAnalyzer(False, [erb_lint.analyzer.RawDiagnostic(0, 3, "x")])
	assert erb_lint.analyzer.analyze(fragment, analyzer) == []
	assert analyzer.inspected == []


def test_analyze_drops_disabled() -> None:
	fragment = erb_lint.fragment.normalize("foo", 2)
	enabled = erb_lint.analyzer.RawDiagnostic(2, 5, "enabled")
	disabled = erb_lint.analyzer.RawDiagnostic(2, 5, "disabled", disabled=True)
	analyzer = FakeAnalyzer(True, [enabled, disabled])
	assert erb_lint.analyzer.analyze(fragment, analyzer) == [enabled]
	assert analyzer.inspected == ["  foo"]


def test_parse_rubocop_output_offsets_and_correction() -> None:
	text = "x = 1\nfoo(  1)"
	offenses = [
		{
			"severity": "convention",
			"message": "Layout/SpaceInsideParens: Space inside parentheses detected.",
			"cop_name": "Layout/SpaceInsideParens",
			"corrected": True,
			"location": {"start_line": 2, "start_column": 5, "length": 2},
		},
		{
			"severity": "error",
			"message": "Lint/Boom: boom",
			"cop_name": "Lint/Boom",
			"location": {"start_line": 1, "start_column": 1, "length": 1},
		},
	]
	output = _rubocop_output(offenses, corrected="x = 1\nfoo(1)")
	diagnostics = erb_lint.analyzer.parse_rubocop_output(output, text)
	assert len(diagnostics) == 2
	first = diagnostics[0]
	assert text[first.begin:first.end] == "  "
	assert first.rule == "Layout/SpaceInsideParens"
	assert first.severity == erb_lint.core.SEVERITY_WARNING
	assert first.corrected
	assert first.corrected_text == "x = 1\nfoo(1)"
	assert diagnostics[1].severity == erb_lint.core.SEVERITY_ERROR
	assert (diagnostics[1].begin, diagnostics[1].end) == (0, 1)


def test_parse_rubocop_output_unchanged_source() -> None:
	text = "foo"
	output = _rubocop_output([], corrected="foo")
	assert erb_lint.analyzer.parse_rubocop_output(output, text) == []
	offense = {"message": "m", "location": {"start_line": 1, "start_column": 1, "length": 3}}
	diagnostics = erb_lint.analyzer.parse_rubocop_output(_rubocop_output([offense], "foo"), text)
	assert diagnostics[0].corrected_text is None


def test_parse_rubocop_output_bad_json() -> None:
	with pytest.raises(erb_lint.errors.AnalyzerError):
		erb_lint.analyzer.parse_rubocop_output("not json", "foo")


def test_rubocop_analyzer_command_and_config(monkeypatch: pytest.MonkeyPatch) -> None:
	calls: list[dict] = []

	def fake_run(command, input, capture_output, text, check):
		config_path = command[command.index("--config") + 1]
		with open(config_path, "r", encoding="utf-8") as handle:
			config_text = handle.read()
		calls.append({"command": command, "input": input, "config": config_text})
		offense = {
			"severity": "convention",
			"message": "Style/StringLiterals: Prefer single quotes.",
			"cop_name": "Style/StringLiterals",
			"location": {"start_line": 1, "start_column": 3, "length": 5},
		}
		return subprocess.CompletedProcess(command, 1, stdout=_rubocop_output([offense], "  'abc'"), stderr="")

	monkeypatch.setattr(subprocess, "run", fake_run)
	analyzer = erb_lint.analyzer.RubocopAnalyzer(
		{"Style/StringLiterals": {"Enabled": True}},
		only=["Style/StringLiterals", "Layout/SpaceInsideParens"],
		target_version="3.2",
	)
	diagnostics = analyzer.inspect('  "abc"')
	assert len(diagnostics) == 1
	assert (diagnostics[0].begin, diagnostics[0].end) == (2, 7)
	assert diagnostics[0].corrected_text == "  'abc'"

	command = calls[0]["command"]
	assert command[0] == "rubocop"
	assert "--autocorrect" in command
	assert command[command.index("--only") + 1] == "Style/StringLiterals,Layout/SpaceInsideParens"
	assert "TargetRubyVersion: '3.2'" in calls[0]["config"]
	assert calls[0]["input"] == '  "abc"'
	assert not os.path.exists(command[command.index("--config") + 1])
	assert "AllCops" not in analyzer.config


def test_rubocop_analyzer_failure(monkeypatch: pytest.MonkeyPatch) -> None:
	def fake_run(command, **kwargs):
		return subprocess.CompletedProcess(command, 2, stdout="", stderr="invalid option")

	monkeypatch.setattr(subprocess, "run", fake_run)
	analyzer = erb_lint.analyzer.RubocopAnalyzer({})
	with pytest.raises(erb_lint.errors.AnalyzerError, match="invalid option"):
		analyzer.inspect("foo")


def test_rubocop_analyzer_missing_executable(monkeypatch: pytest.MonkeyPatch) -> None:
	def fake_run(command, **kwargs):
		raise FileNotFoundError(command[0])

	monkeypatch.setattr(subprocess, "run", fake_run)
	analyzer = erb_lint.analyzer.RubocopAnalyzer({}, ruby="missing-ruby")
	with pytest.raises(erb_lint.errors.AnalyzerError, match="missing-ruby"):
		analyzer.valid_syntax("foo")


def test_valid_syntax_uses_ruby_check(monkeypatch: pytest.MonkeyPatch) -> None:
	def fake_run(command, **kwargs):
		status = 0 if kwargs["input"] == "foo" else 1
		return subprocess.CompletedProcess(command, status, stdout="", stderr="")

	monkeypatch.setattr(subprocess, "run", fake_run)
	analyzer = erb_lint.analyzer.RubocopAnalyzer({})
	assert analyzer.valid_syntax("foo")
	assert not analyzer.valid_syntax("end")


def test_base_analyzer_requires_overrides() -> None:
	analyzer = erb_lint.analyzer.Analyzer()
	with pytest.raises(NotImplementedError):
		analyzer.valid_syntax("x = 1")
	with pytest.raises(NotImplementedError):
		analyzer.inspect("x = 1")
