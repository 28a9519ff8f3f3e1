# Standard Library
import pytest

# Local modules
import erb_lint.config
import erb_lint.engine
import erb_lint.parser
import erb_lint.registry
import erb_lint.runs


#============================================


def _run_lint(text: str) -> list[dict[str, object]]:
	"""
	Run only the hard-coded string linter on a text blob.
	"""
	registry = erb_lint.registry.build_registry()
	linters = registry.resolve_linters(erb_lint.config.DEFAULT_CONFIG, only_ids={"HardCodedString"})
	settings = erb_lint.engine.prepare_linters(linters, erb_lint.config.DEFAULT_CONFIG)
	offenses = erb_lint.engine.lint_text(text, None, linters, settings)
	return offenses


def _run_texts(text: str) -> list[str]:
	document = erb_lint.parser.parse_document(text)
	return [str(run["text"]) for run in erb_lint.runs.collect_runs(document)]


#============================================


def test_text_merged_with_output_tag() -> None:
	text = "<p>Hello <%= name %>!</p>"
	offenses = _run_lint(text)
	assert len(offenses) == 1
	offense = offenses[0]
	assert offense["message"] == "String not translated: Hello <%= name %>!"
	assert text[offense["start"]:offense["end"]] == "Hello <%= name %>!"
	assert (offense["line"], offense["column"]) == (1, 4)
	assert offense["linter"] == "HardCodedString"


def test_output_tag_alone_is_not_reported() -> None:
	assert _run_lint("<p><%= partial %></p>") == []


@pytest.mark.parametrize(
	"text",
	[
		"<p><%= count %>.</p>",
		"<p>(<%= n %>)</p>",
		"<p><%= a %>&nbsp;</p>",
	],
)
def test_output_tag_with_punctuation_is_not_reported(text: str) -> None:
	assert _run_lint(text) == []


def test_punctuation_before_text_does_not_start_run() -> None:
	assert _run_texts("<p>(<%= n %> items)</p>") == ["<%= n %> items)"]


@pytest.mark.parametrize(
	"text",
	[
		"<p>&nbsp;</p>",
		"<p> &nbsp; </p>",
		"<p>a</p>",
		"<p> x </p>",
		"<p>\n\n</p>",
	],
)
def test_ignored_strings(text: str) -> None:
	assert _run_lint(text) == []


def test_script_content_is_skipped() -> None:
	text = "<script>\n  var greeting = 'Hello world';\n</script>"
	assert _run_lint(text) == []
	other = "<div>\n  var greeting = 'Hello world';\n</div>"
	offenses = _run_lint(other)
	assert [offense["message"] for offense in offenses] == [
		"String not translated: var greeting = 'Hello world';",
	]


def test_self_closing_script_does_not_hide_text() -> None:
	offenses = _run_lint('<script src="app.js"/>Hello world')
	assert len(offenses) == 1


def test_adjacent_output_tags_merge() -> None:
	assert _run_texts("<p><%= a %><%= b %><%= c %></p>") == ["<%= a %><%= b %><%= c %>"]


def test_gap_splits_runs() -> None:
	assert _run_texts("<p><%= a %><%= b %> <%= c %></p>") == ["<%= a %><%= b %>"]


def test_lines_are_separate_runs() -> None:
	offenses = _run_lint("<p>\n  Hello\n  World\n</p>")
	messages = [offense["message"] for offense in offenses]
	assert messages == ["String not translated: Hello", "String not translated: World"]
	assert [offense["line"] for offense in offenses] == [2, 3]


def test_code_tag_breaks_run() -> None:
	offenses = _run_lint("<p>Hello <% if x %>world<% end %></p>")
	messages = [offense["message"] for offense in offenses]
	assert messages == ["String not translated: Hello", "String not translated: world"]


def test_repeated_text_maps_to_its_own_line() -> None:
	text = "<p>Welcome <%= a %>\nWelcome</p>"
	offenses = _run_lint(text)
	assert [offense["line"] for offense in offenses] == [1, 2]
	assert text[offenses[1]["start"]:offenses[1]["end"]] == "Welcome"


def test_offense_range_matches_trimmed_run_text() -> None:
	text = "<ul>\n  <li>  First item <%= count %> left  </li>\n  <li>Second</li>\n</ul>"
	document = erb_lint.parser.parse_document(text)
	for text_run in erb_lint.runs.collect_runs(document):
		offense = erb_lint.runs.emit_offense(document, text_run, "HardCodedString")
		assert text[offense["start"]:offense["end"]] == str(text_run["text"]).strip()


def test_emit_offense_skips_missing_text() -> None:
	document = erb_lint.parser.parse_document("<p>Hello</p>")
	node = document.nodes[1]
	text_run = {"node": node, "start": node.start, "end": node.end, "text": "Goodbye"}
	assert erb_lint.runs.emit_offense(document, text_run, "HardCodedString") is None


def test_check_string() -> None:
	assert erb_lint.runs.check_string("ok")
	assert not erb_lint.runs.check_string(" o ")
	assert not erb_lint.runs.check_string(" &nbsp; ")
