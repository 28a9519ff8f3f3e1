#!/usr/bin/env python3

# Standard Library
import argparse
import json
import logging
import os
import sys

# Local modules
import erb_lint.config
import erb_lint.core
import erb_lint.engine
import erb_lint.errors
import erb_lint.registry


DEFAULT_EXTENSIONS = ".erb"


#============================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.

	Args:
		argv: Optional argument list (defaults to sys.argv).

	Returns:
		argparse.Namespace: Parsed arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Lint ERB templates: embedded Ruby and hard-coded strings.",
	)
	parser.add_argument(
		"-i",
		"--input",
		dest="input_file",
		help="Path to a single template to lint.",
	)
	parser.add_argument(
		"-d",
		"--directory",
		dest="input_dir",
		default=".",
		help="Directory to scan for templates (default: current directory).",
	)
	parser.add_argument(
		"-e",
		"--extensions",
		dest="extensions",
		default=DEFAULT_EXTENSIONS,
		help="Comma-separated list of file extensions (default: .erb).",
	)
	parser.add_argument(
		"-c",
		"--config",
		dest="config_file",
		help=f"YAML config file (default: {erb_lint.config.DEFAULT_CONFIG_FILE} if present).",
	)
	parser.add_argument(
		"-a",
		"--autocorrect",
		dest="autocorrect",
		action="store_true",
		help="Correct offenses in place where a linter supports it.",
	)
	parser.add_argument(
		"--linter",
		dest="linter_paths",
		action="append",
		default=[],
		help="Path to a custom linter module file (repeatable).",
	)
	parser.add_argument(
		"--enable",
		dest="enable_linters",
		action="append",
		default=[],
		help="Comma-separated linter ids to enable.",
	)
	parser.add_argument(
		"--disable",
		dest="disable_linters",
		action="append",
		default=[],
		help="Comma-separated linter ids to disable.",
	)
	parser.add_argument(
		"--only",
		dest="only_linters",
		action="append",
		default=[],
		help="Comma-separated linter ids to run exclusively.",
	)
	parser.add_argument(
		"--list-linters",
		dest="list_linters",
		action="store_true",
		help="List available linters and exit.",
	)
	parser.add_argument(
		"--show-linter",
		dest="show_linter",
		action="store_true",
		help="Include linter id in line output.",
	)
	parser.add_argument(
		"--json",
		dest="json_output",
		action="store_true",
		help="Emit offenses and summaries as JSON.",
	)
	parser.add_argument(
		"--fail-on-warn",
		dest="fail_on_warn",
		action="store_true",
		help="Exit non-zero if warnings are found.",
	)
	parser.add_argument(
		"-v",
		"--verbose",
		dest="verbose",
		action="store_true",
		help="Print debug logging to stderr.",
	)
	parser.set_defaults(fail_on_warn=False, json_output=False, list_linters=False, autocorrect=False)
	args = parser.parse_args(argv)
	return args


#============================================


def _split_csv(values: list[str]) -> set[str]:
	"""
	Split comma-separated lists into a set.

	Args:
		values: List of CSV strings.

	Returns:
		set[str]: Normalized ids.
	"""
	items: set[str] = set()
	for value in values:
		for raw in value.split(","):
			item = raw.strip()
			if item:
				items.add(item)
	return items


#============================================


def normalize_extensions(extensions: str) -> list[str]:
	"""
	Normalize comma-separated extensions into a list.

	Args:
		extensions: Raw comma-separated string.

	Returns:
		list[str]: Normalized extensions.
	"""
	extensions_list = [ext.strip() for ext in extensions.split(",") if ext.strip()]
	normalized: list[str] = []
	for ext in extensions_list:
		if ext.startswith("."):
			normalized.append(ext.lower())
		else:
			normalized.append(f".{ext.lower()}")
	return normalized


#============================================


def find_files(input_dir: str, extensions: list[str]) -> list[str]:
	"""
	Find files under input_dir whose names end with one of extensions.

	Args:
		input_dir: Root directory to scan.
		extensions: File extensions to include, such as ".erb" or ".html.erb".

	Returns:
		list[str]: Sorted file paths.
	"""
	matches: list[str] = []
	for root, dirs, files in os.walk(input_dir):
		dirs.sort()
		files.sort()
		for filename in files:
			lowered = filename.lower()
			if any(lowered.endswith(ext) for ext in extensions):
				matches.append(os.path.join(root, filename))
	paths = sorted(matches)
	return paths


#============================================


def list_linters(registry: erb_lint.registry.Registry, config: dict[str, object]) -> None:
	enabled_ids = erb_lint.config.enabled_linter_ids(config)
	for linter in registry.linters():
		linter_id = str(linter.get("id"))
		linter_name = str(linter.get("name"))
		state = "enabled" if linter_id in enabled_ids else "disabled"
		print(f"{linter_id}: {linter_name} ({state})")


#============================================


def run(args: argparse.Namespace) -> int:
	"""
	Lint the requested files.

	Args:
		args: Parsed arguments.

	Returns:
		int: Process exit status.
	"""
	config = erb_lint.config.load_config(args.config_file)
	registry = erb_lint.registry.build_registry(args.linter_paths)

	if args.list_linters:
		list_linters(registry, config)
		return 0

	linters = registry.resolve_linters(
		config,
		_split_csv(args.only_linters),
		_split_csv(args.enable_linters),
		_split_csv(args.disable_linters),
	)
	settings = erb_lint.engine.prepare_linters(linters, config)

	if args.input_file:
		files_to_check = [args.input_file]
	else:
		files_to_check = find_files(args.input_dir, normalize_extensions(args.extensions))

	offenses: list[dict[str, object]] = []
	for file_path in files_to_check:
		if args.autocorrect:
			file_offenses = erb_lint.engine.autocorrect_file(file_path, linters, settings)
		else:
			file_offenses = erb_lint.engine.lint_file(file_path, linters, settings)
		for offense in file_offenses:
			offense["file"] = file_path
		offenses.extend(file_offenses)
		if not args.json_output:
			for offense in file_offenses:
				print(erb_lint.core.format_offense(file_path, offense, args.show_linter))

	error_count, warn_count = erb_lint.core.summarize_offenses(offenses)
	if args.json_output:
		linter_ids = [str(linter.get("id")) for linter in linters]
		summary = {
			"files_checked": len(files_to_check),
			"errors": error_count,
			"warnings": warn_count,
			"linters": linter_ids,
			"offenses": offenses,
		}
		print(json.dumps(summary, indent=2))
	elif offenses:
		print(f"Found {error_count} errors and {warn_count} warnings.")

	if error_count > 0:
		return 1
	if args.fail_on_warn and warn_count > 0:
		return 1
	return 0


#============================================


def main(argv: list[str] | None = None) -> None:
	"""
	Run the lint checker.
	"""
	args = parse_args(argv)
	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)
	try:
		status = run(args)
	except erb_lint.errors.ErbLintError as err:
		print(f"error: {err}", file=sys.stderr)
		raise SystemExit(2)
	if status:
		raise SystemExit(status)


if __name__ == "__main__":
	main()
