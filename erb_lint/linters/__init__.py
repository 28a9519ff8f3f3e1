"""Built-in linter list."""

BUILTIN_LINTERS = [
	"erb_lint.linters.hard_coded_string",
	"erb_lint.linters.rubocop",
]
