"""ERB template lint package."""

from erb_lint.engine import build_context, run_linters, lint_text, lint_file, autocorrect_text
from erb_lint.engine import prepare_linters
from erb_lint.registry import build_registry, Registry
from erb_lint.config import load_config, DEFAULT_CONFIG

__all__ = [
	"build_context",
	"run_linters",
	"lint_text",
	"lint_file",
	"autocorrect_text",
	"prepare_linters",
	"build_registry",
	"Registry",
	"load_config",
	"DEFAULT_CONFIG",
]
