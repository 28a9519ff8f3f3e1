"""Exception types raised by the lint engine."""


#============================================


class ErbLintError(Exception):
	"""Base class for erb_lint errors."""


class ConfigError(ErbLintError):
	"""Configuration could not be loaded or is invalid."""


class ForbiddenCorrector(ConfigError):
	"""Configured corrector is not on the allow-list."""


class MissingCorrector(ConfigError):
	"""Corrector name or path is not configured, or cannot be resolved."""


class AnalyzerError(ErbLintError):
	"""External analyzer could not be run or returned unreadable output."""
