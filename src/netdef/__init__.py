"""Located error diagnostics for YAML network definition files."""

__version__ = "0.1.0"
