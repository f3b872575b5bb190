"""compilerguard - experimental compiler argument diagnostics for compile tasks."""

__version__ = "0.1.0"
