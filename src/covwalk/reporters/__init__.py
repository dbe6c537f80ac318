"""Reporters for generation sessions."""

from covwalk.reporters.console import ConsoleReporter

__all__ = ["ConsoleReporter"]
