"""Codex PR Action: run the codex CLI on a checkout and open a pull request with its changes."""

__version__ = "0.1.0"
