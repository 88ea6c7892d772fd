"""Outer surfaces (CLI) built on the Copilot provider."""
