"""Argument parser for ``copilot-providers``.

Wires subcommands only; handlers live in ``actions``.
"""

from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``models``, ``chat`` and ``login``."""
    p = argparse.ArgumentParser(prog="copilot-providers", description="GitHub Copilot provider CLI")
    p.add_argument("--log-level", default=None, help="Override COPILOT_LOG_LEVEL for this run")
    sub = p.add_subparsers(dest="cmd")

    p_models = sub.add_parser("models", help="List models visible to the configured token")
    p_models.add_argument("--json", action="store_true", help="Print raw picker options as JSON")
    p_models.add_argument("--vision", action="store_true", help="Only vision-capable models")
    p_models.add_argument("--type", dest="model_type", default=None, help="Filter by capability type (e.g. chat)")

    p_chat = sub.add_parser("chat", help="Send one prompt and print the completion")
    p_chat.add_argument("--prompt", required=True)
    p_chat.add_argument("--model", default=None)
    p_chat.add_argument("--image", default=None, help="Attach a local image file")
    p_chat.add_argument("--fallback-model", default=None, help="Vision fallback when the model lacks vision")
    p_chat.add_argument("--max-tokens", type=int, default=None)
    p_chat.add_argument("--temperature", type=float, default=None)
    p_chat.add_argument("--json", action="store_true", help="Print the full completion object")

    sub.add_parser("login", help="Authorize this machine with the GitHub device flow")
    return p


__all__ = ["build_parser"]
