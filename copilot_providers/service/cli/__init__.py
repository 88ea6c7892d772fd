"""Copilot provider CLI (package entrypoint).

Wires argument parsing to the handlers in ``actions``; no provider logic
lives here.
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.logging import configure_logger
from ...copilot import CopilotChatProvider
from .actions import handle_chat, handle_login, handle_models
from .parser import build_parser


def main(argv: Optional[list[str]] = None, provider: Optional[CopilotChatProvider] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; ``sys.argv[1:]`` when ``None``.
    provider: Optional[CopilotChatProvider]
        Prebuilt provider; one is built from configuration when omitted.

    Returns
    -------
    int
        Process exit code (0 success, 2 missing token, 1 other errors).
    """
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.log_level:
        configure_logger(level=args.log_level)
    if args.cmd == "models":
        return handle_models(args, provider)
    if args.cmd == "chat":
        return handle_chat(args, provider)
    if args.cmd == "login":
        return handle_login(args)
    p.print_help(sys.stderr)
    return 1


__all__ = ["main"]
