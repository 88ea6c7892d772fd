"""Subcommand handlers for ``copilot-providers``.

Handlers return process exit codes and print results to stdout; failures
are printed to stderr as one JSON object. A missing token exits with code 2
and lists the accepted environment variables. Handlers accept an optional
prebuilt provider so tests can inject one backed by a mock transport.
"""

from __future__ import annotations

import argparse
import base64
import json
import mimetypes
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ...base.errors import ProviderError
from ...base.logging import get_logger, log_event
from ...config.env import get_env_var_candidates
from ...copilot import CopilotChatProvider
from ...copilot.auth import DeviceCodeResponse, run_device_flow

_logger = get_logger("copilot.cli")


def _fail(payload: Dict[str, Any], code: int = 1) -> int:
    print(json.dumps(payload), file=sys.stderr)
    return code


def _missing_token() -> int:
    return _fail({"error": "missing Copilot token", "set_one_of_env": list(get_env_var_candidates("copilot"))}, 2)


def _provider_or_none(provider: Optional[CopilotChatProvider]) -> Optional[CopilotChatProvider]:
    prov = provider or CopilotChatProvider()
    return prov if prov.has_credential() else None


def handle_models(args: argparse.Namespace, provider: Optional[CopilotChatProvider] = None) -> int:
    """List models as picker entries (``--json``) or one line per model."""
    prov = _provider_or_none(provider)
    if prov is None:
        return _missing_token()
    try:
        options = prov.vision_model_options() if args.vision else prov.model_options(model_type=args.model_type)
    except ProviderError as e:
        return _fail({"error": e.message, "code": e.code.value})
    if args.json:
        print(json.dumps(options, indent=2, ensure_ascii=False))
        return 0
    for opt in options:
        print(f"{opt['value']:<32} {opt['name']}")
    return 0


def image_message(prompt: str, path: Path) -> Dict[str, Any]:
    """Build a user message with the prompt and ``path`` as a data URL part."""
    mime = mimetypes.guess_type(path.name)[0] or "image/png"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": {"url": f"data:{mime};base64,{encoded}"}},
        ],
    }


def build_chat_item(args: argparse.Namespace, default_model: str) -> Dict[str, Any]:
    messages: List[Dict[str, Any]]
    if args.image:
        messages = [image_message(args.prompt, Path(args.image))]
    else:
        messages = [{"role": "user", "content": args.prompt}]
    options: Dict[str, Any] = {}
    if args.fallback_model:
        options |= {"enableVisionFallback": True, "visionFallbackModel": args.fallback_model}
    if args.max_tokens is not None:
        options["maxTokens"] = args.max_tokens
    if args.temperature is not None:
        options["temperature"] = args.temperature
    return {
        "model": args.model or default_model,
        "messagesInputMode": "json",
        "messagesJson": messages,
        "advancedOptions": options,
    }


def handle_chat(args: argparse.Namespace, provider: Optional[CopilotChatProvider] = None) -> int:
    """Send one prompt and print the assistant text (or the full object)."""
    prov = _provider_or_none(provider)
    if prov is None:
        return _missing_token()
    try:
        item = build_chat_item(args, prov.default_model())
    except OSError as e:
        return _fail({"error": f"cannot read image: {e}"})
    try:
        result = prov.execute([item])[0]
    except ProviderError as e:
        return _fail({"error": e.message, "code": e.code.value, "model": e.model})
    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0
    choices = result.get("choices") or []
    content = choices[0]["message"].get("content") if choices else None
    print(content or "")
    return 0


def _show_code(code: DeviceCodeResponse) -> None:
    print(f"Open {code.verification_uri} and enter code {code.user_code}", file=sys.stderr)


def handle_login(
    args: argparse.Namespace,
    flow: Callable[..., str] = run_device_flow,
) -> int:
    """Run the device flow and print an ``export`` line for the new token."""
    try:
        token = flow(on_code=_show_code)
    except ProviderError as e:
        return _fail({"error": e.message, "code": e.code.value})
    log_event(_logger, "cli.login", status="authorized")
    print(f"export COPILOT_OAUTH_TOKEN={token}")
    return 0


__all__ = ["handle_models", "handle_chat", "handle_login", "build_chat_item", "image_message"]
