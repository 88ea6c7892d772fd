"""GitHub Copilot provider.

Exports the chat provider plus the model listing, vision and device-flow
helpers it is composed from.
"""

from .auth import DeviceCodeResponse, poll_access_token, request_device_code, run_device_flow
from .client import CopilotChatProvider
from .get_copilot_models import fetch_models_via_http, make_models_fetcher
from .model_options import models_to_options, vision_model_options
from .vision import VisionFallbackResolver, requires_vision

__all__ = [
    "CopilotChatProvider",
    "DeviceCodeResponse",
    "request_device_code",
    "poll_access_token",
    "run_device_flow",
    "fetch_models_via_http",
    "make_models_fetcher",
    "models_to_options",
    "vision_model_options",
    "VisionFallbackResolver",
    "requires_vision",
]
