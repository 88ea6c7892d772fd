"""Provider-agnostic building blocks: errors, logging, HTTP, retry, models and the capability cache."""
