"""Remote LLM access for SnipStack."""

from snipstack.llm.client import RemoteError, complete, complete_json, validate_api_key

__all__ = ["RemoteError", "complete", "complete_json", "validate_api_key"]
