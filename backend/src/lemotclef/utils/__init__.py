"""Utilitaires transverses (sortie LLM)."""

from .llm_json import LLMOutputError, strip_markdown_fences, extract_json_block, parse_llm_json

__all__ = ["LLMOutputError", "strip_markdown_fences", "extract_json_block", "parse_llm_json"]
