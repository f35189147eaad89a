"""LLM backend clients and dispatch."""
