"""linkedool - LinkedIn profile auditor backed by Ollama or OpenAI."""

__version__ = "0.3.0"
