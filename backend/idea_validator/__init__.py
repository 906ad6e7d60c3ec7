"""Idea validation backend: score business ideas with an LLM, save and export reports."""

__version__ = "0.1.0"
