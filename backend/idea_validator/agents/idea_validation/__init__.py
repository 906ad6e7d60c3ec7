"""Idea validation agent: prompt catalog, retrying model calls, sequential orchestration."""
