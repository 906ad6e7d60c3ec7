"""Prompt catalog tests — lookup, enablement, prompt rendering."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import patch

import pytest

from idea_validator.agents.idea_validation.errors import UnknownToolError
from idea_validator.agents.idea_validation.prompts import (
    TOOL_CATALOG,
    build_prompt,
    enabled_tool_ids,
    lookup,
)

ALL_TOOLS = ["business-idea", "problem-solution", "target-audience", "competitor-analysis", "go-to-market"]


class TestCatalog:
    def test_catalog_order_and_metadata(self):
        assert list(TOOL_CATALOG) == ALL_TOOLS
        for tool_id, spec in TOOL_CATALOG.items():
            assert spec.id == tool_id
            assert spec.icon and spec.title and spec.prompt

    def test_all_enabled_by_default(self):
        with patch("idea_validator.agents.idea_validation.prompts.get_enabled_tools", return_value=None):
            assert enabled_tool_ids() == ALL_TOOLS

    def test_enabled_subset_keeps_catalog_order(self):
        assert enabled_tool_ids(["go-to-market", "business-idea", "nope"]) == ["business-idea", "go-to-market"]

    def test_env_restricts_tools(self):
        with patch.dict(os.environ, {"ENABLED_TOOLS": "business-idea, target-audience"}):
            assert enabled_tool_ids() == ["business-idea", "target-audience"]


class TestLookup:
    def test_known_tool(self):
        assert lookup("problem-solution", ALL_TOOLS).title == "Problem-Solution Fit"

    def test_unknown_tool(self):
        with pytest.raises(UnknownToolError) as exc_info:
            lookup("pricing", ALL_TOOLS)
        assert exc_info.value.tool_id == "pricing"

    def test_disabled_tool_is_unknown(self):
        with pytest.raises(UnknownToolError):
            lookup("competitor-analysis", ["business-idea"])


class TestBuildPrompt:
    def test_contains_idea_prompt_and_contract(self):
        prompt = build_prompt("go-to-market", "A subscription box for rare houseplants", ALL_TOOLS)
        assert prompt.startswith('Business Idea: "A subscription box for rare houseplants"')
        assert TOOL_CATALOG["go-to-market"].prompt in prompt
        assert '"score"' in prompt and '"details"' in prompt
        assert "valid JSON only" in prompt
