"""Tests for Gemini-backed skill inference."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from taskboard.services.llm_service import (
    DEFAULT_SKILLS,
    FALLBACK_SKILLS,
    GeminiSkillIdentifier,
    build_prompt,
    parse_skills,
)


def identifier_answering(text):
    model = Mock()
    model.generate_content_async = AsyncMock(return_value=SimpleNamespace(text=text))
    return GeminiSkillIdentifier(model=model), model


class TestParseSkills:
    def test_plain_array(self):
        assert parse_skills('["Frontend", "Backend"]') == ["Frontend", "Backend"]

    def test_array_inside_code_fence(self):
        text = '```json\n["Frontend"]\n```'
        assert parse_skills(text) == ["Frontend"]

    def test_array_spanning_lines(self):
        assert parse_skills('[\n  "Backend"\n]') == ["Backend"]

    def test_no_array_defaults_to_backend(self):
        assert parse_skills("Backend work, mostly.") == DEFAULT_SKILLS

    def test_empty_answer_raises(self):
        with pytest.raises(ValueError):
            parse_skills("")

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_skills("[Frontend, Backend]")


class TestGeminiSkillIdentifier:
    def test_prompt_carries_title_and_vocabulary(self):
        prompt = build_prompt("Build login page")
        assert '"Build login page"' in prompt
        assert "[Frontend, Backend or Both]" in prompt

    def test_returns_parsed_skills(self):
        identifier, model = identifier_answering('["Frontend", "Backend"]')

        skills = asyncio.run(identifier.identify("Build login page"))

        assert skills == ["Frontend", "Backend"]
        model.generate_content_async.assert_awaited_once_with(build_prompt("Build login page"))

    def test_api_error_returns_fallback(self):
        model = Mock()
        model.generate_content_async = AsyncMock(side_effect=RuntimeError("quota exceeded"))
        identifier = GeminiSkillIdentifier(model=model)

        assert asyncio.run(identifier.identify("Anything")) == FALLBACK_SKILLS

    def test_empty_response_returns_fallback(self):
        identifier, _ = identifier_answering("")

        assert asyncio.run(identifier.identify("Anything")) == FALLBACK_SKILLS

    def test_garbled_json_returns_fallback(self):
        identifier, _ = identifier_answering('["Frontend",]')

        assert asyncio.run(identifier.identify("Anything")) == FALLBACK_SKILLS
