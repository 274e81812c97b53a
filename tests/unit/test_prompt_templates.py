"""
Unit tests for PromptTemplates.
"""
import pytest

from answerbank.utils.prompt_templates import JSON_ONLY_INSTRUCTION, PromptTemplates


class TestPromptTemplates:
    """Test cases for the feedback prompt builders."""

    @pytest.mark.unit
    def test_analysis_prompt_includes_type_and_text(self):
        prompt = PromptTemplates.get_analysis_prompt("I shipped the release", "behavioral")

        assert "behavioral interview response" in prompt
        assert '"I shipped the release"' in prompt
        assert "star_analysis" in prompt

    @pytest.mark.unit
    def test_practice_prompt_includes_both_texts(self):
        prompt = PromptTemplates.get_practice_comparison_prompt("Prepared", "Attempt", "technical")

        assert '"Prepared"' in prompt
        assert '"Attempt"' in prompt
        assert "score_breakdown" in prompt

    @pytest.mark.unit
    def test_improvements_prompt_adds_tags_only_when_given(self):
        with_tags = PromptTemplates.get_improvements_prompt("Answer", "technical", ["python", "sql"])
        without_tags = PromptTemplates.get_improvements_prompt("Answer", "technical")

        assert "Relevant skills/context: python, sql" in with_tags
        assert "Relevant skills/context" not in without_tags

    @pytest.mark.unit
    def test_json_instruction_is_appended(self):
        prompt = PromptTemplates.with_json_instruction(PromptTemplates.get_star_validation_prompt("Answer"))

        assert prompt.endswith(JSON_ONLY_INSTRUCTION)
