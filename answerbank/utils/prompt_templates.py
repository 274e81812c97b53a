"""
Centralized prompt templates for the feedback service.
"""

from typing import List, Optional

JSON_ONLY_INSTRUCTION = (
    "\n\nIMPORTANT: Respond with ONLY valid JSON, no markdown, no explanations, no code blocks."
)


class PromptTemplates:
    """Prompt builders for every feedback operation."""

    @staticmethod
    def get_analysis_prompt(text: str, question_type: str) -> str:
        """Prompt for scoring a prepared response."""
        return f"""Analyze this {question_type} interview response and provide detailed feedback:

Response: "{text}"

Provide your analysis as a JSON object with:
1. clarity_score (0-10): How clear and understandable is the response?
2. star_method_score (0-10): How well does it follow the STAR method (Situation, Task, Action, Result)?
3. structure_score (0-10): How well-organized is the response?
4. content_score (0-10): How compelling and relevant is the content?
5. overall_score (0-10): Overall quality
6. strengths: Array of 2-3 specific strengths
7. suggestions: Array of 2-3 specific improvement suggestions
8. star_analysis: Object with boolean values for situation, task, action, result indicating if each component is present"""

    @staticmethod
    def get_practice_comparison_prompt(original_text: str, practice_text: str, question_type: str) -> str:
        """Prompt for comparing a practice attempt to the prepared response."""
        return f"""Compare this practice attempt to the original prepared response for a {question_type} interview question.

Original prepared response:
"{original_text}"

Practice attempt:
"{practice_text}"

Provide feedback as a JSON object with:
1. score (0-10): Overall quality of the practice attempt
2. strengths: Array of 2-3 things done well
3. improvements: Array of 2-3 areas to improve
4. score_breakdown: Object with clarity, structure, content, delivery, each 0-10
5. comparison_note: Brief statement comparing the practice attempt to the original"""

    @staticmethod
    def get_star_validation_prompt(text: str) -> str:
        """Prompt for checking STAR structure."""
        return f"""Analyze if this interview response follows the STAR (Situation, Task, Action, Result) method:

Response: "{text}"

Provide your analysis as a JSON object with:
1. follows_star (boolean): Does it follow the STAR method?
2. missing_components: Array of missing STAR components (empty if complete)
3. suggestions: Array of 2-3 suggestions to improve the STAR structure"""

    @staticmethod
    def get_improvements_prompt(text: str, question_type: str, tags: Optional[List[str]] = None) -> str:
        """Prompt for free-form improvement suggestions."""
        tags_context = f"\nRelevant skills/context: {', '.join(tags)}" if tags else ""
        return f"""Suggest 3-5 specific improvements for this {question_type} interview response:{tags_context}

Response: "{text}"

Provide actionable suggestions as a JSON array of strings. Focus on:
- Making the response more compelling
- Adding specific metrics or results
- Improving structure and clarity
- Highlighting relevant skills/achievements"""

    @staticmethod
    def with_json_instruction(prompt: str) -> str:
        return prompt + JSON_ONLY_INSTRUCTION
