"""
Coverage analysis of a user's response library.
"""
from typing import Dict, Iterable, List, Optional, Sequence
from answerbank.config import DEFAULT_REFERENCE_CATEGORIES
from answerbank.database.models import QUESTION_TYPES, Response
from answerbank.models.schemas import GapDetails, GapReport
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)

COVERAGE_ADEQUATE_MESSAGE = "Your response library covers the main question types and categories!"


class GapAnalyzer:
    """Reports question types and reference categories the library lacks."""

    def __init__(self, reference_categories: Optional[Sequence[str]] = None):
        categories = (
            reference_categories
            if reference_categories is not None
            else DEFAULT_REFERENCE_CATEGORIES.split(",")
        )
        self.reference_categories = [category.strip() for category in categories if category.strip()]

    def identify_gaps(self, responses: Iterable[Response]) -> GapReport:
        responses = list(responses)

        by_type: Dict[str, int] = {question_type: 0 for question_type in QUESTION_TYPES}
        by_category: Dict[str, int] = {}
        for response in responses:
            by_type[response.question_type] = by_type.get(response.question_type, 0) + 1
            if response.question_category:
                by_category[response.question_category] = by_category.get(response.question_category, 0) + 1

        missing_types = [question_type for question_type in QUESTION_TYPES if by_type[question_type] == 0]
        missing_categories = [c for c in self.reference_categories if by_category.get(c, 0) == 0]
        underrepresented = [c for c in self.reference_categories if by_category.get(c, 0) == 1]

        report = GapReport(
            total_responses=len(responses),
            by_type=by_type,
            by_category=by_category,
            gaps=GapDetails(
                missing_types=missing_types,
                missing_categories=missing_categories,
                underrepresented_categories=underrepresented,
            ),
            suggestions=self._suggestions(missing_types, missing_categories),
        )
        logger.info(
            f"Gap analysis over {report.total_responses} responses: "
            f"{len(missing_types)} missing types, {len(missing_categories)} missing categories"
        )
        return report

    @staticmethod
    def _suggestions(missing_types: List[str], missing_categories: List[str]) -> List[str]:
        suggestions = []
        if missing_types:
            suggestions.append(f"Add {', '.join(missing_types)} question responses to your library")
        if missing_categories:
            suggestions.append(f"Prepare responses for: {', '.join(missing_categories[:3])}")
        if not suggestions:
            suggestions.append(COVERAGE_ADEQUATE_MESSAGE)
        return suggestions
