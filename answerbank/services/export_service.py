"""
Export of the response library as an interview preparation guide.
"""
from collections import defaultdict
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from answerbank.models.schemas import PrepGuide, ResponseFilters, ResponseSummary
from answerbank.services.response_repository import ResponseRepository, utcnow
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)

PREP_GUIDE_TITLE = "Interview Preparation Guide"


class ExportService:
    def __init__(self, db: Session):
        self.repository = ResponseRepository(db)

    def export_prep_guide(self, user_id: str, filters: Optional[ResponseFilters] = None) -> PrepGuide:
        """Group the filtered library by question type. Read-only."""
        responses = self.repository.list_responses(user_id, filters)

        grouped: Dict[str, List[ResponseSummary]] = defaultdict(list)
        for response in responses:
            grouped[response.question_type].append(ResponseSummary.model_validate(response))

        logger.info(f"Exported prep guide with {len(responses)} responses for user {user_id}")
        return PrepGuide(
            title=PREP_GUIDE_TITLE,
            generated_at=utcnow(),
            total_responses=len(responses),
            responses_by_type=dict(grouped),
        )
