from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from answerbank.dependencies import (
    get_export_service,
    get_feedback_generator,
    get_gap_analyzer,
    get_practice_coach,
    get_relevance_ranker,
    get_response_repository,
    get_tag_manager,
    get_version_manager,
)
from answerbank.middleware.auth_middleware import get_current_user_required
from answerbank.models.schemas import (
    AddTagsRequest,
    CreateResponseRequest,
    GapReport,
    ImprovementsResponse,
    JobSuggestionsResponse,
    MessageResponse,
    OutcomeResponse,
    PracticeSessionRequest,
    PracticeSessionResponse,
    PracticeSessionResult,
    PrepGuide,
    QuestionType,
    RankedResponse,
    RecordOutcomeRequest,
    RemoveTagsRequest,
    ResponseDetail,
    ResponseFilters,
    ResponseSummary,
    StarValidation,
    SuccessMetricsResponse,
    UpdateResponseRequest,
    VersionResponse,
)
from answerbank.services.export_service import ExportService
from answerbank.services.feedback_generator import FeedbackGenerator
from answerbank.services.gap_analyzer import GapAnalyzer
from answerbank.services.practice_coach import PracticeCoach
from answerbank.services.relevance_ranker import RelevanceRanker
from answerbank.services.response_repository import ResponseRepository, tag_values
from answerbank.services.tag_manager import TagManager
from answerbank.services.version_manager import VersionManager

router = APIRouter(prefix="/api/v1/responses", tags=["responses"])


def parse_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# Library-wide routes are declared before /{response_id} so they are matched first

@router.get("", response_model=List[ResponseSummary])
async def list_responses(
    current_user: dict = Depends(get_current_user_required),
    question_type: Optional[QuestionType] = Query(None, description="Filter by question type"),
    question_category: Optional[str] = Query(None, description="Filter by category"),
    is_favorite: Optional[bool] = Query(None, description="Only favorites (true) or non-favorites (false)"),
    tags: Optional[str] = Query(None, description="Comma-separated tag values; any match"),
    repository: ResponseRepository = Depends(get_response_repository),
):
    """List the caller's responses, most recently updated first."""
    filters = ResponseFilters(
        question_type=question_type,
        question_category=question_category,
        is_favorite=is_favorite,
        tags=parse_csv(tags) or None,
    )
    return repository.list_responses(current_user["id"], filters)


@router.get("/gaps", response_model=GapReport)
async def identify_gaps(
    current_user: dict = Depends(get_current_user_required),
    repository: ResponseRepository = Depends(get_response_repository),
    analyzer: GapAnalyzer = Depends(get_gap_analyzer),
):
    """Report missing and underrepresented question types and categories."""
    return analyzer.identify_gaps(repository.list_responses(current_user["id"]))


@router.get("/export", response_model=PrepGuide)
async def export_prep_guide(
    current_user: dict = Depends(get_current_user_required),
    question_type: Optional[QuestionType] = Query(None),
    tags: Optional[str] = Query(None, description="Comma-separated tag values; any match"),
    export_service: ExportService = Depends(get_export_service),
):
    """Export the library grouped by question type."""
    filters = ResponseFilters(question_type=question_type, tags=parse_csv(tags) or None)
    return export_service.export_prep_guide(current_user["id"], filters)


@router.get("/suggest", response_model=JobSuggestionsResponse)
async def suggest_responses(
    current_user: dict = Depends(get_current_user_required),
    job_id: Optional[str] = Query(None, description="Job to rank responses against"),
    question: Optional[str] = Query(None, description="Question being prepared for"),
    repository: ResponseRepository = Depends(get_response_repository),
    ranker: RelevanceRanker = Depends(get_relevance_ranker),
):
    """Suggest the caller's most relevant responses for a job posting."""
    if not job_id:
        raise HTTPException(status_code=400, detail="job_id is required")

    job = repository.get_job(current_user["id"], job_id)
    matches = ranker.suggest_for_job(job.description, repository.list_responses(current_user["id"]))

    return JobSuggestionsResponse(
        job_id=job.id,
        question=question,
        extracted_skills=ranker.extract_skills(job.description),
        suggestions=[
            RankedResponse(
                **ResponseSummary.model_validate(match.response).model_dump(),
                relevance_score=match.relevance_score,
            )
            for match in matches
        ],
    )


@router.get("/search/tags", response_model=List[ResponseSummary])
async def search_by_tags(
    current_user: dict = Depends(get_current_user_required),
    tags: Optional[str] = Query(None, description="Comma-separated tag values"),
    repository: ResponseRepository = Depends(get_response_repository),
):
    """Responses carrying any of the given tag values."""
    return repository.search_by_tags(current_user["id"], parse_csv(tags))


@router.post("", response_model=ResponseDetail, status_code=201)
async def create_response(
    request: CreateResponseRequest,
    current_user: dict = Depends(get_current_user_required),
    version_manager: VersionManager = Depends(get_version_manager),
):
    """Create a response with its first version."""
    return await version_manager.create(current_user["id"], request)


@router.get("/{response_id}", response_model=ResponseDetail)
async def get_response(
    response_id: str,
    current_user: dict = Depends(get_current_user_required),
    repository: ResponseRepository = Depends(get_response_repository),
):
    return repository.get_response(current_user["id"], response_id)


@router.put("/{response_id}", response_model=ResponseDetail)
async def update_response(
    response_id: str,
    request: UpdateResponseRequest,
    current_user: dict = Depends(get_current_user_required),
    version_manager: VersionManager = Depends(get_version_manager),
):
    """Update a response; a changed text creates a new version."""
    return await version_manager.update(current_user["id"], response_id, request)


@router.delete("/{response_id}", response_model=MessageResponse)
async def delete_response(
    response_id: str,
    current_user: dict = Depends(get_current_user_required),
    repository: ResponseRepository = Depends(get_response_repository),
):
    repository.delete_response(current_user["id"], response_id)
    return MessageResponse(message="Response deleted")


@router.get("/{response_id}/versions", response_model=List[VersionResponse])
async def get_version_history(
    response_id: str,
    current_user: dict = Depends(get_current_user_required),
    version_manager: VersionManager = Depends(get_version_manager),
):
    """All versions of a response, newest first."""
    return await version_manager.get_version_history(current_user["id"], response_id)


@router.post("/{response_id}/versions/{version_id}/restore", response_model=ResponseDetail)
async def restore_version(
    response_id: str,
    version_id: str,
    current_user: dict = Depends(get_current_user_required),
    version_manager: VersionManager = Depends(get_version_manager),
):
    """Make an earlier version current without creating a new one."""
    return await version_manager.restore_version(current_user["id"], response_id, version_id)


@router.post("/{response_id}/tags", response_model=ResponseDetail)
async def add_tags(
    response_id: str,
    request: AddTagsRequest,
    current_user: dict = Depends(get_current_user_required),
    tag_manager: TagManager = Depends(get_tag_manager),
):
    return tag_manager.add_tags(current_user["id"], response_id, request.tags)


@router.delete("/{response_id}/tags", response_model=ResponseDetail)
async def remove_tags(
    response_id: str,
    request: RemoveTagsRequest,
    current_user: dict = Depends(get_current_user_required),
    tag_manager: TagManager = Depends(get_tag_manager),
):
    return tag_manager.remove_tags(current_user["id"], response_id, request.tag_ids)


@router.post("/{response_id}/outcomes", response_model=OutcomeResponse, status_code=201)
async def record_outcome(
    response_id: str,
    request: RecordOutcomeRequest,
    current_user: dict = Depends(get_current_user_required),
    repository: ResponseRepository = Depends(get_response_repository),
):
    """Record how a response fared in an interview."""
    return repository.record_outcome(current_user["id"], response_id, request)


@router.get("/{response_id}/metrics", response_model=SuccessMetricsResponse)
async def get_success_metrics(
    response_id: str,
    current_user: dict = Depends(get_current_user_required),
    repository: ResponseRepository = Depends(get_response_repository),
):
    return repository.get_success_metrics(current_user["id"], response_id)


@router.get("/{response_id}/practice", response_model=List[PracticeSessionResponse])
async def list_practice_sessions(
    response_id: str,
    current_user: dict = Depends(get_current_user_required),
    coach: PracticeCoach = Depends(get_practice_coach),
):
    return await coach.list_practice_sessions(current_user["id"], response_id)


@router.post("/{response_id}/practice", response_model=PracticeSessionResult, status_code=201)
async def create_practice_session(
    response_id: str,
    request: PracticeSessionRequest,
    current_user: dict = Depends(get_current_user_required),
    coach: PracticeCoach = Depends(get_practice_coach),
):
    """Score a practice attempt against the current response text."""
    session, comparison = await coach.create_practice_session(current_user["id"], response_id, request)
    return PracticeSessionResult(
        **PracticeSessionResponse.model_validate(session).model_dump(),
        comparison_to_original=comparison,
    )


@router.post("/{response_id}/star-check", response_model=StarValidation)
async def validate_star_method(
    response_id: str,
    current_user: dict = Depends(get_current_user_required),
    repository: ResponseRepository = Depends(get_response_repository),
    feedback_generator: FeedbackGenerator = Depends(get_feedback_generator),
):
    """Check the current text for Situation, Task, Action and Result."""
    response = repository.get_response(current_user["id"], response_id)
    return await feedback_generator.validate_star_method(response.current_response)


@router.get("/{response_id}/improvements", response_model=ImprovementsResponse)
async def suggest_improvements(
    response_id: str,
    current_user: dict = Depends(get_current_user_required),
    repository: ResponseRepository = Depends(get_response_repository),
    feedback_generator: FeedbackGenerator = Depends(get_feedback_generator),
):
    response = repository.get_response(current_user["id"], response_id)
    suggestions = await feedback_generator.suggest_improvements(
        response.current_response, response.question_type, tag_values(response)
    )
    return ImprovementsResponse(response_id=response.id, suggestions=suggestions)
