from pydantic import BaseModel, Field, validator
from typing import List, Optional, Dict, Any, Literal
from datetime import datetime
from uuid import UUID

QuestionType = Literal["behavioral", "technical", "situational"]
OutcomeValue = Literal["offer", "next_round", "rejected", "pending"]
InterviewerReaction = Literal["positive", "neutral", "negative"]


# Request Models
class TagInput(BaseModel):
    tag_type: str = Field(..., max_length=50, description="Kind of tag, e.g. skill, company, theme")
    tag_value: str = Field(..., max_length=255, description="Tag value")

    @validator('tag_type', 'tag_value')
    def strip_tag_fields(cls, v):
        return v.strip()


class CreateResponseRequest(BaseModel):
    # Emptiness is checked by VersionManager so it surfaces as a ValidationError
    question_text: str = Field(..., max_length=2000, description="The interview question")
    question_type: QuestionType
    question_category: Optional[str] = Field(None, max_length=100)
    current_response: str = Field(..., max_length=20000, description="The prepared answer text")
    is_favorite: bool = False
    tags: List[TagInput] = Field(default_factory=list)
    notes: Optional[str] = Field(None, description="Notes stored on the first version")


class UpdateResponseRequest(BaseModel):
    question_text: Optional[str] = Field(None, max_length=2000)
    question_type: Optional[QuestionType] = None
    question_category: Optional[str] = Field(None, max_length=100)
    current_response: Optional[str] = Field(None, max_length=20000)
    is_favorite: Optional[bool] = None
    notes: Optional[str] = Field(None, description="Notes stored on the new version, if one is created")


class AddTagsRequest(BaseModel):
    tags: List[TagInput] = Field(..., min_length=1)


class RemoveTagsRequest(BaseModel):
    tag_ids: List[UUID] = Field(..., min_length=1)


class RecordOutcomeRequest(BaseModel):
    job_id: Optional[UUID] = None
    interview_date: Optional[datetime] = None
    company: Optional[str] = Field(None, max_length=255)
    position: Optional[str] = Field(None, max_length=255)
    outcome: OutcomeValue
    interviewer_reaction: Optional[InterviewerReaction] = None
    notes: Optional[str] = None


class PracticeSessionRequest(BaseModel):
    practice_text: str = Field(..., max_length=20000)
    delivery_time: Optional[int] = Field(None, ge=0, description="Delivery time in seconds")


class ResponseFilters(BaseModel):
    question_type: Optional[QuestionType] = None
    question_category: Optional[str] = None
    is_favorite: Optional[bool] = None
    tags: Optional[List[str]] = None


# Feedback Models
class StarAnalysis(BaseModel):
    situation: bool = False
    task: bool = False
    action: bool = False
    result: bool = False


class ResponseFeedback(BaseModel):
    clarity_score: float = Field(..., ge=0, le=10)
    star_method_score: float = Field(..., ge=0, le=10)
    structure_score: float = Field(..., ge=0, le=10)
    content_score: float = Field(..., ge=0, le=10)
    overall_score: float = Field(..., ge=0, le=10)
    strengths: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    star_analysis: StarAnalysis = Field(default_factory=StarAnalysis)
    word_count: int = 0
    estimated_duration_seconds: int = 0
    is_fallback: bool = Field(False, description="True when the feedback service was unavailable")


class ScoreBreakdown(BaseModel):
    clarity: float = Field(..., ge=0, le=10)
    structure: float = Field(..., ge=0, le=10)
    content: float = Field(..., ge=0, le=10)
    delivery: float = Field(..., ge=0, le=10)


class PracticeFeedback(BaseModel):
    score: float = Field(..., ge=0, le=10)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    score_breakdown: ScoreBreakdown
    comparison_note: str = ""
    is_fallback: bool = False


class StarValidation(BaseModel):
    follows_star: bool = False
    missing_components: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    is_fallback: bool = False


# Database response models
class TagResponse(BaseModel):
    id: UUID
    tag_type: str
    tag_value: str

    class Config:
        from_attributes = True


class VersionResponse(BaseModel):
    id: UUID
    response_id: UUID
    version_number: int
    response_text: str
    ai_feedback: Optional[Dict[str, Any]] = None
    word_count: int
    estimated_duration: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ResponseSummary(BaseModel):
    id: UUID
    question_text: str
    question_type: str
    question_category: Optional[str] = None
    current_response: str
    current_version_id: Optional[UUID] = None
    is_favorite: bool
    practice_count: int
    success_count: int
    total_uses: int
    success_rate: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tags: List[TagResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


class ResponseDetail(ResponseSummary):
    versions: List[VersionResponse] = Field(default_factory=list)


class RankedResponse(ResponseSummary):
    relevance_score: int


class OutcomeResponse(BaseModel):
    id: UUID
    response_id: UUID
    job_id: Optional[UUID] = None
    interview_date: Optional[datetime] = None
    company: Optional[str] = None
    position: Optional[str] = None
    outcome: str
    interviewer_reaction: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PracticeSessionResponse(BaseModel):
    id: UUID
    response_id: UUID
    practice_text: str
    delivery_time: Optional[int] = None
    ai_score: float
    ai_feedback: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PracticeSessionResult(PracticeSessionResponse):
    comparison_to_original: str


class SuccessMetricsResponse(BaseModel):
    response_id: UUID
    total_uses: int
    success_count: int
    success_rate: float
    practice_count: int
    outcomes: List[OutcomeResponse]
    recent_practices: List[PracticeSessionResponse]


class GapDetails(BaseModel):
    missing_types: List[str]
    missing_categories: List[str]
    underrepresented_categories: List[str]


class GapReport(BaseModel):
    total_responses: int
    by_type: Dict[str, int]
    by_category: Dict[str, int]
    gaps: GapDetails
    suggestions: List[str]


class PrepGuide(BaseModel):
    title: str
    generated_at: datetime
    total_responses: int
    responses_by_type: Dict[str, List[ResponseSummary]]


class JobSuggestionsResponse(BaseModel):
    job_id: UUID
    question: Optional[str] = None
    extracted_skills: List[str]
    suggestions: List[RankedResponse]


class ImprovementsResponse(BaseModel):
    response_id: UUID
    suggestions: List[str]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
