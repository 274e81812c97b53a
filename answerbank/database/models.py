"""
SQLAlchemy models for the response library schema.
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Float, ForeignKey, Index, UniqueConstraint, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship, declarative_base
from sqlalchemy.sql import func
import uuid

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

QUESTION_TYPES = ("behavioral", "technical", "situational")
OUTCOME_VALUES = ("offer", "next_round", "rejected", "pending")
INTERVIEWER_REACTIONS = ("positive", "neutral", "negative")


class Response(Base):
    """A prepared answer to an interview question; its text mirrors the current version."""
    __tablename__ = "responses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    question_text = Column(Text, nullable=False)
    question_type = Column(String(20), nullable=False, index=True)  # behavioral, technical, situational
    question_category = Column(String(100), nullable=True, index=True)
    current_response = Column(Text, nullable=False)
    # Id of a row in response_versions; kept in sync with current_response by VersionManager
    current_version_id = Column(Uuid, nullable=True)
    is_favorite = Column(Boolean, default=False, nullable=False)
    practice_count = Column(Integer, default=0, nullable=False)
    success_count = Column(Integer, default=0, nullable=False)
    total_uses = Column(Integer, default=0, nullable=False)
    success_rate = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    versions = relationship(
        "ResponseVersion",
        back_populates="response",
        cascade="all, delete-orphan",
        order_by="ResponseVersion.version_number.desc()",
    )
    tags = relationship("ResponseTag", back_populates="response", cascade="all, delete-orphan")
    outcomes = relationship("ResponseOutcome", back_populates="response", cascade="all, delete-orphan")
    practice_sessions = relationship("PracticeSession", back_populates="response", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Response(id={self.id}, user_id={self.user_id}, question_type={self.question_type})>"


class ResponseVersion(Base):
    """Immutable snapshot of a response's text; numbers are unique and increasing per response."""
    __tablename__ = "response_versions"
    __table_args__ = (
        UniqueConstraint("response_id", "version_number", name="uq_response_versions_response_number"),
        Index("idx_response_versions_response_number", "response_id", "version_number"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    response_id = Column(Uuid, ForeignKey("responses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    version_number = Column(Integer, nullable=False)
    response_text = Column(Text, nullable=False)
    ai_feedback = Column(JSONType, nullable=True)
    word_count = Column(Integer, default=0, nullable=False)
    estimated_duration = Column(Integer, default=0, nullable=False)  # seconds
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    response = relationship("Response", back_populates="versions")

    def __repr__(self):
        return f"<ResponseVersion(id={self.id}, response_id={self.response_id}, version_number={self.version_number})>"


class ResponseTag(Base):
    """Free-form tag attached to a response (skill, company, theme...)."""
    __tablename__ = "response_tags"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    response_id = Column(Uuid, ForeignKey("responses.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_type = Column(String(50), nullable=False)
    tag_value = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    response = relationship("Response", back_populates="tags")

    def __repr__(self):
        return f"<ResponseTag(id={self.id}, {self.tag_type}={self.tag_value})>"


class ResponseOutcome(Base):
    """Result of an interview in which a response was used."""
    __tablename__ = "response_outcomes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    response_id = Column(Uuid, ForeignKey("responses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    job_id = Column(Uuid, nullable=True)
    interview_date = Column(DateTime(timezone=True), nullable=True)
    company = Column(String(255), nullable=True)
    position = Column(String(255), nullable=True)
    outcome = Column(String(20), nullable=False)  # offer, next_round, rejected, pending
    interviewer_reaction = Column(String(20), nullable=True)  # positive, neutral, negative
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    response = relationship("Response", back_populates="outcomes")

    def __repr__(self):
        return f"<ResponseOutcome(id={self.id}, response_id={self.response_id}, outcome={self.outcome})>"


class PracticeSession(Base):
    """A rehearsal of a response, scored against the prepared text."""
    __tablename__ = "response_practice_sessions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    response_id = Column(Uuid, ForeignKey("responses.id", ondelete="CASCADE"), nullable=False, index=True)
    practice_text = Column(Text, nullable=False)
    delivery_time = Column(Integer, nullable=True)  # seconds
    ai_score = Column(Float, nullable=False)
    ai_feedback = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    response = relationship("Response", back_populates="practice_sessions")

    def __repr__(self):
        return f"<PracticeSession(id={self.id}, response_id={self.response_id}, ai_score={self.ai_score})>"


class Job(Base):
    """Job posting owned by the job tracker; read here for relevance suggestions."""
    __tablename__ = "jobs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Job(id={self.id}, title={self.title}, company={self.company})>"
