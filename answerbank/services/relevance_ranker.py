"""
Relevance ranking of prepared responses against a job posting.

Skill extraction is a plain keyword match against a configurable vocabulary;
a response's relevance is the number of its tags that overlap an extracted
skill.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence
from answerbank.config import DEFAULT_SKILL_KEYWORDS
from answerbank.database.models import Response
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RankedMatch:
    response: Response
    relevance_score: int


class RelevanceRanker:
    """Scores and orders a user's responses for a job description."""

    def __init__(self, skill_keywords: Optional[Sequence[str]] = None, limit: int = 5):
        keywords = skill_keywords if skill_keywords is not None else DEFAULT_SKILL_KEYWORDS.split(",")
        self.skill_keywords = [keyword.strip().lower() for keyword in keywords if keyword.strip()]
        self.limit = limit

    def extract_skills(self, job_description: Optional[str]) -> List[str]:
        """Vocabulary entries that appear in the description, case-insensitively."""
        if not job_description:
            return []
        description = job_description.lower()
        return [skill for skill in self.skill_keywords if skill in description]

    @staticmethod
    def match_count(response: Response, skills: Iterable[str]) -> int:
        """Number of tags overlapping any skill (substring either way)."""
        skills = list(skills)
        count = 0
        for tag in response.tags:
            value = (tag.tag_value or "").lower()
            if not value:
                continue
            if any(value in skill or skill in value for skill in skills):
                count += 1
        return count

    def rank(self, skills: Sequence[str], responses: Iterable[Response]) -> List[RankedMatch]:
        matches = []
        for response in responses:
            score = self.match_count(response, skills)
            if score > 0:
                matches.append(RankedMatch(response=response, relevance_score=score))

        # sorted() is stable, so equal keys keep their input order
        matches = sorted(
            matches,
            key=lambda match: (match.relevance_score, match.response.success_rate or 0),
            reverse=True,
        )
        return matches[: self.limit]

    def suggest_for_job(self, job_description: Optional[str], responses: Iterable[Response]) -> List[RankedMatch]:
        """Top responses for a job description, best match first."""
        skills = self.extract_skills(job_description)
        if not skills:
            logger.info("No known skills found in job description")
            return []
        ranked = self.rank(skills, responses)
        logger.info(f"Ranked {len(ranked)} responses against skills {skills}")
        return ranked
