"""
Unit tests for RelevanceRanker.
"""
import pytest

from answerbank.services.relevance_ranker import RelevanceRanker


class TestExtractSkills:
    """Test cases for skill extraction."""

    @pytest.mark.unit
    def test_case_insensitive_substring_match(self):
        ranker = RelevanceRanker()

        skills = ranker.extract_skills("Python and SQL experience required. Kubernetes a plus; CI/CD pipelines.")

        assert skills == ["python", "kubernetes", "sql", "ci/cd"]

    @pytest.mark.unit
    def test_vocabulary_is_injectable(self):
        ranker = RelevanceRanker(skill_keywords=["Rust", "go"])

        assert ranker.extract_skills("We write Rust and Go") == ["rust", "go"]

    @pytest.mark.unit
    @pytest.mark.parametrize("description", [None, ""])
    def test_empty_description(self, description):
        assert RelevanceRanker().extract_skills(description) == []


class TestRanking:
    """Test cases for suggest_for_job."""

    @pytest.mark.unit
    def test_doubly_tagged_response_ranks_first(self, make_response):
        single = make_response(tags=["python"])
        double = make_response(tags=["python", "sql"])

        ranked = RelevanceRanker().suggest_for_job("Python and SQL experience required", [single, double])

        assert [match.response for match in ranked] == [double, single]
        assert [match.relevance_score for match in ranked] == [2, 1]

    @pytest.mark.unit
    def test_tag_matches_in_either_direction(self, make_response):
        ranker = RelevanceRanker()
        # "react native" contains a skill; "java" is contained in one
        response = make_response(tags=["React Native", "java"])

        assert ranker.match_count(response, ["react", "javascript"]) == 2

    @pytest.mark.unit
    def test_unmatched_responses_are_dropped(self, make_response):
        matched = make_response(tags=["docker"])
        unmatched = make_response(tags=["cooking"])
        untagged = make_response()

        ranked = RelevanceRanker().suggest_for_job("Docker everywhere", [unmatched, matched, untagged])

        assert [match.response for match in ranked] == [matched]

    @pytest.mark.unit
    def test_ties_break_on_success_rate(self, make_response):
        low = make_response(tags=["aws"], success_rate=0.2)
        unknown = make_response(tags=["aws"], success_rate=None)
        high = make_response(tags=["aws"], success_rate=0.9)

        ranked = RelevanceRanker().suggest_for_job("AWS", [low, unknown, high])

        assert [match.response for match in ranked] == [high, low, unknown]

    @pytest.mark.unit
    def test_full_ties_keep_input_order(self, make_response):
        first = make_response(tags=["sql"], text="first")
        second = make_response(tags=["sql"], text="second")

        ranked = RelevanceRanker().suggest_for_job("SQL", [first, second])

        assert [match.response.current_response for match in ranked] == ["first", "second"]

    @pytest.mark.unit
    def test_limit(self, make_response):
        responses = [make_response(tags=["python"]) for _ in range(8)]

        assert len(RelevanceRanker().suggest_for_job("python", responses)) == 5
        assert len(RelevanceRanker(limit=3).suggest_for_job("python", responses)) == 3

    @pytest.mark.unit
    def test_no_skills_means_no_suggestions(self, make_response):
        assert RelevanceRanker().suggest_for_job("Barista wanted", [make_response(tags=["python"])]) == []
