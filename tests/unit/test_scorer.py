"""
Unit tests for analyze() — weights, overrides, status precedence and the
invariants every MatchResult must satisfy.
"""

from decimal import Decimal

import pytest

from eligibility.models import (
    AnalysisStatus,
    CompanyPolicy,
    EligibilityStatus,
    NegativeKeyword,
    TenderText,
)
from eligibility.scorer import analyze

SCENARIO_B = TenderText(
    title="Hiring of Agency for Development of Software Application",
    eligibility_criteria="AMC required; turnover criteria: Rs. 2 Crore; MSME exempted",
)

SCENARIO_C = TenderText(
    title="Development of software for district portal",
    eligibility_criteria="Bidder must have average annual turnover of Rs. 5 Crore required",
)


@pytest.fixture
def cyber_only():
    """A policy whose only tag category never matches the texts below."""
    return CompanyPolicy(project_types=frozenset({"Cybersecurity"}))


@pytest.mark.unit
class TestScenarios:

    def test_goods_supply_not_relevant(self, policy, negative_keywords):
        result = analyze(TenderText(title="Supply of Laptops for Office Use"), policy, negative_keywords)

        assert result.eligibility_status == EligibilityStatus.NOT_RELEVANT
        assert result.analysis_status == AnalysisStatus.ANALYZED
        assert result.not_relevant_keyword == "laptop"
        assert result.match_percentage == 0
        assert result.tags == ()

    def test_exempted_software_agency_eligible(self, policy):
        result = analyze(SCENARIO_B, policy, [])

        assert result.eligibility_status == EligibilityStatus.ELIGIBLE
        assert result.match_percentage == 100
        assert result.is_msme_exempted is True
        assert result.is_startup_exempted is False
        assert result.turnover_required_lakhs == Decimal("200")
        assert result.turnover_met is True
        assert "Software" in result.tags

    def test_turnover_shortfall_not_eligible(self, policy):
        result = analyze(SCENARIO_C, policy, [])

        assert result.turnover_required_lakhs == Decimal("500")
        assert result.turnover_met is False
        assert result.eligibility_status == EligibilityStatus.NOT_ELIGIBLE
        assert result.analysis_status == AnalysisStatus.NOT_ELIGIBLE
        assert result.match_percentage == 40


@pytest.mark.unit
class TestWeights:

    def test_partial_project_type_credit(self, cyber_only):
        result = analyze(TenderText(title="Upgrade of computer lab"), cyber_only)
        # 40 (no requirement) + 15 (generic IT) + 20 (no hard negative)
        assert result.match_percentage == 75
        assert result.eligibility_status == EligibilityStatus.ELIGIBLE

    def test_generic_it_words_match_as_substrings(self, cyber_only):
        # "kitchen items" contains "it"
        result = analyze(TenderText(title="Annual contract for kitchen items"), cyber_only)
        assert result.match_percentage == 75

    def test_nothing_in_domain(self, policy):
        result = analyze(TenderText(title="Housekeeping services for guest house"), policy)
        assert result.tags == ()
        assert result.match_percentage == 60

    def test_hard_negative_word(self, policy):
        result = analyze(TenderText(title="Construction of boundary wall"), policy)
        assert result.match_percentage == 40
        assert result.eligibility_status == EligibilityStatus.ELIGIBLE

    def test_hard_negative_blocks_forced_score(self, policy):
        result = analyze(TenderText(title="Development of software for civil engineering wing"), policy)
        # 40 + 30 + 0, no override because of "civil"
        assert result.match_percentage == 70


@pytest.mark.unit
class TestOverrides:

    def test_exemption_with_tag_forces_full_score(self, policy):
        text = TenderText(
            title="Development of mobile app",
            eligibility_criteria="Turnover of Rs 10 Crore. Startups are exempted.",
        )
        result = analyze(text, policy)
        assert result.is_startup_exempted is True
        assert result.turnover_required_lakhs == Decimal("1000")
        assert result.turnover_met is True
        assert result.match_percentage == 100

    def test_core_service_forces_full_score_without_tags(self, cyber_only):
        result = analyze(TenderText(title="Implementation of ERP software"), cyber_only)
        assert result.tags == ()
        assert result.match_percentage == 100

    def test_core_domain_keyword_forces_full_score(self, cyber_only):
        result = analyze(TenderText(title="Data entry operators for district office"), cyber_only)
        assert result.tags == ()
        assert result.match_percentage == 100

    def test_core_domain_keyword_still_capped_on_shortfall(self, cyber_only):
        text = TenderText(
            title="Data entry operators for district office",
            eligibility_criteria="Minimum turnover Rs. 9 Crore",
        )
        result = analyze(text, cyber_only)
        assert result.eligibility_status == EligibilityStatus.NOT_ELIGIBLE
        assert result.match_percentage <= 40

    def test_similar_category_core_service(self, cyber_only):
        text = TenderText(title="Annual rate contract for operators")
        assert analyze(text, cyber_only).match_percentage == 60
        assert analyze(text, cyber_only, similar_category="Manpower Outsourcing").match_percentage == 100

    def test_similar_category_defaults_to_tender_field(self, cyber_only):
        text = TenderText(title="Annual rate contract for operators", similar_category="IT/ITES")
        assert analyze(text, cyber_only).match_percentage == 100

    def test_incidental_negative_keyword_ignored(self, policy, negative_keywords):
        text = TenderText(title="Development and AMC of Software including printer support")
        result = analyze(text, policy, negative_keywords)
        assert result.eligibility_status == EligibilityStatus.ELIGIBLE
        assert result.not_relevant_keyword is None
        assert result.match_percentage == 100


@pytest.mark.unit
class TestInvariants:

    @pytest.mark.parametrize("text", [
        TenderText(),
        TenderText(title="   ", eligibility_criteria="\n", checklist=None),
    ])
    def test_blank_input_manual_review(self, text, policy, negative_keywords):
        result = analyze(text, policy, negative_keywords, excel_msme_exemption=True)
        assert result.eligibility_status == EligibilityStatus.MANUAL_REVIEW
        assert result.analysis_status == AnalysisStatus.UNABLE_TO_ANALYZE
        assert result.match_percentage == 0
        assert result.is_msme_exempted is True

    def test_determinism(self, policy, negative_keywords):
        first = analyze(SCENARIO_B, policy, negative_keywords)
        again = [analyze(SCENARIO_B, policy, negative_keywords) for _ in range(5)]
        assert all(r == first for r in again)

    @pytest.mark.parametrize("text", [
        SCENARIO_B,
        SCENARIO_C,
        TenderText(title="Supply of Laptops for Office Use"),
        TenderText(title="Construction of boundary wall", eligibility_criteria="Turnover Rs. 9 Crore"),
        TenderText(title="Housekeeping services"),
    ])
    def test_msme_flag_never_lowers_score(self, text, policy, negative_keywords):
        without = analyze(text, policy, negative_keywords)
        with_flag = analyze(text, policy, negative_keywords, excel_msme_exemption=True)
        assert with_flag.match_percentage >= without.match_percentage

    def test_turnover_cap(self, small_company):
        text = TenderText(
            title="Development of software",
            eligibility_criteria="Minimum turnover Rs. 1 Crore",
        )
        result = analyze(text, small_company)
        assert result.turnover_met is False
        assert result.match_percentage <= 40
        assert result.eligibility_status == EligibilityStatus.NOT_ELIGIBLE

    @pytest.mark.parametrize("text", [
        SCENARIO_B,
        SCENARIO_C,
        TenderText(title="Supply of Laptops for Office Use"),
        TenderText(title="Annual rate contract", checklist="furniture"),
    ])
    def test_not_relevant_iff_keyword(self, text, policy, negative_keywords):
        result = analyze(text, policy, negative_keywords)
        is_not_relevant = result.eligibility_status == EligibilityStatus.NOT_RELEVANT
        assert is_not_relevant == (result.not_relevant_keyword is not None)
        if is_not_relevant:
            assert result.match_percentage == 0

    def test_as_dict(self, policy):
        data = analyze(SCENARIO_B, policy).as_dict()
        assert data["eligibility_status"] == "eligible"
        assert data["turnover_required_lakhs"] == "200"
        assert isinstance(data["tags"], list)

    def test_negative_keyword_case_preserved(self, policy):
        result = analyze(TenderText(title="Purchase of Furniture"), policy, [NegativeKeyword("Furniture")])
        assert result.not_relevant_keyword == "Furniture"
