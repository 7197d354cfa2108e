"""Unit tests for profile loading and policy validation."""

from decimal import Decimal

import pytest
import yaml

import config
from eligibility.models import CompanyPolicy, NegativeKeyword, PolicyError, load_negative_keywords


@pytest.mark.unit
class TestCompanyPolicy:

    def test_from_mapping(self):
        policy = CompanyPolicy.from_mapping({"turnover_lakhs": "1,250.5", "project_types": ["Software"]})
        assert policy.turnover_lakhs == Decimal("1250.5")
        assert policy.project_types == frozenset({"Software"})

    def test_defaults(self):
        policy = CompanyPolicy.from_mapping({})
        assert policy.turnover_lakhs == Decimal("400")
        assert "Manpower Deployment" in policy.project_types

    @pytest.mark.parametrize("turnover", ["four crore", -5, True, "NaN"])
    def test_bad_turnover_fails_fast(self, turnover):
        with pytest.raises(PolicyError):
            CompanyPolicy.from_mapping({"turnover_lakhs": turnover})

    def test_unknown_project_type(self):
        with pytest.raises(PolicyError, match="Unknown project type"):
            CompanyPolicy.from_mapping({"project_types": ["Software", "Bridges"]})

    def test_project_types_must_be_a_list(self):
        with pytest.raises(PolicyError):
            CompanyPolicy.from_mapping({"project_types": "Software"})


@pytest.mark.unit
class TestNegativeKeywords:

    def test_accepted_shapes(self):
        assert load_negative_keywords(["laptop"]) == [NegativeKeyword("laptop")]
        assert load_negative_keywords([{"keyword": " printer ", "description": "hw"}]) == [
            NegativeKeyword("printer", "hw"),
        ]
        assert load_negative_keywords({"ups": "power"}) == [NegativeKeyword("ups", "power")]
        assert load_negative_keywords(None) == []

    @pytest.mark.parametrize("entry", ["  ", {"description": "no keyword"}, 42])
    def test_bad_entries(self, entry):
        with pytest.raises(PolicyError):
            load_negative_keywords([entry])


@pytest.mark.unit
class TestProfile:

    def test_load_profile(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text(yaml.safe_dump({
            "company_name": "Acme Infotech",
            "turnover_lakhs": 250,
            "project_types": ["Software", "Website"],
            "negative_keywords": [{"keyword": "laptop"}],
            "minimum_match_score": 60,
        }), encoding="utf-8")

        profile = config.load_profile(str(path))

        assert profile.company_name == "Acme Infotech"
        assert profile.policy.turnover_lakhs == Decimal("250")
        assert profile.negative_keywords == [NegativeKeyword("laptop")]
        assert profile.minimum_match_score == 60
        assert profile.output_dir == "reports"

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        profile = config.load_profile(str(path))
        assert profile.policy == CompanyPolicy()

    @pytest.mark.parametrize("data", [
        {"minimum_match_score": "high"},
        {"minimum_match_score": 140},
        {"turnover_lakhs": "abc"},
        ["not", "a", "mapping"],
    ])
    def test_invalid_profiles(self, data):
        with pytest.raises(PolicyError):
            config.parse_profile(data)

    def test_shipped_profile_is_valid(self):
        assert config.COMPANY_POLICY.turnover_lakhs == Decimal("400")
        assert any(kw.keyword == "laptop" for kw in config.NEGATIVE_KEYWORDS)

    def test_malformed_yaml_is_policy_error(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("turnover_lakhs: [400\n", encoding="utf-8")
        with pytest.raises(PolicyError, match="not valid YAML"):
            config.load_profile(str(path))


@pytest.mark.unit
class TestStartupLoad:

    def test_invalid_setting_exits_2(self, tmp_path, capsys):
        path = tmp_path / "my_profile.yaml"
        path.write_text("turnover_lakhs: lots\n", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            config._load_or_exit(str(path))

        assert exc_info.value.code == 2
        assert "invalid setting" in capsys.readouterr().out

    def test_missing_file_exits_1(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            config._load_or_exit(str(tmp_path / "absent.yaml"))
        assert exc_info.value.code == 1

    def test_valid_file_loads(self, tmp_path):
        path = tmp_path / "my_profile.yaml"
        path.write_text("turnover_lakhs: 120\n", encoding="utf-8")
        assert config._load_or_exit(str(path)).policy.turnover_lakhs == Decimal("120")
