"""AI payload sanitising and the submit pipeline."""

import json

from conftest import FakeAIClient, SAMPLE_ANALYSIS
from app.services.analysis_service import AnalysisPipeline, validate_analysis
from app.services.intake_service import IntakeForm, IntakeService
from app.services.profile_service import get_latest_analysis, get_profile


def test_validate_keeps_well_formed_payload():
    validated = validate_analysis(SAMPLE_ANALYSIS)
    assert validated["overallScore"] == 72
    company = validated["companies"][0]
    assert company["name"] == "TechCorp"
    assert company["skillGaps"][0] == {
        "skill": "Data Structures", "studentLevel": 7, "requiredLevel": 9, "gap": 2,
    }
    assert company["recommendations"][0]["priority"] == "high"
    assert validated["actionPlan"][0]["resources"][0]["url"] == "https://mitpress.mit.edu/clrs"


def test_validate_clamps_and_fills_defaults():
    validated = validate_analysis({
        "overallScore": "140",
        "companies": [{
            "name": "  Acme ",
            "matchPercentage": -5,
            "skillGaps": [{"skill": "SQL", "studentLevel": 0, "requiredLevel": 12}],
            "recommendations": [{"title": "Learn SQL", "priority": "urgent"}],
            "strengthAreas": "not a list",
        }],
        "actionPlan": [{"timeline": "2 weeks"}, "junk"],
    })
    assert validated["overallScore"] == 100
    company = validated["companies"][0]
    assert company["name"] == "Acme"
    assert company["matchPercentage"] == 0
    assert company["skillGaps"][0] == {"skill": "SQL", "studentLevel": 1, "requiredLevel": 10, "gap": 9}
    assert company["recommendations"][0]["priority"] == "medium"
    assert company["strengthAreas"] == []
    assert company["eligibilityCriteria"] == []
    assert validated["actionPlan"] == []


def test_validate_rejects_non_finite_numbers():
    # json.loads accepts the NaN and Infinity literals a model may emit
    payload = json.loads('''{
        "overallScore": NaN,
        "companies": [{
            "name": "Acme",
            "matchPercentage": Infinity,
            "skillGaps": [
                {"skill": "SQL", "studentLevel": NaN, "requiredLevel": 5, "gap": -Infinity},
                {"skill": "Go", "studentLevel": 3, "requiredLevel": 6, "gap": NaN}
            ]
        }]
    }''')
    validated = validate_analysis(payload)

    assert validated["overallScore"] == 0
    company = validated["companies"][0]
    assert company["matchPercentage"] == 0
    assert company["skillGaps"][0] == {"skill": "SQL", "studentLevel": 1, "requiredLevel": 5, "gap": 4}
    assert company["skillGaps"][1]["gap"] == 3


def test_validate_reads_string_booleans():
    criteria = [
        {"name": "CGPA", "isMet": "false"},
        {"name": "Backlogs", "isMet": "No"},
        {"name": "10th", "isMet": "0"},
        {"name": "12th", "isMet": "true"},
        {"name": "Branch", "isMet": True},
    ]
    validated = validate_analysis({"companies": [{"name": "Acme", "eligibilityCriteria": criteria}]})
    met = [c["isMet"] for c in validated["companies"][0]["eligibilityCriteria"]]
    assert met == [False, False, False, True, True]


def test_validate_handles_empty_payload():
    assert validate_analysis({}) == {"overallScore": 0, "companies": [], "actionPlan": []}


def _complete_form(user_id: int) -> IntakeForm:
    intake = IntakeService()
    form = intake.load(user_id)
    form.set_academic({
        "cgpa": 7.9, "tenth_percentage": 85, "twelfth_percentage": 80, "backlogs": 1, "branch": "IT",
    })
    form.set_codolio("https://codolio.com/profile/dev")
    intake.attach_document(user_id, form, "resume", "Dev Patel - Java, Spring", "resume.txt")
    intake.attach_document(user_id, form, "company_requirements", "Infosys SE role", "jd.txt")
    form.set_self_assessment({"technical_skills": None, "personal_reflection": None})
    return intake.save(user_id, form)


def test_pipeline_persists_profile_and_analysis(user_id):
    fake = FakeAIClient()
    result = AnalysisPipeline(ai_client=fake).run(user_id, _complete_form(user_id))

    assert result["success"] is True, result["error"]
    assert result["profile"]["backlogs"] == 1
    assert result["profile"]["technical_skills_rating"] == 0
    assert result["analysis"]["overall_score"] == 72
    assert result["analysis"]["profile_id"] == result["profile"]["profile_id"]

    assert fake.calls[0]["resume_text"] == "Dev Patel - Java, Spring"
    assert fake.calls[0]["requirements_text"] == "Infosys SE role"

    stored = get_latest_analysis(user_id)
    assert stored["analysis_data"]["companies"][0]["name"] == "TechCorp"


def test_pipeline_upserts_one_profile_per_user(user_id):
    pipeline = AnalysisPipeline(ai_client=FakeAIClient())
    first = pipeline.run(user_id, _complete_form(user_id))
    second = pipeline.run(user_id, _complete_form(user_id))

    assert first["profile"]["profile_id"] == second["profile"]["profile_id"]
    assert second["analysis"]["analysis_id"] > first["analysis"]["analysis_id"]
    assert get_latest_analysis(user_id)["analysis_id"] == second["analysis"]["analysis_id"]


def test_pipeline_missing_score_defaults_to_zero(user_id):
    fake = FakeAIClient(response={"companies": []})
    result = AnalysisPipeline(ai_client=fake).run(user_id, _complete_form(user_id))
    assert result["analysis"]["overall_score"] == 0


def test_pipeline_failure_keeps_profile_and_reports_message(user_id):
    fake = FakeAIClient(error=ValueError("Invalid response format from AI model"))
    result = AnalysisPipeline(ai_client=fake).run(user_id, _complete_form(user_id))

    assert result["success"] is False
    assert result["error"] == "Failed to analyze profile with AI: Invalid response format from AI model"
    assert get_profile(user_id) is not None
    assert get_latest_analysis(user_id) is None
