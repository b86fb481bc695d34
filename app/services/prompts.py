"""
Prompt templates for the readiness analysis.

The JSON schema in ANALYSIS_PROMPT is the contract the dashboard reads;
change both together.
"""

SYSTEM_PROMPT = (
    "You are a campus placement advisor. You compare a student's profile and resume "
    "against company requirements and answer with valid JSON only."
)

ANALYSIS_PROMPT = """Analyze the following student profile against company requirements and provide a detailed analysis:

STUDENT PROFILE:
- CGPA: {cgpa}
- Branch: {branch}
- 10th Percentage: {tenth_percentage}%
- 12th Percentage: {twelfth_percentage}%
- Backlogs: {backlogs}
- Codolio Profile: {codolio_profile}
- Technical Skills Rating: {technical_skills}/10
- Personal Reflection: {personal_reflection}

I am providing you with the text of the student's Resume and the Company Requirements.

1. Resume - Extract all relevant information including skills, projects, experience, education details
2. Company Requirements - Extract company names, job requirements, eligibility criteria, required skills

Please analyze the resume content against the company requirements and provide a comprehensive analysis in the following JSON format:
{{
  "overallScore": number (0-100),
  "companies": [
    {{
      "name": "Company Name",
      "matchPercentage": number (0-100),
      "description": "Brief company description",
      "eligibilityCriteria": [
        {{
          "name": "Criteria name",
          "studentValue": "Student's value",
          "requiredValue": "Required value",
          "isMet": boolean
        }}
      ],
      "skillGaps": [
        {{
          "skill": "Skill name",
          "studentLevel": number (1-10),
          "requiredLevel": number (1-10),
          "gap": number
        }}
      ],
      "recommendations": [
        {{
          "title": "Recommendation title",
          "description": "Detailed description",
          "priority": "high|medium|low",
          "resources": [
            {{
              "title": "Resource title",
              "link": "Resource URL"
            }}
          ]
        }}
      ],
      "strengthAreas": ["List of strengths"],
      "improvementAreas": ["List of improvement areas"]
    }}
  ],
  "actionPlan": [
    {{
      "action": "Action description",
      "timeline": "Timeline estimate",
      "resources": [
        {{
          "name": "Resource name",
          "url": "Resource URL"
        }}
      ]
    }}
  ]
}}

Ensure all companies mentioned are extracted from the company requirements document only. Provide realistic skill assessments and actionable recommendations. Return only the JSON response without any additional text."""

RESUME_SECTION = "RESUME TEXT:\n{resume_text}"

REQUIREMENTS_SECTION = "COMPANY REQUIREMENTS TEXT:\n{requirements_text}"


def _display(value) -> str:
    if value is None or value == "":
        return "Not provided"
    return str(value)


def build_analysis_prompt(profile: dict, resume_text: str = None, requirements_text: str = None) -> str:
    """
    Fill the analysis template from a profile row and append the documents.

    profile uses storage-row keys (cgpa, tenth_percentage, codolio_profile,
    technical_skills_rating, ...).
    """
    parts = [
        ANALYSIS_PROMPT.format(
            cgpa=_display(profile.get("cgpa")),
            branch=_display(profile.get("branch")),
            tenth_percentage=_display(profile.get("tenth_percentage")),
            twelfth_percentage=_display(profile.get("twelfth_percentage")),
            backlogs=_display(profile.get("backlogs")),
            codolio_profile=_display(profile.get("codolio_profile")),
            technical_skills=_display(profile.get("technical_skills_rating")),
            personal_reflection=_display(profile.get("personal_reflection")),
        )
    ]
    if resume_text:
        parts.append(RESUME_SECTION.format(resume_text=resume_text.strip()))
    if requirements_text:
        parts.append(REQUIREMENTS_SECTION.format(requirements_text=requirements_text.strip()))
    return "\n\n".join(parts)
