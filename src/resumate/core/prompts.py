"""Prompt texts sent to the LLM.

User prompts are plain functions of the data they embed so they stay easy to
assert on in tests.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

_TAG_RE = re.compile(r"<[^>]+>")

JOB_ANALYSIS_SYSTEM = """You are a job description analyzer. Extract key information from job postings and return it in a structured format.

Follow these guidelines:
1. Identify the company name posting the job
2. Extract the job title/position
3. Summarize the job description in a clear, concise way
4. List the key requirements and qualifications
5. Extract job duties and responsibilities
6. Extract salary range if available (both minimum and maximum)
7. Extract job location if available
8. Extract posting date and application deadline if available
9. Extract application instructions and website if available
10. Respond with ONLY a JSON object with the following structure:

{
  "companyName": "The name of the company",
  "position": "The job title/position",
  "description": "A clear summary of the job description",
  "duties": ["Duty 1", "Duty 2"],
  "requirements": ["Requirement 1", "Requirement 2"],
  "salaryMin": 50000,
  "salaryMax": 80000,
  "location": "City, State",
  "postingDate": "YYYY-MM-DD",
  "applicationDeadline": "YYYY-MM-DD",
  "applicationInstructions": "Instructions for applying",
  "applicationWebsite": "https://..."
}

Use null for any optional field that is not present in the posting."""


def job_analysis_user(job_content: str) -> str:
    cleaned = _TAG_RE.sub("", job_content or "")
    return f"Please analyze this job posting and extract the key information:\n\n{cleaned}"


RESUME_GENERATION_SYSTEM = """You are a professional resume writer with expertise in creating tailored resumes that highlight relevant skills and experiences. Create a resume that matches the job requirements while staying strictly truthful to the candidate's profile.

Rules:
1. Use ONLY facts present in the profile. Never invent employers, titles, dates, degrees, certifications, metrics or skills.
2. Focus on achievements and results that the profile actually states.
3. Use action verbs and industry-specific terminology.
4. Prioritize experiences most relevant to the target position, keeping reverse chronological order.
5. Write at most 5 description bullets for the most recent or current role and at most 3 for every other role.
6. Keep dates exactly as given (YYYY-MM-DD). Use null for an end date that is ongoing and set "isCurrent" to true.
7. Respond with ONLY a JSON object with exactly this structure:

{
  "title": "Short resume title",
  "professionalTitle": "Headline / professional title",
  "firstName": "First name",
  "lastName": "Last name",
  "email": "Email",
  "phone": "Phone or null",
  "location": "Location or null",
  "website": "Website or null",
  "linkedin": "LinkedIn URL or null",
  "github": "GitHub URL or null",
  "summary": "Professional summary tailored to the job",
  "workExperiences": [
    {
      "company": "Company name",
      "position": "Position title",
      "startDate": "YYYY-MM-DD",
      "endDate": "YYYY-MM-DD or null",
      "isCurrent": false,
      "descriptions": ["Bullet 1", "Bullet 2"]
    }
  ],
  "educations": [
    {
      "institution": "Institution name",
      "degree": "Degree name",
      "field": "Field of study",
      "startDate": "YYYY-MM-DD",
      "endDate": "YYYY-MM-DD or null"
    }
  ],
  "skills": [{"name": "Skill"}],
  "certifications": [
    {
      "name": "Certification name",
      "issuer": "Issuing organization",
      "issueDate": "YYYY-MM-DD",
      "expiryDate": "YYYY-MM-DD or null"
    }
  ]
}"""


def _fmt_date(value: Any, default: str = "Present") -> str:
    if value is None or value == "":
        return default
    if isinstance(value, datetime):
        return value.date().isoformat()
    return str(value)


def _or_na(value: Optional[str]) -> str:
    return value if value else "N/A"


def _job_block(job_info: Optional[Dict[str, Any]]) -> str:
    if not job_info:
        return ""
    requirements: Iterable[str] = job_info.get("requirements") or []
    return (
        "\nTarget position: {position} at {company}\n\n"
        "Job Description:\n{description}\n\n"
        "Requirements:\n{requirements}\n"
    ).format(
        position=job_info.get("position") or "N/A",
        company=job_info.get("companyName") or "N/A",
        description=job_info.get("description") or "N/A",
        requirements="\n".join(f"- {r}" for r in requirements) or "N/A",
    )


def resume_generation_user(profile: Dict[str, Any], job_info: Optional[Dict[str, Any]]) -> str:
    """Embed the full profile (and the job, when given) in the user prompt.

    Args:
        profile: Profile snapshot as produced by ``profile_snapshot``.
        job_info: Normalized job fields or None for a general resume.

    Returns:
        Prompt text.
    """
    lines: List[str] = []
    if job_info:
        lines.append(
            f"Create a resume for a {job_info.get('position') or 'N/A'} position at "
            f"{job_info.get('companyName') or 'N/A'}. Here's my profile information:"
        )
    else:
        lines.append("Create a general-purpose resume. Here's my profile information:")

    lines += [
        "",
        f"Name: {profile.get('firstName') or ''} {profile.get('lastName') or ''}".rstrip(),
        f"Email: {_or_na(profile.get('email'))}",
        f"Title: {_or_na(profile.get('title'))}",
        f"Phone: {_or_na(profile.get('phone'))}",
        f"Location: {_or_na(profile.get('location'))}",
        f"Website: {_or_na(profile.get('website'))}",
        f"LinkedIn: {_or_na(profile.get('linkedin'))}",
        f"GitHub: {_or_na(profile.get('github'))}",
        f"Bio: {_or_na(profile.get('bio'))}",
        f"Skills: {', '.join(profile.get('skills') or []) or 'N/A'}",
        "",
        "Experience:",
    ]
    for exp in profile.get("experience") or []:
        lines += [
            f"Company: {exp.get('company')}",
            f"Position: {exp.get('position')}",
            f"Start Date: {_fmt_date(exp.get('startDate'))}",
            f"End Date: {_fmt_date(exp.get('endDate'))}",
            f"Description: {exp.get('description') or ''}",
            "",
        ]
    lines.append("Education:")
    for edu in profile.get("education") or []:
        lines += [
            f"Institution: {edu.get('institution')}",
            f"Degree: {edu.get('degree')}",
            f"Field: {edu.get('field')}",
            f"Start Date: {_fmt_date(edu.get('startDate'))}",
            f"End Date: {_fmt_date(edu.get('endDate'))}",
            "",
        ]
    lines.append("Certifications:")
    for cert in profile.get("certifications") or []:
        lines += [
            f"Name: {cert.get('name')}",
            f"Issuer: {cert.get('issuer')}",
            f"Issue Date: {_fmt_date(cert.get('issueDate'), 'N/A')}",
            f"Expiry Date: {_fmt_date(cert.get('expiryDate'), 'N/A')}",
            "",
        ]
    return "\n".join(lines) + _job_block(job_info)


RESUME_SUGGESTIONS_SYSTEM = """You are a professional resume writer. Provide specific, actionable suggestions to improve this resume. Focus on:
1. ATS optimization
2. Impactful language
3. Quantifiable achievements
4. Skills alignment
5. Professional formatting

Return one suggestion per line with no numbering and no extra commentary."""


def resume_suggestions_user(resume_json: str, job_info: Optional[Dict[str, Any]]) -> str:
    return f"Please provide specific suggestions to improve this resume:\n{resume_json}\n{_job_block(job_info)}"


COVER_LETTER_SYSTEM = (
    "You are a professional cover letter writer. Create a compelling and personalized "
    "cover letter based on the job information and user profile provided."
)


def cover_letter_user(profile: Dict[str, Any], job_info: Dict[str, Any]) -> str:
    experience = "\n".join(
        f"  - {exp.get('position')} at {exp.get('company')}\n"
        f"    Period: {_fmt_date(exp.get('startDate'))} - {_fmt_date(exp.get('endDate'))}\n"
        f"    Description: {exp.get('description') or ''}"
        for exp in profile.get("experience") or []
    )
    education = "\n".join(
        f"  - {edu.get('degree')} in {edu.get('field')} from {edu.get('institution')}\n"
        f"    Period: {_fmt_date(edu.get('startDate'))} - {_fmt_date(edu.get('endDate'))}"
        for edu in profile.get("education") or []
    )
    return f"""Please create a professional cover letter for this position:
Company: {job_info.get('companyName') or 'N/A'}
Position: {job_info.get('position') or 'N/A'}
Description: {job_info.get('description') or 'N/A'}
Requirements: {', '.join(job_info.get('requirements') or []) or 'N/A'}

User Profile Information:
Name: {profile.get('firstName') or ''} {profile.get('lastName') or ''}
Title: {_or_na(profile.get('title'))}
Bio: {_or_na(profile.get('bio'))}
Skills: {', '.join(profile.get('skills') or []) or 'N/A'}

Experience:
{experience or '  N/A'}

Education:
{education or '  N/A'}

The cover letter should:
- Be personalized for the company and position
- Highlight relevant skills and experience from the user's profile
- Only reference facts present in the profile
- Show enthusiasm for the role
- Be concise and professional
- Include a clear call to action

Return only the body of the letter as HTML (paragraphs, no <html> or <body> tags)."""
