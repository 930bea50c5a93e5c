"""ORM -> JSON response dicts (camelCase keys)."""

from __future__ import annotations

from typing import Any, Callable, Dict

from resumate.core.pagination import Page
from resumate.db.models import (
    Application,
    Certification,
    Education,
    Experience,
    Job,
    Profile,
    Project,
    Resume,
)
from resumate.schemas.common import iso


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "legalFirstName": profile.legal_first_name,
        "legalLastName": profile.legal_last_name,
        "hasPreferredName": profile.has_preferred_name,
        "preferredFirstName": profile.preferred_first_name,
        "preferredLastName": profile.preferred_last_name,
        "title": profile.title,
        "bio": profile.bio,
        "address": profile.address,
        "city": profile.city,
        "state": profile.state,
        "zipCode": profile.zip_code,
        "country": profile.country,
        "location": profile.location,
        "phone": profile.phone,
        "website": profile.website,
        "linkedin": profile.linkedin,
        "github": profile.github,
        "skills": [skill.name for skill in profile.skills],
        "createdAt": iso(profile.created_at),
        "updatedAt": iso(profile.updated_at),
    }


def experience_to_dict(exp: Experience) -> Dict[str, Any]:
    return {
        "id": exp.id,
        "profileId": exp.profile_id,
        "company": exp.company,
        "position": exp.position,
        "startDate": iso(exp.start_date),
        "endDate": iso(exp.end_date),
        "currentlyWorking": exp.currently_working,
        "description": exp.description,
        "createdAt": iso(exp.created_at),
        "updatedAt": iso(exp.updated_at),
    }


def education_to_dict(edu: Education) -> Dict[str, Any]:
    return {
        "id": edu.id,
        "profileId": edu.profile_id,
        "institution": edu.institution,
        "degree": edu.degree,
        "field": edu.field,
        "startDate": iso(edu.start_date),
        "endDate": iso(edu.end_date),
        "currentlyStudying": edu.currently_studying,
        "description": edu.description,
        "createdAt": iso(edu.created_at),
        "updatedAt": iso(edu.updated_at),
    }


def certification_to_dict(cert: Certification) -> Dict[str, Any]:
    return {
        "id": cert.id,
        "profileId": cert.profile_id,
        "name": cert.name,
        "issuer": cert.issuer,
        "issueDate": iso(cert.issue_date),
        "expiryDate": iso(cert.expiry_date),
        "credentialId": cert.credential_id,
        "credentialUrl": cert.credential_url,
        "description": cert.description,
        "createdAt": iso(cert.created_at),
        "updatedAt": iso(cert.updated_at),
    }


def project_to_dict(proj: Project) -> Dict[str, Any]:
    return {
        "id": proj.id,
        "profileId": proj.profile_id,
        "name": proj.name,
        "description": proj.description,
        "startDate": iso(proj.start_date),
        "endDate": iso(proj.end_date),
        "currentlyWorking": proj.currently_working,
        "technologies": list(proj.technologies or []),
        "projectUrl": proj.project_url,
        "githubUrl": proj.github_url,
        "createdAt": iso(proj.created_at),
        "updatedAt": iso(proj.updated_at),
    }


PROFILE_ITEM_SERIALIZERS: Dict[str, Callable[[Any], Dict[str, Any]]] = {
    "experience": experience_to_dict,
    "education": education_to_dict,
    "certification": certification_to_dict,
    "project": project_to_dict,
}


def job_to_dict(job: Job) -> Dict[str, Any]:
    return {
        "id": job.id,
        "url": job.url,
        "title": job.title,
        "companyName": job.company_name,
        "description": job.description,
        "duties": list(job.duties or []),
        "requirements": list(job.requirements or []),
        "salaryMin": job.salary_min,
        "salaryMax": job.salary_max,
        "location": job.location,
        "postingDate": iso(job.posting_date),
        "applicationDeadline": iso(job.application_deadline),
        "applicationInstructions": job.application_instructions,
        "applicationWebsite": job.application_website,
        "createdAt": iso(job.created_at),
        "updatedAt": iso(job.updated_at),
    }


def resume_summary_to_dict(resume: Resume) -> Dict[str, Any]:
    return {
        "id": resume.id,
        "userId": resume.user_id,
        "title": resume.title,
        "professionalTitle": resume.professional_title,
        "createdAt": iso(resume.created_at),
        "updatedAt": iso(resume.updated_at),
    }


def resume_to_dict(resume: Resume) -> Dict[str, Any]:
    data = resume_summary_to_dict(resume)
    data.update(
        {
            "firstName": resume.first_name,
            "lastName": resume.last_name,
            "email": resume.email,
            "phone": resume.phone,
            "location": resume.location,
            "website": resume.website,
            "linkedin": resume.linkedin,
            "github": resume.github,
            "summary": resume.summary or "",
            "content": resume.content,
            "workExperiences": [
                {
                    "id": w.id,
                    "company": w.company,
                    "position": w.position,
                    "startDate": iso(w.start_date),
                    "endDate": iso(w.end_date),
                    "descriptions": list(w.descriptions or []),
                    "isCurrent": w.is_current,
                }
                for w in resume.work_experiences
            ],
            "educations": [
                {
                    "id": e.id,
                    "institution": e.institution,
                    "degree": e.degree,
                    "field": e.field,
                    "startDate": iso(e.start_date),
                    "endDate": iso(e.end_date),
                }
                for e in resume.educations
            ],
            "certifications": [
                {
                    "id": c.id,
                    "name": c.name,
                    "issuer": c.issuer,
                    "issueDate": iso(c.issue_date),
                    "expiryDate": iso(c.expiry_date),
                }
                for c in resume.certifications
            ],
            "skills": [{"id": s.id, "name": s.name} for s in resume.skills],
        }
    )
    return data


def application_to_dict(app: Application) -> Dict[str, Any]:
    return {
        "id": app.id,
        "userId": app.user_id,
        "jobId": app.job_id,
        "company": app.company,
        "position": app.position,
        "jobDescription": app.job_description,
        "requirements": list(app.requirements or []),
        "coverLetterUrl": app.cover_letter_url,
        "status": app.status.value if app.status is not None else None,
        "resumes": [
            {"id": link.id, "resumeId": link.resume_id, "resume": resume_summary_to_dict(link.resume)}
            for link in app.resumes
            if link.resume is not None
        ],
        "createdAt": iso(app.created_at),
        "updatedAt": iso(app.updated_at),
    }


def page_to_dict(page: Page, serialize: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap a page for the wire; ``nextPageKey`` is present only when another page exists."""
    body: Dict[str, Any] = {
        "items": [serialize(item) for item in page.items],
        "totalCount": page.total_count,
        "pageSize": page.page_size,
    }
    if page.next_page_key is not None:
        body["nextPageKey"] = page.next_page_key
    return body
