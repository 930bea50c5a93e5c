import enum
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from resumate.db.base import Base
from resumate.db.utils import generate_id


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    APPLIED = "applied"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, default=generate_id)
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    profile = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    resumes = relationship("Resume", back_populates="user", cascade="all, delete-orphan")
    applications = relationship(
        "Application", back_populates="user", cascade="all, delete-orphan"
    )
    job_links = relationship("JobUser", back_populates="user", cascade="all, delete-orphan")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    legal_first_name = Column(String(255), nullable=False, default="")
    legal_last_name = Column(String(255), nullable=False, default="")
    has_preferred_name = Column(Boolean, nullable=False, default=False)
    preferred_first_name = Column(String(255), nullable=True)
    preferred_last_name = Column(String(255), nullable=True)
    title = Column(String(255), nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    address = Column(String(255), nullable=False, default="")
    city = Column(String(255), nullable=False, default="")
    state = Column(String(255), nullable=False, default="")
    zip_code = Column(String(32), nullable=False, default="")
    country = Column(String(255), nullable=False, default="")
    location = Column(String(255), nullable=False, default="")
    phone = Column(String(64), nullable=False, default="")
    website = Column(String(512), nullable=False, default="")
    linkedin = Column(String(512), nullable=False, default="")
    github = Column(String(512), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")
    skills = relationship(
        "Skill", back_populates="profile", cascade="all, delete-orphan", order_by="Skill.sort_order"
    )
    experience = relationship("Experience", back_populates="profile", cascade="all, delete-orphan")
    education = relationship("Education", back_populates="profile", cascade="all, delete-orphan")
    certifications = relationship(
        "Certification", back_populates="profile", cascade="all, delete-orphan"
    )
    projects = relationship("Project", back_populates="profile", cascade="all, delete-orphan")


class Skill(Base):
    __tablename__ = "skills"

    id = Column(String(36), primary_key=True, default=generate_id)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    profile = relationship("Profile", back_populates="skills")


class Experience(Base):
    __tablename__ = "experiences"
    __table_args__ = (Index("ix_experiences_profile_start", "profile_id", "start_date"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    company = Column(String(255), nullable=False)
    position = Column(String(255), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    currently_working = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    profile = relationship("Profile", back_populates="experience")


class Education(Base):
    __tablename__ = "education"
    __table_args__ = (Index("ix_education_profile_start", "profile_id", "start_date"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    institution = Column(String(255), nullable=False)
    degree = Column(String(255), nullable=False)
    field = Column(String(255), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    currently_studying = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    profile = relationship("Profile", back_populates="education")


class Certification(Base):
    __tablename__ = "certifications"
    __table_args__ = (Index("ix_certifications_profile_issue", "profile_id", "issue_date"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    issuer = Column(String(255), nullable=False)
    issue_date = Column(DateTime, nullable=False)
    expiry_date = Column(DateTime, nullable=True)
    credential_id = Column(String(255), nullable=True)
    credential_url = Column(String(512), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    profile = relationship("Profile", back_populates="certifications")


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_profile_start", "profile_id", "start_date"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    currently_working = Column(Boolean, nullable=False, default=False)
    technologies = Column(JSON, nullable=False, default=list)
    project_url = Column(String(512), nullable=True)
    github_url = Column(String(512), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    profile = relationship("Profile", back_populates="projects")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=generate_id)
    url = Column(String(1024), nullable=True, unique=True)
    title = Column(String(255), nullable=True)
    company_name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    duties = Column(JSON, nullable=False, default=list)
    requirements = Column(JSON, nullable=False, default=list)
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    location = Column(String(255), nullable=True)
    posting_date = Column(DateTime, nullable=True)
    application_deadline = Column(DateTime, nullable=True)
    application_instructions = Column(Text, nullable=True)
    application_website = Column(String(1024), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user_links = relationship("JobUser", back_populates="job", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="job")


class JobUser(Base):
    __tablename__ = "job_users"
    __table_args__ = (UniqueConstraint("job_id", "user_id", name="uq_job_user"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    job = relationship("Job", back_populates="user_links")
    user = relationship("User", back_populates="job_links")


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (Index("ix_applications_user_created", "user_id", "created_at"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True)
    company = Column(String(255), nullable=False, default="")
    position = Column(String(255), nullable=False, default="")
    job_description = Column(Text, nullable=True)
    requirements = Column(JSON, nullable=False, default=list)
    cover_letter_url = Column(String(1024), nullable=True)
    status = Column(
        Enum(ApplicationStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="applications")
    job = relationship("Job", back_populates="applications")
    resumes = relationship(
        "ApplicationResume", back_populates="application", cascade="all, delete-orphan"
    )


class Resume(Base):
    __tablename__ = "resumes"
    __table_args__ = (Index("ix_resumes_user_updated", "user_id", "updated_at"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    professional_title = Column(String(255), nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=True)
    location = Column(String(255), nullable=True)
    website = Column(String(512), nullable=True)
    linkedin = Column(String(512), nullable=True)
    github = Column(String(512), nullable=True)
    summary = Column(Text, nullable=True)
    content = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="resumes")
    work_experiences = relationship(
        "ResumeWorkExperience",
        back_populates="resume",
        cascade="all, delete-orphan",
        order_by="ResumeWorkExperience.sort_order",
    )
    educations = relationship(
        "ResumeEducation",
        back_populates="resume",
        cascade="all, delete-orphan",
        order_by="ResumeEducation.sort_order",
    )
    certifications = relationship(
        "ResumeCertification",
        back_populates="resume",
        cascade="all, delete-orphan",
        order_by="ResumeCertification.sort_order",
    )
    skills = relationship(
        "ResumeSkill",
        back_populates="resume",
        cascade="all, delete-orphan",
        order_by="ResumeSkill.sort_order",
    )
    applications = relationship(
        "ApplicationResume", back_populates="resume", cascade="all, delete-orphan"
    )


class ResumeWorkExperience(Base):
    __tablename__ = "resume_work_experiences"

    id = Column(String(36), primary_key=True, default=generate_id)
    resume_id = Column(String(36), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False)
    company = Column(String(255), nullable=False, default="")
    position = Column(String(255), nullable=False, default="")
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    descriptions = Column(JSON, nullable=False, default=list)
    is_current = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    resume = relationship("Resume", back_populates="work_experiences")


class ResumeEducation(Base):
    __tablename__ = "resume_educations"

    id = Column(String(36), primary_key=True, default=generate_id)
    resume_id = Column(String(36), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False)
    institution = Column(String(255), nullable=False, default="")
    degree = Column(String(255), nullable=False, default="")
    field = Column(String(255), nullable=False, default="")
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    resume = relationship("Resume", back_populates="educations")


class ResumeCertification(Base):
    __tablename__ = "resume_certifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    resume_id = Column(String(36), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False, default="")
    issuer = Column(String(255), nullable=False, default="")
    issue_date = Column(DateTime, nullable=True)
    expiry_date = Column(DateTime, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    resume = relationship("Resume", back_populates="certifications")


class ResumeSkill(Base):
    __tablename__ = "resume_skills"

    id = Column(String(36), primary_key=True, default=generate_id)
    resume_id = Column(String(36), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    resume = relationship("Resume", back_populates="skills")


class ApplicationResume(Base):
    __tablename__ = "application_resumes"
    __table_args__ = (
        UniqueConstraint("application_id", "resume_id", name="uq_application_resume"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    application_id = Column(
        String(36), ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    resume_id = Column(String(36), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    application = relationship("Application", back_populates="resumes")
    resume = relationship("Resume", back_populates="applications")
