"""
Keyword and heuristic extraction from resume text.

Nothing here raises on odd input: empty or garbled text produces the default
name and position, no skills and zero months of experience.
"""
import logging
import re
from typing import Iterable, Optional, Set

from app.core.config import settings
from app.models.resume import UNNAMED_CANDIDATE, UNSPECIFIED_POSITION
from app.schemas.analysis import ResumeAnalysis

logger = logging.getLogger(__name__)

SKILL_VOCABULARY = [
    "JavaScript", "TypeScript", "React", "Vue", "Angular", "Node.js", "Express",
    "HTML", "CSS", "Python", "Java", "C#", "PHP", "Ruby", "SQL", "NoSQL",
    "MongoDB", "PostgreSQL", "MySQL", "AWS", "Azure", "GCP", "Docker", "Kubernetes",
]

POSITION_VOCABULARY = [
    "Software Engineer", "Web Developer", "Frontend Developer", "Backend Developer",
    "Full Stack Developer", "UI/UX Designer", "Data Scientist", "DevOps Engineer",
    "Product Manager",
]

NAME_PATTERN = re.compile(r"([A-Z][a-z]+ [A-Z][a-z]+)")
POSITION_PATTERN = re.compile(
    "|".join(re.escape(title) for title in POSITION_VOCABULARY), re.IGNORECASE
)
# Longer units first so "years" is not read as "year" + "s"
EXPERIENCE_PATTERN = re.compile(r"(\d+)\s*(years|year|yrs|yr|months|month)", re.IGNORECASE)

# Names are looked for in the opening part of the text only
NAME_WINDOW = 200
SUMMARY_WINDOW = 300
SUMMARY_MAX_LENGTH = 200

EXPERIENCE_POLICIES = ("sum", "max")


def extract_name(text: str) -> str:
    match = NAME_PATTERN.search(text.strip()[:NAME_WINDOW])
    return match.group(1) if match else UNNAMED_CANDIDATE


def extract_position(text: str) -> str:
    match = POSITION_PATTERN.search(text)
    return match.group(0) if match else UNSPECIFIED_POSITION


def find_skills(text: str, vocabulary: Iterable[str] = SKILL_VOCABULARY) -> Set[str]:
    """Vocabulary terms occurring anywhere in text, compared case-insensitively."""
    lowered = text.lower()
    return {term.lower() for term in vocabulary if term.lower() in lowered}


def extract_experience_months(text: str, policy: Optional[str] = None) -> int:
    """
    Estimate total experience in months from "<n> years" / "<n> months" mentions.

    sum: every mention converted to months and added up.
    max: the largest year figure mentioned, in months.
    """
    policy = policy or settings.scoring.experience_policy
    if policy not in EXPERIENCE_POLICIES:
        raise ValueError(f"Unknown experience policy: {policy}")

    mentions = [(int(number), unit.lower()) for number, unit in EXPERIENCE_PATTERN.findall(text)]
    if not mentions:
        return 0

    if policy == "max":
        years = [number for number, unit in mentions if unit.startswith("y")]
        return max(years) * 12 if years else 0

    total = 0
    for number, unit in mentions:
        total += number * 12 if unit.startswith("y") else number
    return total


def extract_summary(text: str) -> str:
    start = text.find("\n\n")
    if start == -1:
        start = 0
    window = text[start:start + SUMMARY_WINDOW]
    summary = re.sub(r"[\r\n]+", " ", window).strip()
    if len(summary) > SUMMARY_MAX_LENGTH:
        summary = summary[:SUMMARY_MAX_LENGTH - 3] + "..."
    return summary


def analyze(resume_text: Optional[str], job_description: Optional[str], policy: Optional[str] = None) -> ResumeAnalysis:
    """Extract name, position, skills, experience and summary from a resume."""
    resume_text = resume_text or ""
    job_description = job_description or ""

    if not resume_text.strip():
        logger.warning("Resume text is empty; analysis falls back to defaults.")
        return ResumeAnalysis(required_skills=find_skills(job_description))

    required = find_skills(job_description)
    candidate = find_skills(resume_text)
    months = extract_experience_months(resume_text, policy)

    analysis = ResumeAnalysis(
        name=extract_name(resume_text),
        position=extract_position(resume_text),
        required_skills=required,
        candidate_skills=candidate,
        matched_skills=required & candidate,
        experience_months=months,
        summary=extract_summary(resume_text),
    )
    logger.info(
        f"Analyzed resume: {analysis.matched_count}/{analysis.required_count} skills, {months} months",
        extra={"matched_skills": sorted(analysis.matched_skills), "experience_months": months},
    )
    return analysis
