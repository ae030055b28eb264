"""
Skill overlap between a job's required skills and a candidate's skills.

A required skill counts as matched when it is a case-insensitive substring
of one of the candidate's skills or the other way round, so "React" and
"React.js" match while "JS" and "JavaScript" do not.

match_score() and qualifies_for_notification() share the same fraction but
disagree on empty candidate skills: the score is 0, while the notification
gate lets the student through so that profiles without skills still hear
about new jobs.
"""

from typing import Iterable, List, Sequence, Tuple, TypeVar

NOTIFICATION_THRESHOLD = 0.4

T = TypeVar("T")


def _normalize(skills: Iterable[str]) -> List[str]:
    return [s.strip().lower() for s in skills if s and s.strip()]


def _matched_count(job_skills: List[str], candidate_skills: List[str]) -> int:
    return sum(
        1 for skill in job_skills
        if any(skill in theirs or theirs in skill for theirs in candidate_skills)
    )


def match_fraction(job_skills: Iterable[str], candidate_skills: Iterable[str]) -> float:
    """Fraction of required skills matched, 0.0 when either side is empty."""
    required = _normalize(job_skills)
    have = _normalize(candidate_skills)
    if not required or not have:
        return 0.0
    return _matched_count(required, have) / len(required)


def match_score(job_skills: Iterable[str], candidate_skills: Iterable[str]) -> int:
    """Percentage (0-100) of required skills the candidate covers."""
    # round half up, whole percents only
    return int(match_fraction(job_skills, candidate_skills) * 100 + 0.5)


def qualifies_for_notification(
    job_skills: Iterable[str],
    candidate_skills: Iterable[str],
    threshold: float = NOTIFICATION_THRESHOLD,
) -> bool:
    """Whether a student should be emailed about a newly posted job."""
    required = _normalize(job_skills)
    have = _normalize(candidate_skills)
    if not have or not required:
        return True
    return _matched_count(required, have) / len(required) >= threshold


def rank_jobs(jobs: Sequence[T], candidate_skills: Iterable[str], skills_of=lambda job: job.skills) -> List[Tuple[T, int]]:
    """Pair each job with its match score, best match first (stable)."""
    have = list(candidate_skills)
    scored = [(job, match_score(skills_of(job), have)) for job in jobs]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)
