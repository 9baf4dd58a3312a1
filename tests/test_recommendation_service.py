from datetime import date, timedelta
from types import SimpleNamespace
from uuid import uuid4

from jobboard.services import recommendation_service
from jobboard.services.recommendation_service import MAX_RECOMMENDATIONS, match_score, rank_jobs

TODAY = date(2025, 3, 10)


def posting(title="Intern", job_type="Internship", industry="Technology", skills=("Python",),
            description="Build internal tools", status="active", deadline=TODAY + timedelta(days=5)):
    return SimpleNamespace(
        id=uuid4(),
        title=title,
        job_type=job_type,
        industry=industry,
        skills=list(skills),
        description=description,
        status=status,
        deadline=deadline,
    )


def preferences(**overrides):
    values = {
        "interests": [],
        "skills": [],
        "preferred_job_types": [],
        "preferred_industries": [],
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_match_score_weights():
    job = posting(skills=["Python", "SQL", "Docker"], description="Machine learning platform")
    profile = preferences(
        preferred_job_types=["Internship"],
        preferred_industries=["Technology"],
        skills=["python", "sql"],
        interests=["machine learning", "robotics"],
    )
    assert match_score(job, profile) == 5 + 4 + 3 * 2 + 2


def test_rank_drops_low_scores_and_applied_jobs():
    strong = posting(title="Strong")
    weak = posting(title="Weak", job_type="Full-Time", industry="Retail", skills=[])
    applied = posting(title="Applied")
    profile = preferences(preferred_job_types=["Internship"])

    ranked = rank_jobs([weak, strong, applied], profile, applied_job_ids=[applied.id], today=TODAY)
    assert [(job.title, score) for job, score in ranked] == [("Strong", 5)]


def test_rank_skips_hidden_postings():
    profile = preferences(preferred_job_types=["Internship"])
    hidden = [
        posting(status="pending"),
        posting(deadline=TODAY - timedelta(days=1)),
    ]
    assert rank_jobs(hidden, profile, today=TODAY) == []


def test_rank_caps_result_count():
    profile = preferences(preferred_job_types=["Internship"], skills=["Python"])
    jobs = [posting(title=f"Job {i}") for i in range(MAX_RECOMMENDATIONS + 5)]
    assert len(rank_jobs(jobs, profile, today=TODAY)) == MAX_RECOMMENDATIONS


async def test_save_profile_upserts_and_dedupes(db, make_user):
    student = await make_user("student")
    await recommendation_service.save_profile(db, student.user_id, {"skills": ["Python", "Python", " "]})
    profile = await recommendation_service.save_profile(
        db, student.user_id, {"interests": ["AI"], "skills": ["SQL", "SQL"]}
    )
    assert profile.skills == ["SQL"]
    assert profile.interests == ["AI"]
    assert profile.preferred_job_types == []


async def test_recommendations_empty_without_profile(db, make_user, make_job):
    student = await make_user("student")
    await make_job()
    assert await recommendation_service.get_recommendations(db, student.user_id) == []
