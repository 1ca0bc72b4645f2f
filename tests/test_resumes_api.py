import os

import pytest
from fastapi import status

from app.core.config import settings
from app.models.resume import Resume

JOB_DESCRIPTION = "Python, Docker, Kubernetes, AWS and React"

ALICE = "Alice Smith\nDevOps Engineer\n\n10 years of Python, Docker, Kubernetes, AWS and React."
JANE = (
    "Jane Doe\n"
    "Software Engineer\n"
    "\n"
    "Backend engineer with 5 years of Python, Docker and AWS work."
)
CARL = "Carl Jones\n\nJunior with 6 months of Python."


@pytest.fixture
def job_id(client, owner_headers):
    response = client.post(
        "/api/jobs/",
        headers=owner_headers,
        json={"title": "Platform Engineer", "description": JOB_DESCRIPTION, "skills_weight": 70},
    )
    return response.json()["id"]


def _upload(client, headers, job_id, text, filename="resume.pdf", content_type="application/pdf", data=None):
    content = text.encode("utf-8") if isinstance(text, str) else text
    return client.post(
        f"/api/jobs/{job_id}/resumes",
        headers=headers,
        files={"file": (filename, content, content_type)},
        data=data or {},
    )


def _listed(client, headers, job_id):
    return client.get(f"/api/jobs/{job_id}/resumes", headers=headers).json()


def test_upload_scores_and_ranks(client, owner_headers, job_id, plain_text_pdfs):
    response = _upload(client, owner_headers, job_id, JANE)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Jane Doe"
    assert data["position"] == "Software Engineer"
    assert data["skill_score"] == 60
    assert data["experience_score"] == 100
    assert data["overall_score"] == 72
    assert data["rank"] == 1
    assert data["skill_description"] == "Matched 3 out of 5 required skills."
    assert data["experience_description"] == "Approximately 5 years of experience."
    assert data["summary"] == "Backend engineer with 5 years of Python, Docker and AWS work."
    assert data["file_name"] == "resume.pdf"
    assert data["file_url"].startswith("http://testserver/uploads/")


def test_upload_stores_file(client, owner_headers, job_id, plain_text_pdfs, db_session, storage):
    resume_id = _upload(client, owner_headers, job_id, JANE).json()["id"]
    stored_name = db_session.get(Resume, resume_id).stored_name
    assert os.path.exists(storage.path_for(stored_name))


def test_upload_form_overrides(client, owner_headers, job_id, plain_text_pdfs):
    response = _upload(
        client, owner_headers, job_id, JANE,
        data={"candidate_name": "J. Doe", "position": "Tech Lead"},
    )
    assert response.json()["name"] == "J. Doe"
    assert response.json()["position"] == "Tech Lead"


def test_unreadable_pdf_is_recorded_with_zero_scores(client, owner_headers, job_id):
    response = _upload(client, owner_headers, job_id, b"this is not really a pdf")

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Unnamed Candidate"
    assert data["position"] == "Unspecified Position"
    assert (data["skill_score"], data["experience_score"], data["overall_score"]) == (0, 0, 0)


def test_upload_rejects_non_pdf(client, owner_headers, job_id, db_session):
    response = _upload(client, owner_headers, job_id, "plain text", filename="cv.txt", content_type="text/plain")
    assert response.status_code == 415
    assert response.json()["errors"][0]["code"] == "UNSUPPORTED_FILE_TYPE"
    assert db_session.query(Resume).count() == 0


def test_upload_rejects_oversized_file(client, owner_headers, job_id, monkeypatch, db_session):
    monkeypatch.setattr(settings, "max_upload_size_mb", 0)
    response = _upload(client, owner_headers, job_id, JANE)
    assert response.status_code == 413
    assert response.json()["errors"][0]["code"] == "FILE_TOO_LARGE"
    assert db_session.query(Resume).count() == 0


def test_upload_to_missing_job(client, owner_headers, plain_text_pdfs):
    response = _upload(client, owner_headers, 999, JANE)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_upload_to_other_owners_job(client, job_id, plain_text_pdfs):
    response = _upload(client, {"X-Owner-ID": "intruder"}, job_id, JANE)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_uploads_are_listed_by_rank(client, owner_headers, job_id, plain_text_pdfs):
    jane = _upload(client, owner_headers, job_id, JANE).json()
    carl = _upload(client, owner_headers, job_id, CARL).json()
    alice = _upload(client, owner_headers, job_id, ALICE).json()

    assert carl["rank"] == 2
    assert alice["rank"] == 1
    listed = _listed(client, owner_headers, job_id)
    assert [(r["id"], r["rank"]) for r in listed] == [(alice["id"], 1), (jane["id"], 2), (carl["id"], 3)]
    assert [r["overall_score"] for r in listed] == [100, 72, 17]


def test_equal_scores_rank_later_upload_lower(client, owner_headers, job_id, plain_text_pdfs):
    first = _upload(client, owner_headers, job_id, JANE).json()
    second = _upload(client, owner_headers, job_id, JANE).json()
    assert first["overall_score"] == second["overall_score"]
    assert second["rank"] > first["rank"]


def test_move_and_delete(client, owner_headers, job_id, plain_text_pdfs):
    jane = _upload(client, owner_headers, job_id, JANE).json()
    carl = _upload(client, owner_headers, job_id, CARL).json()
    alice = _upload(client, owner_headers, job_id, ALICE).json()

    response = client.put(f"/api/resumes/{carl['id']}/rank/up", headers=owner_headers)
    assert response.status_code == 200
    assert response.json()["resume"]["rank"] == 2
    assert [r["id"] for r in _listed(client, owner_headers, job_id)] == [alice["id"], carl["id"], jane["id"]]

    response = client.delete(f"/api/resumes/{alice['id']}", headers=owner_headers)
    assert response.status_code == 200
    # Remaining resumes are re-ranked by score, dropping the manual override
    assert [(r["id"], r["rank"]) for r in _listed(client, owner_headers, job_id)] == [
        (jane["id"], 1),
        (carl["id"], 2),
    ]


@pytest.mark.parametrize("direction, index", [("up", 0), ("down", 1)])
def test_move_past_the_ends_is_rejected(client, owner_headers, job_id, plain_text_pdfs, direction, index):
    uploaded = [_upload(client, owner_headers, job_id, text).json() for text in (ALICE, CARL)]
    before = _listed(client, owner_headers, job_id)

    response = client.put(f"/api/resumes/{uploaded[index]['id']}/rank/{direction}", headers=owner_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["code"] == "RANK_MOVE_REJECTED"
    assert _listed(client, owner_headers, job_id) == before


def test_move_with_unknown_direction(client, owner_headers, job_id, plain_text_pdfs):
    resume_id = _upload(client, owner_headers, job_id, JANE).json()["id"]
    response = client.put(f"/api/resumes/{resume_id}/rank/left", headers=owner_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["code"] == "VALIDATION_ERROR"


def test_get_resume(client, owner_headers, job_id, plain_text_pdfs):
    resume_id = _upload(client, owner_headers, job_id, JANE).json()["id"]

    assert client.get(f"/api/resumes/{resume_id}", headers=owner_headers).json()["name"] == "Jane Doe"
    assert client.get(f"/api/resumes/{resume_id}", headers={"X-Owner-ID": "intruder"}).status_code == 404
    assert client.get("/api/resumes/999", headers=owner_headers).status_code == 404


def test_delete_resume_removes_stored_file(client, owner_headers, job_id, plain_text_pdfs, db_session, storage):
    resume_id = _upload(client, owner_headers, job_id, JANE).json()["id"]
    path = storage.path_for(db_session.get(Resume, resume_id).stored_name)

    assert client.delete(f"/api/resumes/{resume_id}", headers=owner_headers).status_code == 200

    assert not os.path.exists(path)
    assert client.get(f"/api/resumes/{resume_id}", headers=owner_headers).status_code == 404


def test_delete_job_removes_stored_files(client, owner_headers, job_id, plain_text_pdfs, db_session, storage):
    resume_id = _upload(client, owner_headers, job_id, JANE).json()["id"]
    path = storage.path_for(db_session.get(Resume, resume_id).stored_name)

    assert client.delete(f"/api/jobs/{job_id}", headers=owner_headers).status_code == 200

    assert not os.path.exists(path)


def test_stats(client, owner_headers, job_id, plain_text_pdfs):
    for text in (ALICE, JANE, CARL):
        _upload(client, owner_headers, job_id, text)

    stats = client.get(f"/api/jobs/{job_id}/resumes/stats", headers=owner_headers).json()

    assert stats == {
        "total_count": 3,
        "avg_skill_score": 60,
        "avg_experience_score": 70,
        "avg_overall_score": 63,
        "high_score_candidates": 1,
        "medium_score_candidates": 1,
        "low_score_candidates": 1,
    }


def test_stats_for_empty_job(client, owner_headers, job_id):
    stats = client.get(f"/api/jobs/{job_id}/resumes/stats", headers=owner_headers).json()
    assert stats["total_count"] == 0
    assert stats["avg_overall_score"] == 0


def test_ranks_stay_dense_through_mixed_operations(client, owner_headers, job_id, plain_text_pdfs):
    ids = [_upload(client, owner_headers, job_id, text).json()["id"] for text in (JANE, CARL, ALICE, JANE, CARL)]

    def assert_dense():
        ranks = sorted(r["rank"] for r in _listed(client, owner_headers, job_id))
        assert ranks == list(range(1, len(ranks) + 1))

    assert_dense()
    client.put(f"/api/resumes/{ids[4]}/rank/up", headers=owner_headers)
    assert_dense()
    client.delete(f"/api/resumes/{ids[2]}", headers=owner_headers)
    assert_dense()
    client.put(f"/api/jobs/{job_id}", headers=owner_headers, json={"skills_weight": 10})
    assert_dense()
    _upload(client, owner_headers, job_id, ALICE)
    assert_dense()
