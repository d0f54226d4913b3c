"""
Integration tests for sign-up, login, profiles, job posting credits and saved jobs.
"""
from app.db.models.user import User

JOB_BODY = {
    "title": "Senior Platform Engineer",
    "description": "Own and scale our Kubernetes platform on AWS.",
    "platform": "Kubernetes",
    "technologies": ["Kubernetes", "Terraform", "AWS"],
    "location": "Remote",
    "contractType": "Full-time",
    "experienceLevel": "Senior",
}


def signup(client, email, role, password="testpass123"):
    return client.post("/auth/signup", json={
        "email": email,
        "password": password,
        "displayName": "Test User",
        "role": role,
    })


def login(client, email, password="testpass123"):
    response = client.post("/auth/login", data={"username": email, "password": password})
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


# ============================================
# Auth
# ============================================

def test_signup_login_me(client, db_session):
    response = signup(client, "new.recruiter@example.com", "recruiter")
    assert response.status_code == 201
    user_id = response.json()["userId"]

    me = client.get("/auth/me", headers=login(client, "new.recruiter@example.com"))
    assert me.status_code == 200
    assert me.json()["id"] == user_id
    assert me.json()["role"] == "recruiter"
    assert me.json()["freePostsRemaining"] == 1

    user = db_session.get(User, user_id)
    assert user.password_hash != "testpass123"


def test_candidates_get_no_free_posts(client):
    signup(client, "new.candidate@example.com", "candidate")
    me = client.get("/auth/me", headers=login(client, "new.candidate@example.com"))
    assert me.json()["freePostsRemaining"] == 0


def test_duplicate_email(client):
    signup(client, "dup@example.com", "candidate")
    response = signup(client, "dup@example.com", "recruiter")
    assert response.status_code == 409


def test_signup_rejects_unknown_role(client):
    response = signup(client, "admin@example.com", "admin")
    assert response.status_code == 400


def test_wrong_password(client):
    signup(client, "someone@example.com", "candidate")
    response = client.post("/auth/login", data={"username": "someone@example.com", "password": "wrongpass1"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_invalid_token(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid token"}


def test_missing_token_uses_error_shape(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Not authenticated"}


# ============================================
# Job posting credits
# ============================================

def test_free_post_then_purchased_then_none(client, db_session, recruiter, auth_header):
    headers = auth_header(recruiter)

    first = client.post("/api/jobs", json=JOB_BODY, headers=headers)
    assert first.status_code == 201
    assert first.json()["freePostsRemaining"] == 0
    assert first.json()["job"]["companyName"] == "CloudCo"
    assert first.json()["job"]["technologies"] == ["Kubernetes", "Terraform", "AWS"]

    blocked = client.post("/api/jobs", json=JOB_BODY, headers=headers)
    assert blocked.status_code == 402
    assert blocked.json()["error"] == "No job posts remaining. Please purchase more job posts."

    db_session.refresh(recruiter)
    recruiter.purchased_posts_remaining = 1
    db_session.commit()

    second = client.post("/api/jobs", json=JOB_BODY, headers=headers)
    assert second.status_code == 201
    assert second.json()["purchasedPostsRemaining"] == 0

    mine = client.get("/api/jobs/mine", headers=headers)
    assert mine.json()["total"] == 2


def test_candidates_cannot_post_jobs(client, candidate, auth_header):
    response = client.post("/api/jobs", json=JOB_BODY, headers=auth_header(candidate))
    assert response.status_code == 403


def test_posting_requires_auth(client):
    assert client.post("/api/jobs", json=JOB_BODY).status_code == 401


def test_invalid_contract_type(client, recruiter, auth_header):
    body = dict(JOB_BODY, contractType="Freelance")
    response = client.post("/api/jobs", json=body, headers=auth_header(recruiter))
    assert response.status_code == 400


def test_public_listing_and_filters(client, job):
    listing = client.get("/api/jobs", params={"search": "kubernetes", "experienceLevel": "Senior"})
    assert listing.status_code == 200
    assert listing.json()["total"] == 1

    assert client.get("/api/jobs", params={"contractType": "Contract"}).json()["total"] == 0

    detail = client.get(f"/api/jobs/{job.id}")
    assert detail.json()["title"] == job.title
    assert client.get("/api/jobs/missing").status_code == 404


# ============================================
# Profile and saved jobs
# ============================================

def test_update_candidate_profile(client, candidate, auth_header):
    response = client.put("/api/profile", headers=auth_header(candidate), json={
        "headline": "Platform engineer",
        "skills": ["Kubernetes", "Go"],
        "workExperience": [{"title": "SRE", "company": "Acme", "startDate": "2019-01"}],
    })

    assert response.status_code == 200
    data = response.json()
    assert data["headline"] == "Platform engineer"
    assert data["skills"] == ["Kubernetes", "Go"]
    assert data["workExperience"][0]["company"] == "Acme"
    # Untouched fields keep their values
    assert data["cvUrl"] == candidate.cv_url


def test_recruiter_cannot_set_candidate_fields(client, recruiter, auth_header):
    response = client.put("/api/profile", headers=auth_header(recruiter), json={"skills": ["Python"]})
    assert response.status_code == 400


def test_saved_jobs(client, candidate, job, auth_header):
    headers = auth_header(candidate)

    client.post(f"/api/profile/saved-jobs/{job.id}", headers=headers)
    saved = client.post(f"/api/profile/saved-jobs/{job.id}", headers=headers)
    assert saved.json()["savedJobs"] == [job.id]

    listing = client.get("/api/profile/saved-jobs", headers=headers)
    assert [j["id"] for j in listing.json()["jobs"]] == [job.id]

    removed = client.delete(f"/api/profile/saved-jobs/{job.id}", headers=headers)
    assert removed.json()["savedJobs"] == []


def test_saving_unknown_job(client, candidate, auth_header):
    response = client.post("/api/profile/saved-jobs/missing", headers=auth_header(candidate))
    assert response.status_code == 404


def test_root_and_health(client):
    assert client.get("/").json() == {"status": "Job Board API running"}
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["database"] == "connected"
