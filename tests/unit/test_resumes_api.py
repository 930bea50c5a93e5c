from resumate.api import deps
from resumate.api.server import app

RESUME = {
    "title": "Backend resume",
    "professionalTitle": "Backend Engineer",
    "firstName": "Alice",
    "lastName": "Smith",
    "summary": "Builds APIs.",
    "workExperiences": [
        {
            "company": "Acme",
            "position": "Engineer",
            "startDate": "2020-01-01",
            "endDate": "2030-01-01",
            "descriptions": "Shipped v1\nCut latency",
            "isCurrent": True,
        }
    ],
    "educations": [{"institution": "TU Berlin", "degree": "MSc", "field": "CS"}],
    "certifications": [{"name": "CKA", "issuer": "CNCF", "issueDate": "2021-03-01"}],
    "skills": ["Python", {"name": "SQL"}],
}


def test_create_and_read_resume(client, alice) -> None:
    """Test nested lists are stored with the resume."""
    resp = client.post("/api/resumes", json=RESUME, headers=alice)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    work = body["workExperiences"][0]
    assert work["descriptions"] == ["Shipped v1", "Cut latency"]
    assert work["endDate"] is None
    assert [s["name"] for s in body["skills"]] == ["Python", "SQL"]

    fetched = client.get(f"/api/resumes/{body['id']}", headers=alice).json()
    assert fetched["certifications"][0]["issueDate"] == "2021-03-01T00:00:00Z"


def test_resume_title_is_required(client, alice) -> None:
    """Test a resume without a title is rejected."""
    resp = client.post("/api/resumes", json=dict(RESUME, title=""), headers=alice)
    assert resp.status_code == 400


def test_update_replaces_nested_lists(client, alice) -> None:
    """Test PUT replaces every nested list as a whole."""
    created = client.post("/api/resumes", json=RESUME, headers=alice).json()
    update = dict(
        RESUME,
        title="Platform resume",
        workExperiences=[],
        educations=[{"institution": "MIT", "degree": "BSc", "field": "EE"}],
        skills=["Go"],
    )
    resp = client.put(f"/api/resumes/{created['id']}", json=update, headers=alice)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["title"] == "Platform resume"
    assert body["workExperiences"] == []
    assert [e["institution"] for e in body["educations"]] == ["MIT"]
    assert [s["name"] for s in body["skills"]] == ["Go"]
    assert len(body["certifications"]) == 1


def test_resumes_are_private(client, alice, bob) -> None:
    """Test ownership of resumes."""
    created = client.post("/api/resumes", json=RESUME, headers=alice).json()
    path = f"/api/resumes/{created['id']}"
    assert client.get(path, headers=bob).status_code == 401
    assert client.put(path, json=RESUME, headers=bob).status_code == 401
    assert client.delete(path, headers=bob).status_code == 401
    assert client.get("/api/resumes/nope", headers=bob).status_code == 404

    assert client.delete(path, headers=alice).json() == {"success": True, "id": created["id"]}
    assert client.get(path, headers=alice).status_code == 404


def test_resume_pages_follow_the_cursor(client, alice) -> None:
    """Test keyset pagination across three resumes."""
    ids = [
        client.post("/api/resumes", json=dict(RESUME, title=f"R{i}"), headers=alice).json()["id"]
        for i in range(3)
    ]

    first = client.get("/api/resumes", params={"pageSize": 2}, headers=alice).json()
    assert len(first["items"]) == 2
    assert first["totalCount"] == 3
    assert first["pageSize"] == 2
    assert first["nextPageKey"]

    second = client.get(
        "/api/resumes",
        params={"pageSize": 2, "nextPageKey": first["nextPageKey"]},
        headers=alice,
    ).json()
    assert len(second["items"]) == 1
    assert second.get("nextPageKey") is None

    seen = [item["id"] for item in first["items"] + second["items"]]
    assert sorted(seen) == sorted(ids)


def test_invalid_pagination_is_400(client, alice) -> None:
    """Test pageSize and cursor validation."""
    for size in ("0", "-1", "abc", "1000"):
        resp = client.get("/api/resumes", params={"pageSize": size}, headers=alice)
        assert resp.status_code == 400, size
        assert resp.json()["message"] == "Invalid pagination parameters"

    resp = client.get("/api/resumes", params={"nextPageKey": "unknown"}, headers=alice)
    assert resp.status_code == 400


def test_cursor_from_another_user_is_rejected(client, alice, bob) -> None:
    """Test a cursor only resolves within the caller's own rows."""
    for i in range(2):
        client.post("/api/resumes", json=dict(RESUME, title=f"R{i}"), headers=alice)
    cursor = client.get("/api/resumes", params={"pageSize": 1}, headers=alice).json()["nextPageKey"]
    resp = client.get("/api/resumes", params={"nextPageKey": cursor}, headers=bob)
    assert resp.status_code == 400


def test_suggestions(client, alice, llm) -> None:
    """Test improvement suggestions are returned as a list of lines."""
    created = client.post("/api/resumes", json=RESUME, headers=alice).json()
    llm.queue("1. Quantify the latency work\n\n- Mention Kubernetes\n")
    resp = client.post(
        f"/api/resumes/{created['id']}/suggestions",
        json={"jobInfo": {"companyName": "Acme", "position": "SRE"}},
        headers=alice,
    )
    assert resp.status_code == 200
    assert resp.json() == {"suggestions": ["Quantify the latency work", "Mention Kubernetes"]}
    assert llm.calls[0]["temperature"] == 0.3


def test_suggestions_never_build_a_pdf_renderer(client, alice, llm) -> None:
    """Test the suggestions route does not depend on the PDF renderer."""

    def _no_renderer():
        raise AssertionError("renderer requested")

    created = client.post("/api/resumes", json=RESUME, headers=alice).json()
    app.dependency_overrides[deps.get_pdf_renderer] = _no_renderer
    llm.queue("Lead with the billing work")
    resp = client.post(f"/api/resumes/{created['id']}/suggestions", headers=alice)
    assert resp.status_code == 200
    assert resp.json() == {"suggestions": ["Lead with the billing work"]}
