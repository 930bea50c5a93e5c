JOB = {
    "url": "https://x/1",
    "title": "Backend Engineer",
    "companyName": "Acme",
    "description": "Build APIs",
    "requirements": ["Python", "SQL"],
    "salaryMin": 70000,
}


def test_same_url_returns_the_stored_job(client, alice) -> None:
    """Test posting a known URL twice yields one job."""
    first = client.post("/api/jobs", json=JOB, headers=alice)
    second = client.post("/api/jobs", json=dict(JOB, title="Changed"), headers=alice)
    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["title"] == "Backend Engineer"

    listed = client.get("/api/jobs", headers=alice).json()
    assert listed["totalCount"] == 1


def test_same_url_from_another_user_links_them(client, alice, bob) -> None:
    """Test a second user posting a known URL shares the job."""
    job = client.post("/api/jobs", json=JOB, headers=alice).json()
    shared = client.post("/api/jobs", json=JOB, headers=bob).json()
    assert shared["id"] == job["id"]
    assert client.get(f"/api/jobs/{job['id']}", headers=bob).status_code == 200


def test_jobs_are_visible_only_to_linked_users(client, alice, bob) -> None:
    """Test an unlinked user gets 401 and can link explicitly."""
    job = client.post("/api/jobs", json=JOB, headers=alice).json()
    assert client.get(f"/api/jobs/{job['id']}", headers=bob).status_code == 401
    assert client.get("/api/jobs/missing", headers=bob).status_code == 404

    resp = client.post(f"/api/jobs/{job['id']}/user-link", headers=bob)
    assert resp.json() == {"message": "Job linked to user successfully", "jobId": job["id"]}
    resp = client.post(f"/api/jobs/{job['id']}/link-user", headers=bob)
    assert resp.json()["message"] == "Job already linked to user"
    assert client.get(f"/api/jobs/{job['id']}", headers=bob).status_code == 200


def test_unlink(client, alice, bob) -> None:
    """Test unlinking a job."""
    job = client.post("/api/jobs", json=JOB, headers=alice).json()
    resp = client.delete(f"/api/jobs/{job['id']}/user-link", headers=bob)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Job not linked to user"
    assert client.delete("/api/jobs/missing/user-link", headers=bob).json()["message"] == "Job not found"

    resp = client.delete(f"/api/jobs/{job['id']}/user-link", headers=alice)
    assert resp.json() == {"message": "Job unlinked from user successfully"}
    assert client.get("/api/jobs", headers=alice).json()["items"] == []


def test_delete_keeps_job_while_others_are_linked(client, alice, bob) -> None:
    """Test delete removes the row only once nobody links to it."""
    job = client.post("/api/jobs", json=JOB, headers=alice).json()
    client.post(f"/api/jobs/{job['id']}/user-link", headers=bob)

    assert client.delete(f"/api/jobs/{job['id']}", headers=alice).json()["success"] is True
    assert client.get(f"/api/jobs/{job['id']}", headers=bob).status_code == 200
    assert client.get(f"/api/jobs/{job['id']}", headers=alice).status_code == 401

    client.delete(f"/api/jobs/{job['id']}", headers=bob)
    assert client.get(f"/api/jobs/{job['id']}", headers=bob).status_code == 404


def test_update_rejects_url_of_another_job(client, alice) -> None:
    """Test a job cannot take another job's URL."""
    first = client.post("/api/jobs", json=JOB, headers=alice).json()
    second = client.post("/api/jobs", json=dict(JOB, url="https://x/2"), headers=alice).json()

    resp = client.put(f"/api/jobs/{second['id']}", json=dict(JOB, url=first["url"]), headers=alice)
    assert resp.status_code == 400

    resp = client.put(
        f"/api/jobs/{second['id']}",
        json=dict(JOB, url="https://x/2", title="Platform Engineer"),
        headers=alice,
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "Platform Engineer"


def test_invalid_url_is_400(client, alice) -> None:
    """Test job URL validation."""
    resp = client.post("/api/jobs", json=dict(JOB, url="javascript:alert(1)"), headers=alice)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "url"


def test_process_job_from_text(client, alice, llm) -> None:
    """Test job analysis of pasted text."""
    llm.queue(
        {
            "companyName": "Acme",
            "position": "Engineer",
            "requirements": ["- Python", "", "SQL"],
            "salaryMin": "$90,000",
            "postingDate": "not a date",
        }
    )
    resp = client.post(
        "/api/process-job",
        json={"type": "text", "content": "<p>Engineer</p> at <b>Acme</b>"},
        headers=alice,
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["companyName"] == "Acme"
    assert body["requirements"] == ["Python", "SQL"]
    assert body["salaryMin"] == 90000.0
    assert body["postingDate"] is None
    assert body["url"] is None
    assert "<p>" not in llm.calls[0]["user_prompt"]
    assert llm.calls[0]["json_mode"] is True


def test_process_job_url_already_stored_skips_the_model(client, alice, llm, fetcher) -> None:
    """Test a known URL is answered from the database."""
    job = client.post("/api/jobs", json=JOB, headers=alice).json()
    resp = client.post(
        "/api/process-job", json={"type": "url", "content": "https://x/1"}, headers=alice
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == job["id"]
    assert resp.json()["position"] == "Backend Engineer"
    assert llm.calls == []
    assert fetcher.urls == []


def test_process_job_url_fetches_page(client, alice, llm, fetcher) -> None:
    """Test a new URL is fetched then analysed."""
    llm.queue({"companyName": "Globex", "position": "SRE"})
    resp = client.post(
        "/api/process-job", json={"type": "url", "content": "https://jobs.globex.com/7"}, headers=alice
    )
    assert resp.status_code == 200
    assert resp.json()["url"] == "https://jobs.globex.com/7"
    assert fetcher.urls == ["https://jobs.globex.com/7"]
    assert fetcher.text in llm.calls[0]["user_prompt"]


def test_process_job_unparseable_output_is_400(client, alice, llm) -> None:
    """Test model output that is not JSON."""
    llm.queue("Sorry, I cannot help with that.")
    resp = client.post(
        "/api/process-job", json={"type": "text", "content": "whatever"}, headers=alice
    )
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Failed to process job")


def test_process_job_rejects_unknown_type(client, alice, llm) -> None:
    """Test request validation of the content type."""
    resp = client.post("/api/process-job", json={"type": "pdf", "content": "x"}, headers=alice)
    assert resp.status_code == 400
    assert llm.calls == []


def test_job_pages_cover_only_linked_jobs(client, alice, bob) -> None:
    """Test keyset pagination over the caller's linked jobs."""
    mine = [
        client.post("/api/jobs", json=dict(JOB, url=f"https://x/p{i}"), headers=alice).json()["id"]
        for i in range(3)
    ]
    client.post("/api/jobs", json=dict(JOB, url="https://x/bob"), headers=bob)

    first = client.get("/api/jobs", params={"pageSize": 2}, headers=alice).json()
    assert len(first["items"]) == 2
    assert first["totalCount"] == 3
    second = client.get(
        "/api/jobs", params={"pageSize": 2, "nextPageKey": first["nextPageKey"]}, headers=alice
    ).json()
    assert len(second["items"]) == 1
    assert "nextPageKey" not in second
    assert sorted(j["id"] for j in first["items"] + second["items"]) == sorted(mine)

    exact = client.get("/api/jobs", params={"pageSize": 3}, headers=alice).json()
    assert len(exact["items"]) == 3
    assert "nextPageKey" not in exact
