import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from backend.tests.mocks import SAMPLE_RESULT, fenced, make_result


@pytest.fixture
def client():
    return TestClient(create_app())


def _upload(client, category, *files):
    return client.post(f"/files/{category}", files=[("files", f) for f in files])


def _upload_required(client, sample_pdf):
    with open(sample_pdf, "rb") as f:
        assert _upload(client, "syllabus", ("syllabus.pdf", f, "application/pdf")).status_code == 200
    with open(sample_pdf, "rb") as f:
        resp = _upload(
            client,
            "past_paper",
            ("2019.pdf", f, "application/pdf"),
            ("2020.png", b"\x89PNG fake image", "image/png"),
        )
    assert resp.status_code == 200
    return resp


def test_full_pipeline(client, sample_pdf, mock_llm):
    resp = _upload_required(client, sample_pdf)
    assert [f["filename"] for f in resp.json()["added"]] == ["2019.pdf", "2020.png"]

    listing = client.get("/files").json()
    assert [s["category"] for s in listing] == ["syllabus", "past_paper", "reference"]
    assert [len(s["files"]) for s in listing] == [1, 2, 0]
    assert [s["multiple"] for s in listing] == [False, True, False]

    resp = client.post("/analysis")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "Completed"
    assert data["result"] == SAMPLE_RESULT
    assert len(mock_llm.calls) == 1

    view = client.get("/dashboard").json()
    assert view["deep_dive"]["page"] == 1
    assert view["sample_paper"]["max_marks"] == 7

    assert client.post("/dashboard/page/2").json()["page"] == 1

    solution = client.post("/dashboard/solution/0/1").json()["solution"]
    assert solution["question_snippet"] == "Question 1 from 2019"
    assert client.post("/dashboard/solution/9/0").status_code == 404
    assert client.delete("/dashboard/solution").json() == {"solution": None}

    study = client.post("/study/start/3").json()
    assert study["mode"] == "Studying"
    assert study["answer"] == "AnswerHidden"
    study = client.post("/study/next").json()
    assert study["index"] == 4
    assert study["can_next"] is False
    assert client.post("/study/next").json()["index"] == 4
    study = client.post("/study/reveal").json()
    assert study["answer"] == "AnswerRevealed"
    assert "solution" in study
    assert client.post("/study/prev").json()["answer"] == "AnswerHidden"
    assert client.post("/study/exit").json()["mode"] == "Browsing"


def test_analysis_requires_syllabus_and_past_paper(client, sample_pdf, mock_llm):
    with open(sample_pdf, "rb") as f:
        _upload(client, "syllabus", ("syllabus.pdf", f, "application/pdf"))

    resp = client.post("/analysis")

    assert resp.status_code == 400
    assert resp.json()["error"] == "ValidationError"
    assert mock_llm.calls == []
    state = client.get("/analysis").json()
    assert state["status"] == "Error"
    assert state["error"].startswith("Please upload at least one Syllabus")


def test_unsupported_upload_reports_notice(client):
    resp = _upload(
        client,
        "past_paper",
        ("notes.txt", b"plain text", "text/plain"),
        ("2021.jpg", b"jpeg bytes", "image/jpeg"),
    )

    data = resp.json()
    assert resp.status_code == 200
    assert [f["filename"] for f in data["added"]] == ["2021.jpg"]
    assert data["notices"][0]["kind"] == "UnsupportedFileError"


def test_single_select_categories_reject_batches(client):
    resp = _upload(
        client,
        "syllabus",
        ("a.pdf", b"%PDF a", "application/pdf"),
        ("b.pdf", b"%PDF b", "application/pdf"),
    )
    assert resp.status_code == 400


def test_remove_file(client):
    added = _upload(client, "reference", ("book.pdf", b"%PDF book", "application/pdf")).json()["added"]

    assert client.delete(f"/files/{added[0]['id']}").status_code == 200
    assert client.delete(f"/files/{added[0]['id']}").status_code == 404


def test_malformed_response_then_retry(client, sample_pdf, mock_llm):
    _upload_required(client, sample_pdf)
    mock_llm.respond(text=fenced(SAMPLE_RESULT)[:80])

    resp = client.post("/analysis")
    assert resp.status_code == 502
    assert resp.json()["error"] == "MalformedResponseError"

    state = client.get("/analysis").json()
    assert state["status"] == "Error"
    assert state["result"] is None
    assert client.get("/dashboard").status_code == 409

    assert client.post("/analysis/reset").json()["status"] == "Idle"
    mock_llm.respond(text=fenced(SAMPLE_RESULT))
    assert client.post("/analysis").json()["status"] == "Completed"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_analysis_refused_while_one_is_running(sample_pdf, mock_llm):
    app = create_app()
    client = TestClient(app)
    _upload_required(client, sample_pdf)
    app.state.store.begin()

    assert client.post("/analysis/").status_code == 409
    assert client.post("/analysis/reset").status_code == 409
    assert mock_llm.calls == []
    assert client.get("/analysis").json()["status"] == "Analyzing"


def test_clear_working_set(client):
    _upload(client, "past_paper", ("a.pdf", b"%PDF a", "application/pdf"), ("b.png", b"png", "image/png"))

    assert client.delete("/files/").json() == {"removed": 2}
    assert [len(s["files"]) for s in client.get("/files").json()] == [0, 0, 0]


def test_deep_dive_page_buttons(client, sample_pdf, mock_llm):
    mock_llm.respond(text=fenced(make_result((1,) * 7)))
    _upload_required(client, sample_pdf)
    client.post("/analysis")

    assert client.post("/dashboard/page/prev").json()["page"] == 1
    assert client.post("/dashboard/page/next").json()["page"] == 2
    page = client.post("/dashboard/page/next").json()
    assert page["page"] == 3
    assert page["has_next"] is False
    assert client.post("/dashboard/page/next").json()["page"] == 3
    assert client.post("/dashboard/page/4").json()["page"] == 3
