"""Web UI — board listing, tag filters, submission flow."""

import pytest

from ideaboard.routes import web

VALID_FORM = {
    "title": "Meeting summarizer",
    "description": "Summarizes long video calls into action items.",
    "category": "Productivity",
    "tags": "AI, NLP",
    "author_name": "Ada",
}


@pytest.fixture
def allow_all(monkeypatch):
    calls = []

    def _check(text):
        calls.append(text)
        return {"is_appropriate": True, "warning": "", "reason": ""}

    monkeypatch.setattr(web, "check_submission", _check)
    return calls


# ─── board ───────────────────────────────────────────────────────

def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.data == b"OK"


def test_index_lists_ideas(client, fake_db):
    fake_db.seed(title="Smart compost sorter", author_name=None)
    fake_db.seed(title="Grant writer", author_name="Grace", category="Social Good")

    html = client.get("/").get_data(as_text=True)

    assert "Smart compost sorter" in html
    assert "Grant writer" in html
    assert "Anonymous" in html
    assert "Grace" in html
    assert "Social Good" in html


def test_index_filters_by_tag(client, fake_db):
    fake_db.seed(title="Vision idea", tags=["Computer Vision"])
    fake_db.seed(title="Language idea", tags=["NLP"])

    html = client.get("/?tag=NLP").get_data(as_text=True)

    assert "Language idea" in html
    assert "Vision idea" not in html
    assert "Clear filters" in html
    assert "Showing 1 of 2 ideas." in html


def test_index_empty_board(client, fake_db):
    assert "No ideas yet" in client.get("/").get_data(as_text=True)


def test_index_survives_datastore_failure(client, fake_db):
    fake_db.fail_with = RuntimeError("db down")
    resp = client.get("/")
    assert resp.status_code == 200
    assert "could not be loaded" in resp.get_data(as_text=True)


# ─── submission ──────────────────────────────────────────────────

def test_submit_form_renders(client):
    html = client.get("/submit").get_data(as_text=True)
    assert "Developer Tools" in html
    assert "Machine Learning" in html


def test_submit_valid_idea(client, fake_db, allow_all):
    resp = client.post("/submit", data=VALID_FORM)

    assert resp.status_code == 302
    stored = fake_db.tables["ai_ideas"][0]
    assert stored["title"] == "Meeting summarizer"
    assert stored["tags"] == ["AI", "NLP"]
    assert stored["author_name"] == "Ada"
    assert allow_all == ["Meeting summarizer Summarizes long video calls into action items. AI NLP"]

    board = client.get("/").get_data(as_text=True)
    assert "Idea submitted!" in board


def test_submit_invalid_idea_shows_errors(client, fake_db, allow_all):
    resp = client.post("/submit", data=dict(VALID_FORM, title="ab", category="Nope"))

    assert resp.status_code == 400
    html = resp.get_data(as_text=True)
    assert "Please fix the following issues:" in html
    assert "Title must be at least 3 characters long" in html
    assert "Please select a valid category" in html
    assert allow_all == []
    assert "ai_ideas" not in fake_db.tables


def test_submit_blocked_by_moderation(client, fake_db, monkeypatch):
    monkeypatch.setattr(web, "check_submission", lambda text: {
        "is_appropriate": False, "warning": "Keep it about technology", "reason": "off topic",
    })

    resp = client.post("/submit", data=VALID_FORM)

    assert resp.status_code == 422
    assert "Keep it about technology" in resp.get_data(as_text=True)
    assert "ai_ideas" not in fake_db.tables


def test_submit_blocked_without_warning_uses_fallback(client, fake_db, monkeypatch):
    monkeypatch.setattr(web, "check_submission", lambda text: {
        "is_appropriate": False, "warning": "", "reason": "",
    })
    resp = client.post("/submit", data=VALID_FORM)
    assert "Please revise your content to be more appropriate." in resp.get_data(as_text=True)


def test_blocked_submission_does_not_start_cooldown(client, fake_db, monkeypatch):
    verdicts = iter([
        {"is_appropriate": False, "warning": "No", "reason": ""},
        {"is_appropriate": True, "warning": "", "reason": ""},
    ])
    monkeypatch.setattr(web, "check_submission", lambda text: next(verdicts))

    assert client.post("/submit", data=VALID_FORM).status_code == 422
    assert client.post("/submit", data=VALID_FORM).status_code == 302


def test_second_submission_within_cooldown_rejected(client, fake_db, allow_all):
    assert client.post("/submit", data=VALID_FORM).status_code == 302

    resp = client.post("/submit", data=dict(VALID_FORM, title="Another idea"))

    assert resp.status_code == 400
    assert "Please wait before submitting another idea" in resp.get_data(as_text=True)
    assert len(fake_db.tables["ai_ideas"]) == 1


def test_submit_store_failure(client, fake_db, allow_all):
    fake_db.fail_with = RuntimeError("insert denied")
    resp = client.post("/submit", data=VALID_FORM)
    assert resp.status_code == 500
    assert "Submission failed. Please try again later." in resp.get_data(as_text=True)
