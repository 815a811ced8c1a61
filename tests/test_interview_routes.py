import io
from datetime import datetime, timedelta

from models import InterviewRecord, db
from services.ai_service import TextGenerationError
from services.interview_service import FALLBACK_QUESTION, TOTAL_QUESTIONS
from services.resume_service import DOCX_MIME
from tests.fakes import RESUME_TEXT, make_docx


HISTORY = [{"question": f"Question {i}?", "answer": f"Answer {i}"} for i in range(1, TOTAL_QUESTIONS + 1)]
EVALUATION = {
    "score": 77,
    "strengths": ["Structured answers"],
    "weaknesses": ["Short on examples"],
    "improvements": ["Use STAR"],
    "recommended_topics": ["Window functions"],
}


def _upload_resume(client, role="Data Analyst"):
    return client.post(
        "/api/upload-resume",
        data={"resume": (io.BytesIO(make_docx(RESUME_TEXT)), "resume.docx", DOCX_MIME), "role": role},
        content_type="multipart/form-data",
    )


def test_interview_turn_requires_resume_and_role(client):
    response = client.post("/api/interview", json={"role": "Data Analyst"})
    assert response.status_code == 400


def test_interview_turn_returns_question(client, generator):
    generator.queue("Question 3: How would you clean messy sales data?")
    response = client.post(
        "/api/interview",
        json={"resumeText": RESUME_TEXT, "role": "Data Analyst", "conversationHistory": HISTORY[:2], "questionNumber": 3},
    )
    assert response.status_code == 200
    assert response.get_json() == {"type": "question", "question": "How would you clean messy sales data?"}


def test_interview_turn_question_failure_is_502(client, generator):
    generator.queue(TextGenerationError("down"))
    response = client.post("/api/interview", json={"resumeText": RESUME_TEXT, "role": "Data Analyst"})
    assert response.status_code == 502


def test_interview_turn_evaluation(client, generator):
    generator.queue(EVALUATION)
    response = client.post(
        "/api/interview",
        json={
            "resumeText": RESUME_TEXT,
            "role": "Data Analyst",
            "conversationHistory": HISTORY,
            "questionNumber": TOTAL_QUESTIONS + 1,
        },
    )
    assert response.status_code == 200
    assert response.get_json() == {"type": "evaluation", "evaluation": EVALUATION}


def test_interview_turn_evaluation_fallback(client, generator):
    generator.queue(TextGenerationError("down"))
    response = client.post(
        "/api/interview",
        json={"resumeText": RESUME_TEXT, "role": "Data Analyst", "conversationHistory": HISTORY, "questionNumber": 9},
    )
    assert response.status_code == 200
    assert response.get_json()["evaluation"]["score"] == 70


def test_upload_resume_creates_interview(client, app):
    response = _upload_resume(client)
    assert response.status_code == 200
    data = response.get_json()
    assert "Jane Doe" in data["resumeText"]
    with app.app_context():
        record = db.session.get(InterviewRecord, data["interviewId"])
        assert record.role == "Data Analyst"
        assert record.status == "awaiting_first_question"


def test_upload_resume_requires_role(client):
    response = client.post(
        "/api/upload-resume",
        data={"resume": (io.BytesIO(make_docx(RESUME_TEXT)), "resume.docx", DOCX_MIME)},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "Role is required"


def test_save_result_upserts(client):
    payload = {
        "interviewId": "local-1700000000000",
        "questions": ["Q1?"],
        "answers": ["A1"],
        "score": 64,
        "feedback": EVALUATION,
    }
    assert client.post("/api/save-result", json=payload).status_code == 200
    payload["score"] = 66
    assert client.post("/api/save-result", json=payload).status_code == 200

    detail = client.get("/api/interviews/local-1700000000000").get_json()
    assert detail["score"] == 66
    assert detail["answers"] == ["A1"]
    assert detail["feedback"] == EVALUATION


def test_save_result_requires_id(client):
    assert client.post("/api/save-result", json={"score": 10}).status_code == 400


def test_history_and_delete(client):
    client.post("/api/save-result", json={"interviewId": "run-1", "score": 85, "feedback": {}})
    history = client.get("/api/interviews").get_json()["interviews"]
    assert [item["id"] for item in history] == ["run-1"]
    assert history[0]["performanceLabel"] == "Excellent"

    assert client.delete("/api/interviews/run-1").status_code == 200
    assert client.get("/api/interviews/run-1").status_code == 404
    assert client.delete("/api/interviews/run-1").status_code == 404


def test_server_side_session_runs_to_evaluation(client, generator):
    interview_id = _upload_resume(client).get_json()["interviewId"]

    generator.queue("Q1: Tell me about SQL joins.")
    start = client.post(f"/api/interviews/{interview_id}/start").get_json()
    assert start["question"] == "Tell me about SQL joins."
    assert start["questionNumber"] == 1
    assert client.post(f"/api/interviews/{interview_id}/start").status_code == 409

    for number in range(1, TOTAL_QUESTIONS):
        generator.queue(f"Question {number + 1}?")
        turn = client.post(f"/api/interviews/{interview_id}/answer", json={"answer": f"answer {number}"}).get_json()
        assert turn["questionNumber"] == number + 1

    generator.queue(EVALUATION)
    final = client.post(f"/api/interviews/{interview_id}/answer", json={"answer": "last answer"}).get_json()
    assert final == {"type": "evaluation", "evaluation": EVALUATION, "totalQuestions": TOTAL_QUESTIONS}

    detail = client.get(f"/api/interviews/{interview_id}").get_json()
    assert detail["status"] == "finished"
    assert detail["questionNumber"] == TOTAL_QUESTIONS
    assert detail["score"] == 77
    assert len(detail["answers"]) == TOTAL_QUESTIONS
    assert detail["questions"][0] == "Tell me about SQL joins."

    late = client.post(f"/api/interviews/{interview_id}/answer", json={"answer": "extra"})
    assert late.status_code == 409


def test_server_side_session_retry(client, generator):
    interview_id = _upload_resume(client).get_json()["interviewId"]
    generator.queue(TextGenerationError("cold start"))
    start = client.post(f"/api/interviews/{interview_id}/start").get_json()
    assert start["question"] == FALLBACK_QUESTION

    generator.queue(TextGenerationError("still loading"))
    failed = client.post(f"/api/interviews/{interview_id}/answer", json={"answer": "I analyse data."})
    assert failed.status_code == 502
    assert failed.get_json()["retryPending"] is True
    assert failed.get_json()["questionNumber"] == 1

    blocked = client.post(f"/api/interviews/{interview_id}/answer", json={"answer": "other"})
    assert blocked.status_code == 409

    generator.queue("Q2: Which BI tools do you use?")
    retried = client.post(f"/api/interviews/{interview_id}/retry").get_json()
    assert retried["question"] == "Which BI tools do you use?"
    assert retried["questionNumber"] == 2

    detail = client.get(f"/api/interviews/{interview_id}").get_json()
    assert detail["retryPending"] is False


def test_session_endpoints_unknown_interview(client):
    assert client.post("/api/interviews/missing/start").status_code == 404
    assert client.post("/api/interviews/missing/answer", json={"answer": "x"}).status_code == 404
    assert client.post("/api/interviews/missing/retry").status_code == 404


def test_session_answer_requires_text(client):
    interview_id = _upload_resume(client).get_json()["interviewId"]
    client.post(f"/api/interviews/{interview_id}/start")
    response = client.post(f"/api/interviews/{interview_id}/answer", json={"answer": ""})
    assert response.status_code == 400


def test_interview_turn_evaluation_with_infinite_score_uses_default(client, generator):
    generator.queue('{"score": Infinity, "strengths": ["Clear"], "weaknesses": [], "improvements": [], "recommended_topics": []}')
    response = client.post(
        "/api/interview",
        json={"resumeText": RESUME_TEXT, "role": "Data Analyst", "conversationHistory": HISTORY, "questionNumber": 9},
    )
    assert response.status_code == 200
    evaluation = response.get_json()["evaluation"]
    assert evaluation["score"] == 70
    assert evaluation["strengths"] == ["Clear"]


def test_save_result_with_overflowing_score(client):
    response = client.post(
        "/api/save-result",
        data='{"interviewId": "run-inf", "score": 1e400, "feedback": {}}',
        content_type="application/json",
    )
    assert response.status_code == 200
    assert client.get("/api/interviews/run-inf").get_json()["score"] == 0


def _mark_turn_started(app, interview_id, started_at):
    with app.app_context():
        record = db.session.get(InterviewRecord, interview_id)
        record.turn_started_at = started_at
        db.session.commit()


def test_overlapping_turn_requests_are_rejected(client, app, generator):
    interview_id = _upload_resume(client).get_json()["interviewId"]
    client.post(f"/api/interviews/{interview_id}/start")

    _mark_turn_started(app, interview_id, datetime.utcnow())
    calls_before = len(generator.calls)
    busy = client.post(f"/api/interviews/{interview_id}/answer", json={"answer": "my answer"})
    assert busy.status_code == 409
    assert client.post(f"/api/interviews/{interview_id}/retry").status_code == 409
    assert len(generator.calls) == calls_before


def test_abandoned_turn_claim_expires(client, app, generator):
    interview_id = _upload_resume(client).get_json()["interviewId"]
    client.post(f"/api/interviews/{interview_id}/start")

    _mark_turn_started(app, interview_id, datetime.utcnow() - timedelta(minutes=10))
    generator.queue("Q2: Which BI tools do you use?")
    response = client.post(f"/api/interviews/{interview_id}/answer", json={"answer": "my answer"})
    assert response.status_code == 200
    assert response.get_json()["questionNumber"] == 2
    with app.app_context():
        assert db.session.get(InterviewRecord, interview_id).turn_started_at is None


def test_rejected_transition_releases_turn_claim(client, app):
    interview_id = _upload_resume(client).get_json()["interviewId"]
    assert client.post(f"/api/interviews/{interview_id}/retry").status_code == 409
    with app.app_context():
        assert db.session.get(InterviewRecord, interview_id).turn_started_at is None
