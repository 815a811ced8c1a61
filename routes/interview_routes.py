import time
from functools import partial

from flask import Blueprint, current_app, jsonify, request

from routes.helpers import error_response, extract_upload_text, get_generator, get_resume_file, json_body
from services.ai_service import AIServiceError
from services.interview_service import TOTAL_QUESTIONS, next_turn
from services.interview_session import InterviewStateError, InterviewTurnError
from services.interview_store import (
    claim_turn,
    create_interview,
    delete_interview,
    get_interview,
    list_interviews,
    load_session,
    release_turn,
    save_result,
    store_session,
)
from services.resume_service import ResumeExtractionError


interview_bp = Blueprint("interview", __name__, url_prefix="/api")


def _performance_label(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 65:
        return "Good"
    if score >= 50:
        return "Average"
    return "Needs Improvement"


@interview_bp.route("/interview", methods=["POST"])
def interview_turn():
    """
    Stateless interview turn for client-held sessions.

    ``questionNumber`` is the number of the turn being requested. Values up to
    8 return that question. A value above 8 means all eight answers are in and
    returns the evaluation instead. Clients that sent ``questionNumber >= 8``
    to request the evaluation must send 9.
    """
    body = json_body()
    resume_text = str(body.get("resumeText") or "").strip()
    role = str(body.get("role") or "").strip()
    if not resume_text or not role:
        return error_response("resumeText and role are required", 400)

    question_number = body.get("questionNumber")
    if not isinstance(question_number, int) or isinstance(question_number, bool):
        question_number = 1
    history = body.get("conversationHistory")
    if not isinstance(history, list):
        history = []
    history = [entry for entry in history if isinstance(entry, dict)]

    try:
        turn = next_turn(get_generator(), resume_text, role, history, question_number)
    except AIServiceError as exc:
        current_app.logger.error("Interview question %s failed: %s", question_number, exc)
        return error_response("Failed to get response from AI. Please try again.", 502)
    return jsonify(turn)


@interview_bp.route("/upload-resume", methods=["POST"])
def upload_resume():
    upload = get_resume_file()
    role = (request.form.get("role") or "").strip()
    if upload is None:
        return error_response("No file uploaded", 400)
    if not role:
        return error_response("Role is required", 400)
    try:
        resume_text = extract_upload_text(upload)
    except ResumeExtractionError as exc:
        return error_response(str(exc), 422)

    interview_id = f"local-{int(time.time() * 1000)}"
    try:
        record = create_interview(resume_text, role)
        interview_id = record.id
    except Exception as exc:
        # Interview still runs client-side without a stored record.
        current_app.logger.warning("Interview insert failed (continuing without DB): %s", exc)

    return jsonify({"success": True, "interviewId": interview_id, "resumeText": resume_text})


@interview_bp.route("/save-result", methods=["POST"])
def save_interview_result():
    body = json_body()
    interview_id = str(body.get("interviewId") or "").strip()
    if not interview_id:
        return error_response("interviewId is required", 400)

    feedback = body.get("feedback")
    try:
        save_result(
            interview_id,
            body.get("questions") if isinstance(body.get("questions"), list) else [],
            body.get("answers") if isinstance(body.get("answers"), list) else [],
            body.get("score"),
            feedback if isinstance(feedback, dict) else {},
        )
    except Exception:
        return error_response("Failed to save results to database", 500)
    return jsonify({"success": True})


@interview_bp.route("/interviews", methods=["GET"])
def interview_history():
    attempts = []
    for record in list_interviews():
        item = record.to_dict()
        item["performanceLabel"] = _performance_label(record.score or 0)
        attempts.append(item)
    return jsonify({"interviews": attempts})


@interview_bp.route("/interviews/<string:interview_id>", methods=["GET"])
def interview_detail(interview_id: str):
    record = get_interview(interview_id)
    if record is None:
        return error_response("Interview not found", 404)
    return jsonify(record.to_dict(include_resume=True))


@interview_bp.route("/interviews/<string:interview_id>", methods=["DELETE"])
def interview_delete(interview_id: str):
    if not delete_interview(interview_id):
        return error_response("Interview not found", 404)
    return jsonify({"success": True})


def _claim(record):
    if not claim_turn(record):
        return None
    return load_session(record, partial(next_turn, get_generator()))


def _turn_busy():
    return error_response("A turn is already in progress for this interview.", 409)


@interview_bp.route("/interviews/<string:interview_id>/start", methods=["POST"])
def interview_start(interview_id: str):
    record = get_interview(interview_id)
    if record is None:
        return error_response("Interview not found", 404)
    session = _claim(record)
    if session is None:
        return _turn_busy()
    try:
        question = session.start()
    except InterviewStateError as exc:
        release_turn(record)
        return error_response(str(exc), 409)
    store_session(record, session)
    return jsonify(
        {
            "type": "question",
            "question": question,
            "questionNumber": session.question_number,
            "totalQuestions": TOTAL_QUESTIONS,
        }
    )


def _advance(record, session, step):
    try:
        turn = step()
    except InterviewStateError as exc:
        release_turn(record)
        return error_response(str(exc), 409)
    except InterviewTurnError as exc:
        store_session(record, session)
        current_app.logger.warning("Interview %s turn %s failed: %s", record.id, exc.question_number, exc)
        return error_response(
            "The AI model is taking too long to respond. Please wait a moment and retry.",
            502,
            retryPending=True,
            questionNumber=session.question_number,
        )
    except Exception:
        release_turn(record)
        raise
    store_session(record, session)
    turn["totalQuestions"] = TOTAL_QUESTIONS
    return jsonify(turn)


@interview_bp.route("/interviews/<string:interview_id>/answer", methods=["POST"])
def interview_answer(interview_id: str):
    record = get_interview(interview_id)
    if record is None:
        return error_response("Interview not found", 404)
    answer = str(json_body().get("answer") or "").strip()
    if not answer:
        return error_response("answer is required", 400)
    session = _claim(record)
    if session is None:
        return _turn_busy()
    return _advance(record, session, lambda: session.submit_answer(answer))


@interview_bp.route("/interviews/<string:interview_id>/retry", methods=["POST"])
def interview_retry(interview_id: str):
    record = get_interview(interview_id)
    if record is None:
        return error_response("Interview not found", 404)
    session = _claim(record)
    if session is None:
        return _turn_busy()
    return _advance(record, session, session.retry)
