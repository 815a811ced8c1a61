from flask import Blueprint, current_app, jsonify

from routes.helpers import error_response, extract_upload_text, get_generator, get_resume_file, json_body
from services.ai_service import AIServiceError
from services.career_data import ASSESSMENT_QUESTIONS, CAREER_PATHS
from services.career_service import run_assessment
from services.chat_service import UNAVAILABLE_REPLY, chat_reply
from services.resume_service import ResumeExtractionError, analyze_resume


career_bp = Blueprint("career", __name__, url_prefix="/api")


@career_bp.route("/career-assessment/questions", methods=["GET"])
def assessment_questions():
    return jsonify({"questions": [question.to_dict() for question in ASSESSMENT_QUESTIONS]})


@career_bp.route("/careers", methods=["GET"])
def careers():
    return jsonify({"careers": [career.to_dict() for career in CAREER_PATHS]})


@career_bp.route("/career-assessment", methods=["POST"])
def career_assessment():
    body = json_body()
    answers = body.get("answers")
    if not isinstance(answers, dict):
        return error_response("answers object is required", 400)
    resume_skills = body.get("resumeSkills")
    if not isinstance(resume_skills, list):
        resume_skills = []

    return jsonify(run_assessment(get_generator(), answers, resume_skills))


@career_bp.route("/chat", methods=["POST"])
def chat():
    body = json_body()
    message = body.get("message")
    if not isinstance(message, str) or not message.strip():
        return error_response("message is required", 400)
    history = body.get("history")
    if not isinstance(history, list):
        history = []

    try:
        reply = chat_reply(get_generator(), message, history, body.get("context"))
    except AIServiceError as exc:
        current_app.logger.error("Chat reply failed: %s", exc)
        return error_response(str(exc), 502, reply=UNAVAILABLE_REPLY)
    return jsonify({"success": True, "reply": reply})


@career_bp.route("/resume", methods=["POST"])
def resume_analysis():
    upload = get_resume_file()
    if upload is None:
        return error_response("No file uploaded", 400)
    try:
        resume_text = extract_upload_text(upload)
    except ResumeExtractionError as exc:
        return error_response(str(exc), 422)

    try:
        analysis = analyze_resume(get_generator(), resume_text)
    except AIServiceError as exc:
        current_app.logger.error("Resume analysis failed: %s", exc)
        return error_response("Resume analysis is unavailable right now. Please try again.", 502)
    return jsonify({"success": True, "resumeText": resume_text, "analysis": analysis})
