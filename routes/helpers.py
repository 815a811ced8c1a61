from flask import current_app, jsonify, request

from services.resume_service import MIN_RESUME_TEXT_LENGTH, ResumeParseError, extract_resume_text


def error_response(message: str, status: int, **extra):
    payload = {"error": message}
    payload.update(extra)
    return jsonify(payload), status


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def get_generator():
    return current_app.extensions["text_generator"]


def get_resume_file():
    upload = request.files.get("resume")
    if upload is None or not upload.filename:
        return None
    return upload


def extract_upload_text(upload) -> str:
    text = extract_resume_text(upload.read(), upload.mimetype, upload.filename).strip()
    if len(text) < MIN_RESUME_TEXT_LENGTH:
        raise ResumeParseError("Could not extract enough text from the file. Try a text-based PDF or DOCX.")
    return text
