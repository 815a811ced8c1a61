import io
import os

import fitz  # PyMuPDF
from docx import Document

from services.ai_service import as_score, as_str_list, generate_json


PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MIN_RESUME_TEXT_LENGTH = 50
ANALYSIS_RESUME_CHARS = 4000


class ResumeExtractionError(Exception):
    pass


class UnsupportedFileTypeError(ResumeExtractionError):
    pass


class ResumeParseError(ResumeExtractionError):
    pass


def extract_text_from_pdf(data: bytes) -> str:
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            text = "\n".join(page.get_text("text") for page in doc)
    except Exception as exc:
        raise ResumeParseError(f"Failed to read PDF: {exc}") from exc
    return text.strip()


def extract_text_from_docx(data: bytes) -> str:
    try:
        document = Document(io.BytesIO(data))
    except Exception as exc:
        raise ResumeParseError(f"Failed to read DOCX: {exc}") from exc

    lines = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
    # Table cells hold text too.
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))
    return "\n".join(lines).strip()


def _detect_format(mime_type: str, filename: str):
    mime_type = (mime_type or "").split(";")[0].strip().lower()
    if mime_type == PDF_MIME:
        return "pdf"
    if mime_type == DOCX_MIME:
        return "docx"
    ext = os.path.splitext(filename or "")[1].lower().lstrip(".")
    if ext in {"pdf", "docx"}:
        return ext
    return None


def extract_resume_text(data: bytes, mime_type: str, filename: str) -> str:
    """Extract plain text from a PDF or DOCX upload.

    The MIME type decides first; the file extension is the fallback for
    browsers that send ``application/octet-stream``.
    """
    kind = _detect_format(mime_type, filename)
    if kind == "pdf":
        return extract_text_from_pdf(data)
    if kind == "docx":
        return extract_text_from_docx(data)
    label = mime_type or os.path.splitext(filename or "")[1] or "unknown"
    raise UnsupportedFileTypeError(f"Unsupported file type: {label}. Please upload PDF or DOCX.")


def analyze_resume(generator, resume_text: str) -> dict:
    prompt = f"""
Analyze the following resume text and return a JSON object with exactly these fields:
{{
  "skills": ["list of technical and soft skills found"],
  "experience": ["short summary of each work/project experience"],
  "education": ["education qualifications"],
  "strengths": ["3-5 candidate strengths"],
  "weaknesses": ["2-3 areas for improvement"],
  "atsScore": <integer 0-100 representing ATS compatibility>,
  "improvementSuggestions": ["3-5 specific resume improvement tips"]
}}

Resume Text:
{resume_text[:ANALYSIS_RESUME_CHARS]}
""".strip()
    payload = generate_json(
        generator,
        [
            {
                "role": "system",
                "content": "You are a professional resume analyst and career coach. Always respond with valid JSON only.",
            },
            {"role": "user", "content": prompt},
        ],
        required_fields=("skills",),
    )
    return {
        "skills": as_str_list(payload.get("skills")),
        "experience": as_str_list(payload.get("experience")),
        "education": as_str_list(payload.get("education")),
        "strengths": as_str_list(payload.get("strengths")),
        "weaknesses": as_str_list(payload.get("weaknesses")),
        "atsScore": as_score(payload.get("atsScore")),
        "improvementSuggestions": as_str_list(payload.get("improvementSuggestions")),
    }
