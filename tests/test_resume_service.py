import pytest

from services.ai_service import MalformedAIOutputError
from services.resume_service import (
    DOCX_MIME,
    ResumeParseError,
    UnsupportedFileTypeError,
    analyze_resume,
    extract_resume_text,
)
from tests.fakes import RESUME_TEXT, FakeGenerator, make_docx, make_pdf


def test_extracts_docx_by_mime_type():
    text = extract_resume_text(make_docx(RESUME_TEXT), DOCX_MIME, "upload")
    assert "Jane Doe" in text
    assert "Tableau" in text


def test_extracts_pdf_by_mime_type():
    text = extract_resume_text(make_pdf(RESUME_TEXT), "application/pdf", "resume.bin")
    assert "Jane Doe" in text


def test_extension_is_fallback_for_generic_mime():
    text = extract_resume_text(make_docx(RESUME_TEXT), "application/octet-stream", "Resume.DOCX")
    assert "Data Analyst" in text


def test_mime_type_wins_over_extension():
    # A PDF mistakenly named .docx is still read as a PDF.
    text = extract_resume_text(make_pdf(RESUME_TEXT), "application/pdf", "resume.docx")
    assert "Jane Doe" in text


def test_unsupported_type_is_rejected():
    with pytest.raises(UnsupportedFileTypeError):
        extract_resume_text(b"plain text resume", "text/plain", "resume.txt")


def test_corrupt_docx_raises_parse_error():
    with pytest.raises(ResumeParseError):
        extract_resume_text(b"not a zip file", DOCX_MIME, "resume.docx")


def test_analyze_resume_normalizes_fields():
    generator = FakeGenerator().queue(
        {
            "skills": ["Python", "SQL"],
            "experience": "Analyst at Acme",
            "atsScore": 104,
            "improvementSuggestions": ["Add metrics"],
        }
    )
    analysis = analyze_resume(generator, RESUME_TEXT)
    assert analysis == {
        "skills": ["Python", "SQL"],
        "experience": ["Analyst at Acme"],
        "education": [],
        "strengths": [],
        "weaknesses": [],
        "atsScore": 100,
        "improvementSuggestions": ["Add metrics"],
    }


def test_analyze_resume_requires_skills():
    with pytest.raises(MalformedAIOutputError):
        analyze_resume(FakeGenerator().queue({"atsScore": 50}), RESUME_TEXT)
