import io
import json

import fitz  # PyMuPDF
from docx import Document

from services.ai_service import TextGenerationError


RESUME_TEXT = (
    "Jane Doe - Data Analyst. Skills: Python, SQL, Excel, Tableau. "
    "Built sales dashboards and automated weekly reporting pipelines."
)


class FakeGenerator:
    """Scripted stand-in for the Gemini client.

    Each queued item is either a string reply, a dict (sent back as JSON),
    or an exception instance to raise. When the queue is empty the
    ``default`` reply is used.
    """

    def __init__(self, default="Describe a project you are proud of."):
        self.default = default
        self.replies = []
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)
        return self

    def generate(self, messages, json_mode=False):
        self.calls.append({"messages": messages, "json_mode": json_mode})
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


class FailingGenerator(FakeGenerator):
    def generate(self, messages, json_mode=False):
        self.calls.append({"messages": messages, "json_mode": json_mode})
        raise TextGenerationError("service unavailable")


def make_docx(text: str) -> bytes:
    document = Document()
    for line in text.split(". "):
        document.add_paragraph(line)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def make_pdf(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_textbox(fitz.Rect(72, 72, 540, 770), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data
