from datetime import datetime
from uuid import uuid4

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


def _new_interview_id() -> str:
    return uuid4().hex


class InterviewRecord(db.Model):
    __tablename__ = "interviews"

    id = db.Column(db.String(64), primary_key=True, default=_new_interview_id)
    role = db.Column(db.String(120), nullable=False, default="")
    resume_text = db.Column(db.Text, nullable=False, default="")
    status = db.Column(db.String(32), nullable=False, default="awaiting_first_question", index=True)
    question_number = db.Column(db.Integer, nullable=False, default=0)
    current_question = db.Column(db.Text, nullable=True)
    history = db.Column(db.JSON, nullable=False, default=list)
    pending_retry = db.Column(db.JSON, nullable=True)
    turn_started_at = db.Column(db.DateTime, nullable=True)
    questions = db.Column(db.JSON, nullable=False, default=list)
    answers = db.Column(db.JSON, nullable=False, default=list)
    score = db.Column(db.Integer, nullable=False, default=0)
    feedback = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self, include_resume: bool = False) -> dict:
        data = {
            "id": self.id,
            "role": self.role,
            "status": self.status,
            "questionNumber": self.question_number,
            "currentQuestion": self.current_question,
            "retryPending": self.pending_retry is not None,
            "questions": self.questions or [],
            "answers": self.answers or [],
            "score": self.score,
            "feedback": self.feedback or {},
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_resume:
            data["resumeText"] = self.resume_text
        return data
