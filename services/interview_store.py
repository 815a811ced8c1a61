from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import desc, or_

from models import InterviewRecord, db
from services.ai_service import as_score
from services.interview_session import InterviewSession, SessionStatus


# A claim older than this is treated as abandoned by a crashed request.
TURN_CLAIM_TIMEOUT = timedelta(minutes=2)


def create_interview(resume_text: str, role: str) -> InterviewRecord:
    record = InterviewRecord(
        resume_text=resume_text,
        role=role,
        questions=[],
        answers=[],
        score=0,
        feedback={},
    )
    db.session.add(record)
    db.session.commit()
    return record


def get_interview(interview_id: str):
    return db.session.get(InterviewRecord, interview_id)


def list_interviews(limit: int = 50) -> list[InterviewRecord]:
    return InterviewRecord.query.order_by(desc(InterviewRecord.created_at)).limit(limit).all()


def delete_interview(interview_id: str) -> bool:
    record = get_interview(interview_id)
    if record is None:
        return False
    db.session.delete(record)
    db.session.commit()
    return True


def save_result(interview_id: str, questions, answers, score, feedback) -> InterviewRecord:
    """Upsert the final interview result keyed by interview id."""
    try:
        record = get_interview(interview_id)
        if record is None:
            record = InterviewRecord(id=interview_id)
            db.session.add(record)
        record.questions = list(questions or [])
        record.answers = list(answers or [])
        record.score = as_score(score)
        record.feedback = dict(feedback or {})
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to save result for interview %s", interview_id)
        raise
    return record


def load_session(record: InterviewRecord, request_turn) -> InterviewSession:
    state = {
        "interview_id": record.id,
        "role": record.role,
        "resume_text": record.resume_text,
        "status": record.status,
        "question_number": record.question_number,
        "current_question": record.current_question,
        "history": record.history or [],
        "pending_retry": record.pending_retry,
        "evaluation": record.feedback if record.status == SessionStatus.FINISHED.value else None,
    }
    return InterviewSession.from_state(state, request_turn, save_result=save_result)


def store_session(record: InterviewRecord, session: InterviewSession):
    state = session.to_state()
    record.status = state["status"]
    record.question_number = state["question_number"]
    record.current_question = state["current_question"]
    record.history = state["history"]
    record.pending_retry = state["pending_retry"]
    record.turn_started_at = None
    db.session.commit()


def claim_turn(record: InterviewRecord) -> bool:
    """Mark the stored session busy. Returns False while another request holds it."""
    now = datetime.utcnow()
    claimed = (
        InterviewRecord.query.filter(
            InterviewRecord.id == record.id,
            or_(
                InterviewRecord.turn_started_at.is_(None),
                InterviewRecord.turn_started_at < now - TURN_CLAIM_TIMEOUT,
            ),
        )
        .update({"turn_started_at": now}, synchronize_session=False)
    )
    db.session.commit()
    return claimed == 1


def release_turn(record: InterviewRecord):
    record.turn_started_at = None
    db.session.commit()
