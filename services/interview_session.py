"""
Mock interview session: a bounded run of question/answer turns ending in
one evaluation.

The session does no I/O itself. It is driven through two collaborators:

``request_turn(resume_text, role, history, question_number)``
    returns ``{"type": "question", "question": ...}`` or
    ``{"type": "evaluation", "evaluation": {...}}`` and raises on failure.

``save_result(interview_id, questions, answers, score, feedback)``
    best-effort persistence once the evaluation exists.

A session rejects new submissions while one of its own turns is running.
That flag lives on the object only. Sessions stored between requests are
guarded by the turn claim in ``services.interview_store``.
"""
import logging
from enum import Enum

from services.interview_service import (
    FALLBACK_QUESTION,
    TOTAL_QUESTIONS,
    fallback_evaluation,
    strip_question_prefix,
)


logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    AWAITING_FIRST_QUESTION = "awaiting_first_question"
    AWAITING_ANSWER = "awaiting_answer"
    EVALUATING = "evaluating"
    FINISHED = "finished"


class InterviewStateError(Exception):
    """The requested transition is not allowed in the current state."""


class InterviewTurnError(Exception):
    """A question turn failed; the session kept the answer for a retry."""

    def __init__(self, question_number: int, message: str):
        super().__init__(message)
        self.question_number = question_number


class InterviewSession:
    def __init__(self, role: str, resume_text: str, request_turn, save_result=None, interview_id=None):
        self.role = role
        self.resume_text = resume_text
        self.interview_id = interview_id
        self.request_turn = request_turn
        self.save_result = save_result

        self.status = SessionStatus.AWAITING_FIRST_QUESTION
        self.question_number = 0
        self.current_question = ""
        self.history = []
        self.pending_retry = None
        self.evaluation = None
        self._in_flight = False

    @property
    def finished(self) -> bool:
        return self.status == SessionStatus.FINISHED

    @property
    def retry_pending(self) -> bool:
        return self.pending_retry is not None

    def start(self) -> str:
        if self.status != SessionStatus.AWAITING_FIRST_QUESTION:
            raise InterviewStateError("Interview has already started.")
        self._check_idle()

        self._in_flight = True
        try:
            result = self.request_turn(self.resume_text, self.role, [], 1)
            question = strip_question_prefix((result or {}).get("question", ""))
            if not question:
                raise ValueError("empty first question")
        except Exception as exc:
            # The first question never blocks the candidate.
            logger.warning("First interview question failed, using fallback: %s", exc)
            question = FALLBACK_QUESTION
        finally:
            self._in_flight = False

        self.question_number = 1
        self.current_question = question
        self.status = SessionStatus.AWAITING_ANSWER
        return question

    def submit_answer(self, answer: str) -> dict:
        self._check_idle()
        if self.status != SessionStatus.AWAITING_ANSWER:
            raise InterviewStateError("Interview is not awaiting an answer.")
        if self.pending_retry is not None:
            raise InterviewStateError("Retry the failed turn before submitting a new answer.")
        answer = (answer or "").strip()
        if not answer:
            raise InterviewStateError("Answer must not be empty.")

        snapshot = self.history + [{"question": self.current_question, "answer": answer}]
        return self._run_turn(answer, snapshot, self.question_number + 1)

    def retry(self) -> dict:
        self._check_idle()
        if self.pending_retry is None:
            raise InterviewStateError("There is no failed turn to retry.")
        pending = self.pending_retry
        return self._run_turn(pending["answer"], pending["history"], pending["question_number"])

    def _check_idle(self):
        if self._in_flight:
            raise InterviewStateError("A turn is already in progress.")

    def _run_turn(self, answer: str, snapshot, target: int) -> dict:
        self._in_flight = True
        self.pending_retry = None
        try:
            if target > TOTAL_QUESTIONS:
                return self._finish(snapshot, target)

            try:
                result = self.request_turn(self.resume_text, self.role, [dict(entry) for entry in snapshot], target)
                if (result or {}).get("type") != "question":
                    raise ValueError("expected a question turn")
                question = strip_question_prefix(result.get("question", ""))
                if not question:
                    raise ValueError("empty question")
            except Exception as exc:
                self.pending_retry = {
                    "answer": answer,
                    "history": [dict(entry) for entry in snapshot],
                    "question_number": target,
                }
                logger.warning("Interview turn %s failed, retry pending: %s", target, exc)
                raise InterviewTurnError(target, f"Failed to get question {target}: {exc}") from exc

            self.history = snapshot
            self.question_number = target
            self.current_question = question
            return {"type": "question", "question": question, "questionNumber": target}
        finally:
            self._in_flight = False

    def _finish(self, snapshot, target: int) -> dict:
        self.status = SessionStatus.EVALUATING
        try:
            result = self.request_turn(self.resume_text, self.role, [dict(entry) for entry in snapshot], target)
            evaluation = (result or {}).get("evaluation")
            if (result or {}).get("type") != "evaluation" or not isinstance(evaluation, dict):
                raise ValueError("expected an evaluation turn")
        except Exception as exc:
            logger.warning("Interview evaluation failed, using fallback: %s", exc)
            evaluation = fallback_evaluation(self.role)

        self.history = snapshot
        self.current_question = ""
        self.evaluation = evaluation
        self.status = SessionStatus.FINISHED
        self._persist()
        return {"type": "evaluation", "evaluation": evaluation}

    def _persist(self):
        if self.save_result is None or not self.interview_id:
            return
        try:
            self.save_result(
                self.interview_id,
                [entry["question"] for entry in self.history],
                [entry["answer"] for entry in self.history],
                self.evaluation.get("score"),
                self.evaluation,
            )
        except Exception:
            # Never fails the interview.
            logger.exception("Saving interview %s result failed", self.interview_id)

    def to_state(self) -> dict:
        return {
            "interview_id": self.interview_id,
            "role": self.role,
            "resume_text": self.resume_text,
            "status": self.status.value,
            "question_number": self.question_number,
            "current_question": self.current_question,
            "history": [dict(entry) for entry in self.history],
            "pending_retry": self.pending_retry,
            "evaluation": self.evaluation,
        }

    @classmethod
    def from_state(cls, state: dict, request_turn, save_result=None):
        session = cls(
            role=state.get("role", ""),
            resume_text=state.get("resume_text", ""),
            request_turn=request_turn,
            save_result=save_result,
            interview_id=state.get("interview_id"),
        )
        session.status = SessionStatus(state.get("status") or SessionStatus.AWAITING_FIRST_QUESTION.value)
        session.question_number = int(state.get("question_number") or 0)
        session.current_question = state.get("current_question") or ""
        session.history = [dict(entry) for entry in state.get("history") or []]
        session.pending_retry = state.get("pending_retry")
        session.evaluation = state.get("evaluation")
        return session
