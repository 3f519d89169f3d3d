import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.core.cooldown import enforce_submit_cooldown
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.models.submission import Submission
from app.schemas.submission import SubmissionCreate, SubmissionResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/submit/{problem_id}",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_code(
    problem_id: str,
    submission_data: SubmissionCreate,
    current_user: User = Depends(enforce_submit_cooldown),
    db: Session = Depends(get_db),
):
    """Record a submission. Only reachable once the user's cooldown admits it."""
    submission = Submission(
        user_id=current_user.id,
        problem_id=problem_id,
        language=submission_data.language,
        code=submission_data.code,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)

    logger.info(
        f"Submission {submission.id} recorded for problem {problem_id}",
        extra={"user_id": str(current_user.id)},
    )
    return submission


@router.get("/{problem_id}", response_model=List[SubmissionResponse])
def list_submissions(
    problem_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The current user's submissions for one problem, newest first."""
    return (
        db.query(Submission)
        .filter(
            Submission.user_id == current_user.id,
            Submission.problem_id == problem_id,
        )
        .order_by(Submission.created_at.desc())
        .all()
    )
