# app/models/submission.py - Business submission schemas

from enum import Enum

from pydantic import BaseModel


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class SubmissionCounts(BaseModel):
    pending: int = 0
    approved: int = 0
    denied: int = 0
