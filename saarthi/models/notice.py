"""
Notice models for the public notice list.
"""

from pydantic import BaseModel
from enum import Enum


class NoticePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class NoticeType(str, Enum):
    WARNING = "warning"
    UPDATE = "update"
    INFO = "info"


class Notice(BaseModel):
    id: str
    title: str
    content: str
    date: str
    priority: NoticePriority
    type: NoticeType
