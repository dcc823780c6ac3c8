# messenger/api/schemas/thread_schema.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from messenger.api.schemas._datetime_serializer import serialize_dt


class UserMiniResponse(BaseModel):
    id: int
    name: str
    email: str
    avatar_url: Optional[str] = None


class MessageResponse(BaseModel):
    id: int
    thread_id: int
    user_id: int
    company_id: Optional[int] = None
    body: str

    created_at: datetime
    updated_at: Optional[datetime] = None

    # derivados do remetente (empresa ou pessoa)
    company_name: Optional[str] = None
    company_logo: Optional[str] = None
    person_name: Optional[str] = None
    person_avatar: Optional[str] = None

    @field_serializer("created_at", "updated_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)


class ParticipantResponse(BaseModel):
    id: int
    user: UserMiniResponse
    company_id: Optional[int] = None
    last_read: Optional[datetime] = None
    starred: bool = False

    @field_serializer("last_read")
    def serialize_last_read(self, value: datetime | None):
        return serialize_dt(value)


class ThreadResponse(BaseModel):
    id: int
    subject: str
    max_participants: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)


class ThreadListItemResponse(ThreadResponse):
    latest_message: Optional[MessageResponse] = None
    is_unread: bool = False
    unread_count: int = 0
    starred: bool = False
    participants_string: str = ""


class ThreadDetailResponse(BaseModel):
    thread: ThreadResponse
    messages: List[MessageResponse] = []
    participants: List[ParticipantResponse] = []
    users: List[UserMiniResponse] = []


class CreateThreadRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    subject: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    recipients: List[int] = []
    as_company: bool = False
    max_participants: Optional[int] = Field(default=None, gt=1)


class ReplyRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(min_length=1)
    recipients: List[int] = []
    as_company: bool = False


class ParticipantsRequest(BaseModel):
    user_ids: List[int] = Field(min_length=1)


class StoreThreadResponse(BaseModel):
    status: str = "OK"
    message: MessageResponse
    thread: ThreadResponse


class ReplyResponse(BaseModel):
    status: str = "OK"
    message: MessageResponse
    html: str
    thread_subject: str


class UnreadCountResponse(BaseModel):
    msg_count: int
