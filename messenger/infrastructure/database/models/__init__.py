# messenger/infrastructure/database/models/__init__.py

from messenger.infrastructure.database.models.company_model import CompanyModel
from messenger.infrastructure.database.models.user_model import UserModel
from messenger.infrastructure.database.models.thread_model import ThreadModel
from messenger.infrastructure.database.models.message_model import MessageModel
from messenger.infrastructure.database.models.participant_model import ParticipantModel

__all__ = [
    "CompanyModel",
    "UserModel",
    "ThreadModel",
    "MessageModel",
    "ParticipantModel",
]
