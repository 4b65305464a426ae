"""
Database models package.

Exports:
  - SessionModel: Chat session ORM model
  - MessageModel: Chat message ORM model
  - AttachmentModel: Message attachment ORM model

Dependencies: sqlalchemy, chatflow.boundary.db.base
System role: Database model definitions for domain entities
"""

from chatflow.boundary.db.models.session_model import SessionModel
from chatflow.boundary.db.models.message_model import MessageModel
from chatflow.boundary.db.models.attachment_model import AttachmentModel

__all__ = [
    "SessionModel",
    "MessageModel",
    "AttachmentModel",
]
