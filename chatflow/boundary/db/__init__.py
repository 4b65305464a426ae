"""
Database boundary layer: ORM models, CRUD operations, connection management
and the persistence gateway.

Exports:
  - Base, UUIDMixin, CreatedAtMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management
  - SessionModel, MessageModel, AttachmentModel: Core domain entities
  - session_crud, message_crud, attachment_crud: CRUD operation singletons
  - PersistenceGateway: Transactional facade used by the application layer

Dependencies: sqlalchemy, chatflow.configs
System role: Database adapter providing persistent storage for sessions,
messages and attachment records.
"""

from chatflow.boundary.db.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin
from chatflow.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
)
from chatflow.boundary.db.models import AttachmentModel, MessageModel, SessionModel
from chatflow.boundary.db.CRUD import (
    AttachmentCRUD,
    BaseCRUD,
    MessageCRUD,
    SessionCRUD,
    attachment_crud,
    message_crud,
    session_crud,
)
from chatflow.boundary.db.gateway import PersistenceGateway

__all__ = [
    # Base classes
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "SessionModel",
    "MessageModel",
    "AttachmentModel",
    # CRUD classes
    "BaseCRUD",
    "SessionCRUD",
    "MessageCRUD",
    "AttachmentCRUD",
    # CRUD singletons
    "session_crud",
    "message_crud",
    "attachment_crud",
    # Gateway
    "PersistenceGateway",
]
