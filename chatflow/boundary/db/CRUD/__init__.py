"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from chatflow.boundary.db.CRUD import session_crud, message_crud

    # Use singleton instances
    session = await session_crud.get_by_id(db, session_id)

    # Or instantiate classes directly for custom behavior
    from chatflow.boundary.db.CRUD import SessionCRUD
    custom_crud = SessionCRUD()
"""

from chatflow.boundary.db.CRUD.base_crud import BaseCRUD
from chatflow.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from chatflow.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from chatflow.boundary.db.CRUD.attachment_crud import AttachmentCRUD, attachment_crud

__all__ = [
    "BaseCRUD",
    "SessionCRUD",
    "session_crud",
    "MessageCRUD",
    "message_crud",
    "AttachmentCRUD",
    "attachment_crud",
]
