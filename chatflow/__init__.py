"""
chatflow: session/message orchestration backend for a multi-session chat UI.

Turns a user turn (text plus attachments) into a durable, ordered
conversation record, dispatches it to a remote inference webhook and keeps
every client's session list in sync.
"""

__version__ = "0.1.0"
