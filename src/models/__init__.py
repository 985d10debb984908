"""Canonical data models for the message search engine.

This module exports the corpus records the engine reads:
- Record: Base class with id and camelCase aliases
- Message: A chat message with attachments
- Attachment: A file attached to a message
- User, Channel, Server: Lookup entities joined into results
"""

from src.models.base import Record
from src.models.directory import Channel, ChannelType, Server, User, UserStatus
from src.models.message import Attachment, Message

__all__ = [
    # Base
    "Record",
    # Messages
    "Message",
    "Attachment",
    # Directory
    "User",
    "UserStatus",
    "Channel",
    "ChannelType",
    "Server",
]
