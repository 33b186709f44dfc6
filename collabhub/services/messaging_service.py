"""
Messaging Service - point-to-point messages and two-party conversations.

Messages are kept in process memory only; nothing here is persisted.
A conversation is created on the first message between two users and its
id is derived from the sorted participant ids.
"""

import logging
import threading
from typing import Dict, List, Optional

from collabhub.core.errors import UnknownUserError, ValidationError, require_text
from collabhub.schemas.schemas import Conversation, ConversationSummary, Message
from collabhub.services.directory_service import DirectoryService
from collabhub.services.identity_service import Session
from collabhub.services.repository import new_id

logger = logging.getLogger(__name__)


def conversation_id(user_a: str, user_b: str) -> str:
    return ":".join(sorted([user_a, user_b]))


class MessagingService:

    def __init__(self, directory: DirectoryService):
        self.directory = directory
        self._lock = threading.RLock()
        self.messages: List[Message] = []
        self._conversations: Dict[str, Conversation] = {}

    def send(self, session: Session, receiver_id: str, content: str) -> Message:
        content = require_text(content, "content")
        sender = session.require_user()
        receiver = self.directory.get(receiver_id)
        if receiver is None:
            raise UnknownUserError("Receiver not found", context={"user_id": receiver_id})
        if receiver.id == sender.id:
            raise ValidationError("Cannot send a message to yourself", context={"field": "receiver_id"})

        message = Message(
            id=new_id(),
            sender_id=sender.id,
            receiver_id=receiver.id,
            content=content,
        )
        key = conversation_id(sender.id, receiver.id)
        with self._lock:
            self.messages.append(message)
            existing = self._conversations.get(key)
            if existing is None:
                participants = [self.directory.get(sender.id) or sender, receiver]
                self._conversations[key] = Conversation(
                    id=key, participants=participants, last_message=message, messages=[message]
                )
            else:
                self._conversations[key] = existing.model_copy(update={
                    "last_message": message,
                    "messages": existing.messages + [message],
                })
        logger.debug("Message %s from %s to %s", message.id, sender.id, receiver.id)
        return message

    def get_conversation(self, session: Session, user_id: str) -> Optional[Conversation]:
        """The conversation between the session user and `user_id`, or None. Never creates one."""
        me = session.require_user()
        with self._lock:
            return self._conversations.get(conversation_id(me.id, user_id))

    def list_conversations(self, session: Session) -> List[ConversationSummary]:
        me = session.require_user()
        with self._lock:
            mine = [c for c in self._conversations.values() if any(p.id == me.id for p in c.participants)]
            # send order, not timestamps, so equal clock readings still sort
            position = {m.id: i for i, m in enumerate(self.messages)}
        mine.sort(key=lambda c: position[c.last_message.id], reverse=True)
        return [
            ConversationSummary(
                id=c.id,
                participant=next((p for p in c.participants if p.id != me.id), c.participants[0]),
                last_message=c.last_message,
                unread=sum(1 for m in c.messages if m.receiver_id == me.id and not m.read),
            )
            for c in mine
        ]

    def mark_read(self, session: Session, user_id: str) -> int:
        """Mark messages addressed to the session user in that conversation as read."""
        me = session.require_user()
        key = conversation_id(me.id, user_id)
        with self._lock:
            conversation = self._conversations.get(key)
            if conversation is None:
                return 0
            changed = {m.id for m in conversation.messages if m.receiver_id == me.id and not m.read}
            if not changed:
                return 0
            self.messages = [m.model_copy(update={"read": True}) if m.id in changed else m for m in self.messages]
            messages = [m.model_copy(update={"read": True}) if m.id in changed else m for m in conversation.messages]
            self._conversations[key] = conversation.model_copy(update={
                "messages": messages,
                "last_message": messages[-1],
            })
        return len(changed)
