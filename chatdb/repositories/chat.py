"""
Chat repository: every data-access operation of the chat application.

Each method is one logical round trip against the record store (two or
three sequential requests for the cascading deletes and the vote upsert).
Failures are logged once with an operation-specific message and re-raised
unchanged; "not found" is an empty list or None.

Known limitations:
- Cascading deletes are sequential, not transactional. If a later step
  fails, earlier deletes stay applied.
- ``vote_message`` reads then writes. Two concurrent first votes on the
  same message can both see no row and both insert; the loser gets the
  store's key violation.
"""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from chatdb.core.errors import log_failures
from chatdb.core.security import DEFAULT_ROUNDS, get_password_hash
from chatdb.models.base import to_iso
from chatdb.schemas.records import (
    BlockKind,
    Chat,
    Document,
    Message,
    Suggestion,
    User,
    Visibility,
    Vote,
    VoteType,
)
from chatdb.services.interfaces.record_store import IRecordStore, OrderBy, eq, gt, gte


class ChatRepository:
    """
    Repository for users, chats, messages, votes, documents and suggestions.

    Attributes:
        store: Record store shared by the whole process
        password_rounds: bcrypt work factor used by ``create_user``
    """

    def __init__(self, store: IRecordStore, password_rounds: int = DEFAULT_ROUNDS):
        """
        Initialize repository with a record store.

        Args:
            store: Record store (see ``chatdb.core.database.create_record_store``)
            password_rounds: bcrypt work factor for new passwords
        """
        self.store = store
        self.password_rounds = password_rounds

    # Users

    @log_failures("Failed to get user from database")
    async def get_user(self, email: str) -> List[User]:
        """
        Find users by exact email.

        Returns:
            Matching users (empty list if none)
        """
        rows = await self.store.select("User", [eq("email", email)])
        return [User.model_validate(row) for row in rows]

    async def create_user(self, email: str, password: str) -> None:
        """
        Create a user with a bcrypt-hashed password.

        Args:
            email: Login email
            password: Plaintext password; only its salted hash is stored

        Note:
            Hashing runs in a worker thread so the event loop is not held
            for the duration of the bcrypt rounds. A hashing error is raised
            before any request and is not logged as a store failure.
        """
        hashed = await asyncio.to_thread(get_password_hash, password, self.password_rounds)
        await self._insert_user(email, hashed)

    @log_failures("Failed to create user in database", operation="create_user")
    async def _insert_user(self, email: str, hashed: str) -> None:
        await self.store.insert("User", {"email": email, "password": hashed})

    # Chats

    @log_failures("Failed to save chat to database")
    async def save_chat(
        self,
        id: str,
        title: str,
        user_id: str,
        visibility: Visibility = "private"
    ) -> None:
        """
        Insert a chat, stamping createdAt with the current UTC time.
        """
        chat = Chat(
            id=id,
            title=title,
            user_id=user_id,
            visibility=visibility,
            created_at=datetime.now(timezone.utc),
        )
        await self.store.insert("Chat", chat.to_row())

    @log_failures("Failed to delete chat by id from database")
    async def delete_chat_by_id(self, id: str) -> None:
        """
        Delete a chat with its votes and messages.

        Order: votes, then messages, then the chat row. Not atomic.
        """
        await self.store.delete("Vote", [eq("chatId", id)])
        await self.store.delete("Message", [eq("chatId", id)])
        await self.store.delete("Chat", [eq("id", id)])

    @log_failures("Failed to get chats from database")
    async def get_chats_by_user_id(self, id: str) -> List[Chat]:
        """
        List a user's chats, newest first.
        """
        rows = await self.store.select(
            "Chat",
            [eq("userId", id)],
            order_by=OrderBy("createdAt", descending=True),
        )
        return [Chat.model_validate(row) for row in rows]

    @log_failures("Failed to get chat by id from database")
    async def get_chat_by_id(self, id: str) -> Optional[Chat]:
        rows = await self.store.select("Chat", [eq("id", id)])
        return Chat.model_validate(rows[0]) if rows else None

    @log_failures("Failed to update chat visibility in database")
    async def update_chat_visibility_by_id(
        self,
        chat_id: str,
        visibility: Visibility
    ) -> None:
        await self.store.update("Chat", {"visibility": visibility}, [eq("id", chat_id)])

    # Messages

    @log_failures("Failed to save messages in database")
    async def save_messages(self, messages: Sequence[Message]) -> None:
        """
        Insert a batch of messages in one request.
        """
        await self.store.insert("Message", [message.to_row() for message in messages])

    @log_failures("Failed to get messages by chat id from database")
    async def get_messages_by_chat_id(self, id: str) -> List[Message]:
        """
        List a chat's messages, oldest first.
        """
        rows = await self.store.select(
            "Message",
            [eq("chatId", id)],
            order_by=OrderBy("createdAt"),
        )
        return [Message.model_validate(row) for row in rows]

    @log_failures("Failed to get message by id from database")
    async def get_message_by_id(self, id: str) -> Optional[Message]:
        rows = await self.store.select("Message", [eq("id", id)])
        return Message.model_validate(rows[0]) if rows else None

    @log_failures("Failed to delete messages by id after timestamp from database")
    async def delete_messages_by_chat_id_after_timestamp(
        self,
        chat_id: str,
        timestamp: datetime
    ) -> None:
        """
        Delete a chat's messages created at or after ``timestamp``.

        The bound is inclusive: a message created exactly at ``timestamp``
        is deleted.
        """
        await self.store.delete(
            "Message",
            [eq("chatId", chat_id), gte("createdAt", to_iso(timestamp))],
        )

    # Votes

    @log_failures("Failed to upvote message in database")
    async def vote_message(
        self,
        chat_id: str,
        message_id: str,
        type: VoteType
    ) -> None:
        """
        Record an up or down vote, replacing any earlier vote on the message.

        Args:
            chat_id: Chat the message belongs to
            message_id: Voted message
            type: "up" or "down"

        Note:
            Read-then-write, not an atomic upsert (see module docstring).
        """
        is_upvoted = type == "up"
        existing = await self.store.select("Vote", [eq("messageId", message_id)])

        if existing:
            await self.store.update(
                "Vote",
                {"isUpvoted": is_upvoted},
                [eq("messageId", message_id)],
            )
        else:
            vote = Vote(chat_id=chat_id, message_id=message_id, is_upvoted=is_upvoted)
            await self.store.insert("Vote", vote.to_row())

    @log_failures("Failed to get votes by chat id from database")
    async def get_votes_by_chat_id(self, id: str) -> List[Vote]:
        rows = await self.store.select("Vote", [eq("chatId", id)])
        return [Vote.model_validate(row) for row in rows]

    # Documents

    @log_failures("Failed to save document in database")
    async def save_document(
        self,
        id: str,
        title: str,
        kind: BlockKind,
        content: Optional[str],
        user_id: str,
        created_at: Optional[datetime] = None
    ) -> None:
        """
        Append a new version of a document.

        Earlier versions with the same id are kept.

        Args:
            id: Document id shared by all versions
            title: Document title
            kind: Block kind tag, sent as given; the store rejects unknown kinds
            content: Body text
            user_id: Author
            created_at: Version timestamp; when omitted the store's default
                (current time) applies
        """
        row = {
            "id": id,
            "title": title,
            "kind": kind.value if isinstance(kind, BlockKind) else kind,
            "content": content,
            "userId": user_id,
        }
        if created_at is not None:
            row["createdAt"] = to_iso(created_at)

        await self.store.insert("Document", row)

    @log_failures("Failed to get documents by id from database")
    async def get_documents_by_id(self, id: str) -> List[Document]:
        """
        List every version of a document, oldest first.
        """
        rows = await self.store.select(
            "Document",
            [eq("id", id)],
            order_by=OrderBy("createdAt"),
        )
        return [Document.model_validate(row) for row in rows]

    @log_failures("Failed to get document by id from database")
    async def get_document_by_id(self, id: str) -> Optional[Document]:
        """
        Get the most recent version of a document.

        Returns:
            Latest version, or None if the id has no rows
        """
        rows = await self.store.select(
            "Document",
            [eq("id", id)],
            order_by=OrderBy("createdAt", descending=True),
        )
        return Document.model_validate(rows[0]) if rows else None

    @log_failures("Failed to delete documents by id after timestamp from database")
    async def delete_documents_by_id_after_timestamp(
        self,
        id: str,
        timestamp: datetime
    ) -> None:
        """
        Delete document versions created strictly after ``timestamp``.

        Suggestions on those versions go first, then the versions. The
        bound is exclusive: a version created exactly at ``timestamp`` is
        kept.
        """
        boundary = to_iso(timestamp)
        await self.store.delete(
            "Suggestion",
            [eq("documentId", id), gt("documentCreatedAt", boundary)],
        )
        await self.store.delete(
            "Document",
            [eq("id", id), gt("createdAt", boundary)],
        )

    # Suggestions

    @log_failures("Failed to save suggestions in database")
    async def save_suggestions(self, suggestions: Sequence[Suggestion]) -> None:
        await self.store.insert(
            "Suggestion",
            [suggestion.to_row() for suggestion in suggestions],
        )

    @log_failures("Failed to get suggestions by document version from database")
    async def get_suggestions_by_document_id(self, document_id: str) -> List[Suggestion]:
        rows = await self.store.select("Suggestion", [eq("documentId", document_id)])
        return [Suggestion.model_validate(row) for row in rows]
