"""
Chat-side tables: users, chats, messages and message votes.

Table and column names match the hosted schema exactly (capitalized
table names, camelCase columns) so both record stores see the same rows.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, JSON, String, Text

from chatdb.models.base import Base, CreatedAtMixin, new_uuid


class User(Base):
    """
    Registered user.

    Attributes:
        id: UUID primary key
        email: Login email (unique)
        password: bcrypt hash, never plaintext
    """

    __tablename__ = "User"

    id = Column(String, primary_key=True, default=new_uuid)
    email = Column(String(64), nullable=False, unique=True)
    password = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r})"


class Chat(Base, CreatedAtMixin):
    """
    Conversation owned by a user.

    Attributes:
        id: Chat identifier
        title: Display title
        userId: Owning user
        visibility: "private" or "public"
        createdAt: Creation timestamp (ISO string)
    """

    __tablename__ = "Chat"

    id = Column(String, primary_key=True, default=new_uuid)
    title = Column(Text, nullable=False)
    userId = Column(String, ForeignKey("User.id"), nullable=False)
    visibility = Column(String, nullable=False, default="private")

    __table_args__ = (
        Index("idx_chat_user", "userId"),
    )

    def __repr__(self) -> str:
        return f"Chat(id={self.id!r}, title={self.title!r})"


class Message(Base, CreatedAtMixin):
    """
    Single chat message; content is the JSON payload of the turn.
    """

    __tablename__ = "Message"

    id = Column(String, primary_key=True, default=new_uuid)
    chatId = Column(String, ForeignKey("Chat.id"), nullable=False)
    role = Column(String, nullable=False)
    content = Column(JSON, nullable=False)

    __table_args__ = (
        Index("idx_message_chat_created", "chatId", "createdAt"),
    )


class Vote(Base):
    """
    Up/down vote on a message. One row per (chatId, messageId).
    """

    __tablename__ = "Vote"

    chatId = Column(String, ForeignKey("Chat.id"), primary_key=True)
    messageId = Column(String, ForeignKey("Message.id"), primary_key=True)
    isUpvoted = Column(Boolean, nullable=False)

    def __repr__(self) -> str:
        return f"Vote(messageId={self.messageId!r}, isUpvoted={self.isUpvoted!r})"
