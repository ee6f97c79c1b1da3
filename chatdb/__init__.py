"""
chatdb: data-access layer for the chat application.

Typical use:
    settings = Settings()
    async with record_store_context(settings) as store:
        repo = ChatRepository(store, password_rounds=settings.bcrypt_rounds)
        chats = await repo.get_chats_by_user_id(user_id)
"""

__version__ = "0.1.0"
