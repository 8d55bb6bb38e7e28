from __future__ import annotations
import logging
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, desc

from gemchat.db.models import Conversation as ConversationModel, Message as MessageModel
from gemchat.db.session import Database
from gemchat.schemas.chat import Conversation, Message, Role
from gemchat.store.base import StoreError

logger = logging.getLogger(__name__)


class SQLChatStore:
    """ChatStore backed by SQLModel tables on an async engine."""

    def __init__(self, database: Database) -> None:
        self.database = database

    async def init(self) -> None:
        try:
            await self.database.init()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to initialise database: {e}") from e

    async def close(self) -> None:
        await self.database.dispose()

    async def list_conversations(self, owner_id: str) -> List[Conversation]:
        try:
            async with self.database.session() as session:
                stmt = (
                    select(ConversationModel)
                    .where(ConversationModel.user_id == owner_id)
                    .order_by(desc(ConversationModel.created_at))
                )
                result = await session.exec(stmt)
                return [Conversation.model_validate(row) for row in result.all()]
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    async def get_conversation(self, owner_id: str, conversation_id: str) -> Optional[Conversation]:
        try:
            async with self.database.session() as session:
                inst = await session.get(ConversationModel, conversation_id)
                if not inst or inst.user_id != owner_id:
                    return None
                return Conversation.model_validate(inst)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    async def create_conversation(self, owner_id: str, title: str) -> Conversation:
        try:
            async with self.database.session() as session:
                obj = ConversationModel(title=title, user_id=owner_id)
                session.add(obj)
                await session.flush()
                await session.refresh(obj)
                return Conversation.model_validate(obj)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    async def delete_conversation(self, owner_id: str, conversation_id: str) -> None:
        try:
            # Messages first (no relationship cascade defined)
            async with self.database.session() as session:
                msg_stmt = (
                    select(MessageModel)
                    .where(MessageModel.conversation_id == conversation_id)
                    .where(MessageModel.user_id == owner_id)
                )
                res = await session.exec(msg_stmt)
                for m in res.all():
                    await session.delete(m)
            async with self.database.session() as session:
                inst = await session.get(ConversationModel, conversation_id)
                if inst and inst.user_id == owner_id:
                    await session.delete(inst)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        logger.info("Deleted conversation id=%s", conversation_id)

    async def list_messages(self, owner_id: str, conversation_id: str) -> List[Message]:
        try:
            async with self.database.session() as session:
                stmt = (
                    select(MessageModel)
                    .where(MessageModel.conversation_id == conversation_id)
                    .where(MessageModel.user_id == owner_id)
                    .order_by(MessageModel.created_at)
                )
                result = await session.exec(stmt)
                return [Message.model_validate(row) for row in result.all()]
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    async def add_message(self, owner_id: str, conversation_id: str, role: Role, content: str) -> Message:
        try:
            async with self.database.session() as session:
                msg = MessageModel(conversation_id=conversation_id, user_id=owner_id, role=role, content=content)
                session.add(msg)
                await session.flush()
                await session.refresh(msg)
                return Message.model_validate(msg)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
