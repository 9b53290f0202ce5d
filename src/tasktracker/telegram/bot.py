import logging

from aiogram import Bot, Dispatcher

from tasktracker.config import settings
from tasktracker.telegram.handlers import setup_handlers

logger = logging.getLogger(__name__)


class TaskTrackerBot:
    def __init__(self, token: str | None = None):
        self.token = token or settings.telegram_bot_token
        self.bot = Bot(token=self.token)
        self.dp = Dispatcher()
        setup_handlers(self.dp)

    async def start(self) -> None:
        logger.info("Starting task tracker bot...")
        try:
            await self.dp.start_polling(self.bot)
        finally:
            await self.bot.session.close()

    async def stop(self) -> None:
        await self.dp.stop_polling()
        await self.bot.session.close()

    async def send_message(self, chat_id: int | str, text: str) -> None:
        await self.bot.send_message(chat_id=chat_id, text=text)
