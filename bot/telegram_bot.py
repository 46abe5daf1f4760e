"""
Telegram ボットモジュール
"""
from telegram import Bot, Update
from telegram.error import BadRequest
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from harvester.user_store import UserStore
from utils.logger import get_logger

from .controller import HarvestController

logger = get_logger(__name__)

class TelegramTransport:
    """python-telegram-bot の Bot をコントローラー向けにラップする"""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_text(self, chat_id: int, text: str) -> int:
        """メッセージを送信し、メッセージIDを返す"""
        message = await self.bot.send_message(chat_id=chat_id, text=text)
        return message.message_id

    async def edit_text(self, chat_id: int, message_id: int, text: str) -> None:
        """送信済みメッセージを編集する"""
        try:
            await self.bot.edit_message_text(text=text, chat_id=chat_id, message_id=message_id)
        except BadRequest as e:
            # 同じ内容での編集は無視する
            if "not modified" in str(e).lower():
                logger.debug(f"Message {message_id} not modified")
                return
            raise

    async def send_file(self, chat_id: int, path: str) -> None:
        """ファイルを送信する"""
        with open(path, "rb") as f:
            await self.bot.send_document(chat_id=chat_id, document=f)


def _controller(context: ContextTypes.DEFAULT_TYPE) -> HarvestController:
    return context.application.bot_data["controller"]


async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/start"""
    await _controller(context).handle_start(update.effective_chat.id)


async def cmd_stats(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/stats"""
    await _controller(context).handle_stats(update.effective_chat.id)


async def on_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """コマンド以外のテキストメッセージ"""
    if not update.message or not update.message.text:
        return
    await _controller(context).handle_text(update.effective_chat.id, update.message.text)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error(f"Unhandled error while processing update: {context.error}", exc_info=context.error)


def build_app(token: str, store: UserStore) -> Application:
    """
    Telegram アプリケーションを構築する

    Args:
        token: ボットトークン
        store: ユーザー送信履歴ストア

    Returns:
        Application: ハンドラ登録済みのアプリケーション
    """
    # 収集中も他のユーザーの更新を処理できるよう並行処理を有効にする
    app = Application.builder().token(token).concurrent_updates(True).build()
    app.bot_data["controller"] = HarvestController(TelegramTransport(app.bot), store)

    app.add_handler(CommandHandler("start", cmd_start))
    app.add_handler(CommandHandler("stats", cmd_stats))
    app.add_handler(MessageHandler(filters.TEXT & (~filters.COMMAND), on_message))
    app.add_error_handler(on_error)
    return app
