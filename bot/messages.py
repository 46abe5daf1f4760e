"""
ユーザー向けメッセージ
"""

GREETING = (
    "Привет! Пожалуйста, отправьте ссылку на видео с YouTube или YouTube Shorts, "
    "чтобы я мог скопировать отзывы."
)
ASK_VALID_URL = "Пожалуйста, отправьте правильную ссылку на YouTube или YouTube Shorts."
BUSY = "Я ещё копирую отзывы по предыдущей ссылке, пожалуйста подождите."
HARVEST_STARTED = "Копирую отзывы, пожалуйста подождите..."
PROGRESS_BASE = "Копирую отзывы"
HARVEST_DONE = "Завершено. Отправляю файлы..."
HARVEST_FAILED = "Произошла ошибка при копировании отзывов. Попробуйте снова."
NO_LINKS_YET = "Вы еще не отправили ни одной ссылки."
STATS_FAILED = "Ошибка при получении статистики."


def stats_message(link_count: int, links) -> str:
    """送信履歴の表示文"""
    return f"Вы отправили {link_count} ссылок. Вот ваши ссылки: {','.join(links)}"
