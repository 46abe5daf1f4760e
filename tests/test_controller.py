"""
Tests for the chat session flow.
"""

import asyncio
import os
import threading

import pytest
from unittest.mock import MagicMock

from bot import messages
from bot.controller import HarvestController, default_harvester_factory
from bot.sessions import SessionState
from harvester.batch_writer import BatchWriter
from harvester.comment_harvester import CommentHarvester
from harvester.config import Config
from harvester.exceptions import StoreFailure
from harvester.models import CommentPage
from harvester.user_store import UserStore

CHAT_ID = 7
VIDEO_URL = "https://www.youtube.com/watch?v=abc123"


class PerVideoFetcher:
    """Serves 12 pages of 100 comments tagged with the requested video id"""

    PAGES = 12

    async def fetch_page(self, video_id, page_token=""):
        index = int(page_token or 0)
        await asyncio.sleep(0)
        items = [f"{video_id}-{index}-{i}" for i in range(100)]
        next_token = str(index + 1) if index + 1 < self.PAGES else None
        return CommentPage(items=items, next_page_token=next_token)


class FakeTransport:
    """Records everything the controller sends"""

    def __init__(self):
        self.texts = []
        self.edits = []
        self.files = []
        self.paths = []
        self._next_id = 100

    async def send_text(self, chat_id, text):
        self.texts.append((chat_id, text))
        self._next_id += 1
        return self._next_id

    async def edit_text(self, chat_id, message_id, text):
        self.edits.append((chat_id, message_id, text))

    async def send_file(self, chat_id, path):
        self.paths.append((chat_id, path))
        with open(path, encoding="utf-8") as f:
            self.files.append((chat_id, os.path.basename(path), f.read()))


class TestHarvestController:
    """Commands, link handling and delivery"""

    @pytest.fixture
    def transport(self):
        return FakeTransport()

    @pytest.fixture
    def store(self, tmp_path):
        store = UserStore(str(tmp_path / "users.db"))
        store.init()
        return store

    @pytest.fixture
    def pages(self):
        return [["great video", "please subscribe"], ["nice one"]]

    @pytest.fixture
    def fetchers(self):
        return []

    @pytest.fixture
    def controller(self, tmp_path, transport, store, pages, fetchers, fake_fetcher):
        def factory(chat_id):
            fetcher = fake_fetcher(pages)
            fetchers.append(fetcher)
            writer = BatchWriter(str(tmp_path / "comments" / str(chat_id)))
            return CommentHarvester(fetcher, writer)

        return HarvestController(transport, store, harvester_factory=factory,
                                 progress_interval=10)

    @pytest.mark.asyncio
    async def test_text_before_start_is_ignored(self, controller, transport, fetchers):
        await controller.handle_text(CHAT_ID, VIDEO_URL)

        assert transport.texts == []
        assert fetchers == []
        assert await controller.sessions.peek(CHAT_ID) is None

    @pytest.mark.asyncio
    async def test_start_greets_and_waits_for_url(self, controller, transport):
        await controller.handle_start(CHAT_ID)

        assert transport.texts == [(CHAT_ID, messages.GREETING)]
        session = await controller.sessions.get(CHAT_ID)
        assert session.state == SessionState.WAITING_FOR_URL

    @pytest.mark.asyncio
    async def test_non_link_text_asks_for_url(self, controller, transport, fetchers):
        await controller.handle_start(CHAT_ID)
        await controller.handle_text(CHAT_ID, "hello")

        assert transport.texts[-1] == (CHAT_ID, messages.ASK_VALID_URL)
        assert fetchers == []

    @pytest.mark.asyncio
    async def test_unsupported_link_asks_for_url(self, controller, transport, fetchers):
        await controller.handle_start(CHAT_ID)
        await controller.handle_text(CHAT_ID, "https://example.com/watch")

        assert transport.texts[-1] == (CHAT_ID, messages.ASK_VALID_URL)
        assert fetchers == []

    @pytest.mark.asyncio
    async def test_successful_harvest(self, controller, transport, store):
        await controller.handle_start(CHAT_ID)
        await controller.handle_text(CHAT_ID, VIDEO_URL)

        assert (CHAT_ID, messages.HARVEST_STARTED) in transport.texts
        assert transport.edits[-1][2] == messages.HARVEST_DONE
        assert transport.files == [(CHAT_ID, "comments_final.txt", "great video\nnice one")]
        assert store.get(CHAT_ID).links == [VIDEO_URL]

        session = await controller.sessions.get(CHAT_ID)
        assert session.state == SessionState.WAITING_FOR_URL

    @pytest.mark.asyncio
    async def test_batch_files_are_sent_before_final(self, controller, transport, pages):
        pages[:] = [[f"c{i}" for i in range(100)] for _ in range(12)]

        await controller.handle_start(CHAT_ID)
        await controller.handle_text(CHAT_ID, VIDEO_URL)

        names = [name for _, name, _ in transport.files]
        assert names == ["comments_batch_1.txt", "comments_final.txt"]
        assert transport.files[-1][2].count("\n") == 199

    @pytest.mark.asyncio
    async def test_fetch_failure_reports_once(self, controller, transport, store, pages,
                                              fetchers, fake_fetcher, tmp_path):
        def failing_factory(chat_id):
            fetcher = fake_fetcher(pages, fail_at=2)
            fetchers.append(fetcher)
            return CommentHarvester(fetcher, BatchWriter(str(tmp_path / "comments")))

        controller.harvester_factory = failing_factory
        await controller.handle_start(CHAT_ID)
        await controller.handle_text(CHAT_ID, VIDEO_URL)

        assert [t for _, t in transport.texts].count(messages.HARVEST_FAILED) == 1
        assert transport.files == []
        assert store.get(CHAT_ID) is None
        session = await controller.sessions.get(CHAT_ID)
        assert session.state == SessionState.WAITING_FOR_URL

    @pytest.mark.asyncio
    async def test_store_failure_is_not_fatal(self, controller, transport):
        controller.store = MagicMock()
        controller.store.record_submission.side_effect = StoreFailure(CHAT_ID)

        await controller.handle_start(CHAT_ID)
        await controller.handle_text(CHAT_ID, VIDEO_URL)

        assert len(transport.files) == 1
        assert messages.HARVEST_FAILED not in [t for _, t in transport.texts]

    @pytest.mark.asyncio
    async def test_busy_while_harvesting(self, controller, transport, fetchers):
        await controller.handle_start(CHAT_ID)
        session = await controller.sessions.get(CHAT_ID)
        session.state = SessionState.HARVESTING

        await controller.handle_text(CHAT_ID, VIDEO_URL)

        assert transport.texts[-1] == (CHAT_ID, messages.BUSY)
        assert fetchers == []

    @pytest.mark.asyncio
    async def test_stats_without_links(self, controller, transport):
        await controller.handle_stats(CHAT_ID)

        assert transport.texts == [(CHAT_ID, messages.NO_LINKS_YET)]

    @pytest.mark.asyncio
    async def test_stats_after_harvests(self, controller, transport):
        await controller.handle_start(CHAT_ID)
        await controller.handle_text(CHAT_ID, VIDEO_URL)
        await controller.handle_text(CHAT_ID, "https://youtu.be/xyz")
        await controller.handle_stats(CHAT_ID)

        assert transport.texts[-1] == (
            CHAT_ID, messages.stats_message(2, [VIDEO_URL, "https://youtu.be/xyz"])
        )

    @pytest.mark.asyncio
    async def test_stats_store_failure(self, controller, transport):
        controller.store = MagicMock()
        controller.store.get.side_effect = StoreFailure(CHAT_ID)

        await controller.handle_stats(CHAT_ID)

        assert transport.texts == [(CHAT_ID, messages.STATS_FAILED)]

    @pytest.mark.asyncio
    async def test_final_file_written_off_the_event_loop(self, controller, transport, tmp_path,
                                                         pages, fake_fetcher):
        loop_thread = threading.get_ident()
        write_threads = []

        class RecordingWriter(BatchWriter):
            def write(self, comments, filename, enforce_retention=True):
                write_threads.append(threading.get_ident())
                return super().write(comments, filename, enforce_retention)

        controller.harvester_factory = lambda chat_id: CommentHarvester(
            fake_fetcher(pages), RecordingWriter(str(tmp_path / "recorded" / str(chat_id)))
        )
        await controller.handle_start(CHAT_ID)
        await controller.handle_text(CHAT_ID, VIDEO_URL)

        assert len(transport.files) == 1
        assert write_threads and loop_thread not in write_threads


class TestPerChatNamespace:
    """Each chat writes into its own directory"""

    @pytest.fixture
    def comments_dir(self, tmp_path, monkeypatch):
        directory = tmp_path / "comments"
        monkeypatch.setattr(Config, "COMMENTS_DIR", str(directory))
        return directory

    def test_default_factory_uses_chat_directory(self, comments_dir, monkeypatch):
        monkeypatch.setattr("harvester.page_fetcher.build", MagicMock())

        first = default_harvester_factory(1)
        second = default_harvester_factory(2)

        assert first.writer.directory == str(comments_dir / "1")
        assert second.writer.directory == str(comments_dir / "2")
        assert first.writer.directory != second.writer.directory
        assert first.fetcher is not second.fetcher

    @pytest.mark.asyncio
    async def test_concurrent_chats_get_only_their_own_files(self, comments_dir, tmp_path, monkeypatch):
        monkeypatch.setattr("bot.controller.PageFetcher", PerVideoFetcher)
        transport = FakeTransport()
        store = UserStore(str(tmp_path / "users.db"))
        store.init()
        controller = HarvestController(transport, store, progress_interval=10)

        await controller.handle_start(1)
        await controller.handle_start(2)
        await asyncio.gather(
            controller.handle_text(1, "https://www.youtube.com/watch?v=aaa"),
            controller.handle_text(2, "https://youtu.be/bbb"),
        )

        for chat_id, video_id in ((1, "aaa"), (2, "bbb")):
            names = [name for cid, name, _ in transport.files if cid == chat_id]
            assert names == ["comments_batch_1.txt", "comments_final.txt"]
            for cid, _, content in transport.files:
                if cid == chat_id:
                    assert all(line.startswith(f"{video_id}-") for line in content.split("\n"))
            for cid, path in transport.paths:
                if cid == chat_id:
                    assert os.path.dirname(path) == str(comments_dir / str(chat_id))
