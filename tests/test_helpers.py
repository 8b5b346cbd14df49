"""
Tests for splitting long replies under Discord's message limit.
"""

import asyncio
from unittest.mock import AsyncMock

from utils.helpers import send_chunked_message, split_message


class TestSplitMessage:

    def test_short_message_untouched(self):
        assert split_message("hello") == ["hello"]

    def test_splits_on_lines(self):
        chunks = split_message("aaaa\nbbbb\ncccc", max_length=10)
        assert chunks == ["aaaa\nbbbb\n", "cccc\n"]

    def test_long_line_is_cut(self):
        message = "aaaa\n" + "b" * 25 + "\ncc"
        chunks = split_message(message, max_length=10)
        assert all(len(chunk) <= 10 for chunk in chunks)
        assert "".join(chunks).replace("\n", "") == message.replace("\n", "")


class TestSendChunkedMessage:

    def test_reference_only_on_first_chunk(self):
        channel = AsyncMock()
        reference = object()
        message = "\n".join(["x" * 1500, "y" * 1500])

        asyncio.run(send_chunked_message(channel, message, reference=reference))

        assert channel.send.await_count == 2
        first, second = channel.send.await_args_list
        assert first.kwargs == {'reference': reference}
        assert second.kwargs == {}
