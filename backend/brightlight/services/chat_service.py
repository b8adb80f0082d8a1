"""Supportive chat replies on top of the completion client."""
from __future__ import annotations

import logging

from brightlight.services.completion_client import TextCompletionClient

logger = logging.getLogger(__name__)

SUMMARY_WORD_LIMIT = 15


class ChatService:
    def __init__(self, completion_client: TextCompletionClient):
        self._client = completion_client

    def reply(self, message: str) -> str:
        return self._client.complete(message).strip()

    def summarize(self, text: str) -> str:
        prompt = f"Summarize the following text in no more than {SUMMARY_WORD_LIMIT} words:\n\n{text}\n\nSummary:"
        summary = self._client.complete(prompt).strip()
        words = summary.split()
        if len(words) > SUMMARY_WORD_LIMIT:
            logger.debug("Trimming %d-word summary", len(words))
            summary = " ".join(words[:SUMMARY_WORD_LIMIT])
        return summary
