"""Publicacion de respuestas del desarrollador (un unico slot por review)."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from playreviews.domain.enums import ReviewStatus
from playreviews.domain.errors import InternalError, InvalidArgument, NotFound
from playreviews.domain.models import InternalMetadata, ReplyData
from playreviews.logging_utils import get_logger
from playreviews.repositories.review_store import ReviewStore

logger = get_logger(__name__)

MAX_REPLY_LENGTH = 350


class ReplyService:
    def __init__(self, store: ReviewStore, max_length: int = MAX_REPLY_LENGTH) -> None:
        self._store = store
        self._max_length = max_length

    def validate(self, reply_text: object) -> str:
        if not isinstance(reply_text, str):
            raise InvalidArgument("replyText must be a string")
        if not reply_text.strip():
            raise InvalidArgument("replyText must not be empty")
        if len(reply_text) > self._max_length:
            raise InvalidArgument(
                f"replyText exceeds maximum length ({len(reply_text)}/{self._max_length})"
            )
        return reply_text

    def add_reply(self, review_id: str, reply_text: str) -> ReplyData:
        """Publica (o sobreescribe) la respuesta de una review.

        Cada llamada genera un `replyId` y `replyDate` nuevos; no hay
        deduplicacion por texto. El estado interno pasa a `responded`
        salvo que ya este `resolved`.
        """
        text = self.validate(reply_text)
        if not isinstance(review_id, str):
            raise InvalidArgument("reviewId must be a string")

        found = self._store.find_with_generation(review_id)
        if found is None:
            raise NotFound(f"Review not found: {review_id}")
        review, generation = found

        reply = ReplyData(
            reply_id=f"reply-{uuid4().hex}",
            reply_text=text,
            reply_date=datetime.now(timezone.utc),
        )
        review.reply_data = reply

        meta = review.internal_metadata or InternalMetadata()
        if meta.status != ReviewStatus.RESOLVED:
            meta.status = ReviewStatus.RESPONDED
        review.internal_metadata = meta

        self._store.upsert_review(review, expected_generation=generation)

        stored = self._store.find_by_id(review_id)
        if stored is None or stored.reply_data is None or stored.reply_data.reply_id != reply.reply_id:
            logger.error("Reply %s not retrievable after write on review %s", reply.reply_id, review_id)
            raise InternalError("Failed to retrieve reply data")

        logger.info("Reply %s posted on review %s", reply.reply_id, review_id)
        return stored.reply_data
