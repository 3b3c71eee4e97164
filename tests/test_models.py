from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from playreviews.domain.enums import ReviewStatus
from playreviews.domain.errors import InvalidArgument
from playreviews.domain.models import InternalMetadata, ReplyData, Review, ReviewFilter


def test_review_serializes_with_camel_case_aliases(make_review) -> None:
    payload = make_review("r1", reply_days=1).to_wire()
    assert payload["appPackage"] == "com.example.app"
    assert payload["lastUpdateDate"].startswith("2025-01-01")
    assert payload["deviceMetadata"]["osVersion"] == "14"
    assert payload["replyData"]["replyId"] == "reply-r1"
    assert "internalMetadata" not in payload


def test_review_roundtrip_from_wire(make_review) -> None:
    review = make_review("r1", status=ReviewStatus.FLAGGED, tags=["a"])
    restored = Review.model_validate(review.to_wire())
    assert restored == review


def test_review_rejects_rating_out_of_range(make_review) -> None:
    data = make_review("r1").to_wire()
    data["rating"] = 6
    with pytest.raises(ValidationError):
        Review.model_validate(data)


def test_review_rejects_update_before_creation(make_review) -> None:
    data = make_review("r1", days=5).to_wire()
    data["lastUpdateDate"] = "2024-12-01T00:00:00Z"
    with pytest.raises(ValidationError):
        Review.model_validate(data)


def test_reply_edit_date_must_follow_reply_date() -> None:
    with pytest.raises(ValidationError):
        ReplyData(
            reply_id="x",
            reply_text="t",
            reply_date=datetime(2025, 1, 2, tzinfo=timezone.utc),
            last_edit_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )


def test_naive_timestamps_are_utc() -> None:
    reply = ReplyData(reply_id="x", reply_text="t", reply_date=datetime(2025, 1, 1))
    assert reply.reply_date.tzinfo == timezone.utc


def test_internal_metadata_tags_deduplicated_in_order() -> None:
    meta = InternalMetadata(tags=["b", "a", "b", "c", "a"])
    assert meta.tags == ["b", "a", "c"]


def test_filter_parse_accepts_wire_names() -> None:
    flt = ReviewFilter.parse(
        {
            "minRating": 2,
            "startDate": "2025-01-01T00:00:00Z",
            "hasReply": True,
            "status": ["new", "flagged"],
            "unknownField": "ignored",
        }
    )
    assert flt.min_rating == 2
    assert flt.has_reply is True
    assert flt.status == [ReviewStatus.NEW, ReviewStatus.FLAGGED]
    assert flt.start_date == datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_filter_parse_empty_payload_is_unconstrained() -> None:
    assert ReviewFilter.parse(None) == ReviewFilter()
    assert ReviewFilter.parse({}) == ReviewFilter()


@pytest.mark.parametrize(
    "payload",
    [
        {"minRating": 0},
        {"maxRating": 6},
        {"startDate": "not-a-date"},
        {"status": ["archived"]},
        {"limit": "many"},
    ],
)
def test_filter_parse_rejects_malformed_values(payload: dict) -> None:
    with pytest.raises(InvalidArgument):
        ReviewFilter.parse(payload)


def test_filter_parse_rejects_non_object() -> None:
    with pytest.raises(InvalidArgument):
        ReviewFilter.parse(["minRating"])  # type: ignore[arg-type]


def test_filter_is_immutable() -> None:
    flt = ReviewFilter(min_rating=3)
    with pytest.raises(ValidationError):
        flt.min_rating = 4  # type: ignore[misc]
