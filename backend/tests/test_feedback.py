"""Tests for feedback collection and rating statistics."""

import pytest

from tableside.core.exceptions import NotFoundError, ValidationError
from tableside.services import FeedbackService


@pytest.fixture
def service(store):
    return FeedbackService(store)


class TestFeedback:
    def test_create_and_escape_comment(self, service, tables):
        feedback = service.create(3, rating=5, comment="<b>Great</b>  food")
        assert feedback.rating == 5
        assert feedback.comment == "&lt;b&gt;Great&lt;/b&gt; food"

    def test_rating_range(self, service, tables):
        for rating in (0, 6):
            with pytest.raises(ValidationError):
                service.create(3, rating=rating)
        assert service.list_feedback() == []

    def test_unknown_table(self, service):
        with pytest.raises(NotFoundError):
            service.create(11, rating=4)

    def test_unknown_order(self, service, tables):
        with pytest.raises(NotFoundError):
            service.create(3, rating=4, order_id=123)

    def test_newest_first(self, service, tables):
        first = service.create(3, rating=4)
        second = service.create(5, rating=2)
        assert [f.id for f in service.list_feedback()] == [second.id, first.id]
        assert [f.id for f in service.list_feedback(table_number=3)] == [first.id]


class TestFeedbackStats:
    def test_empty(self, service):
        stats = service.stats()
        assert stats["average_rating"] == 0.0
        assert stats["total_reviews"] == 0
        assert stats["distribution"] == {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}

    def test_average_and_distribution(self, service, tables):
        for rating in (5, 4, 4):
            service.create(3, rating=rating)
        stats = service.stats()
        assert stats["average_rating"] == 4.33
        assert stats["total_reviews"] == 3
        assert stats["distribution"]["4"] == 2
        assert stats["distribution"]["5"] == 1
