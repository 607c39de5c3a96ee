from recall import (
    Scheduler,
    Session,
    SessionResult,
    Card,
    Rating,
    InvalidArgumentError,
    InvalidStateError,
)

from copy import deepcopy
from datetime import datetime, timedelta, timezone
import pytest

REVIEW_DATETIME = datetime(2022, 11, 29, 12, 30, 0, 0, timezone.utc)


def make_deck():
    return [
        Card(
            card_id="mitochondria",
            question="Powerhouse of the cell?",
            answer="Mitochondria",
        ),
        Card(
            card_id="ohm",
            question="V = ?",
            answer="I * R",
            interval=6,
            ease_factor=2.2,
        ),
        Card(
            card_id="avogadro",
            question="Avogadro's number",
            answer="6.022e23",
            interval=1,
        ),
    ]


class TestSession:
    def test_run_session_score(self):
        scheduler = Scheduler()

        result = scheduler.run_session(
            cards=make_deck(),
            ratings=[Rating.Good, Rating.Again, Rating.Easy],
            review_datetime=REVIEW_DATETIME,
        )

        assert type(result) is SessionResult
        assert result.score == 2
        assert result.xp == 10
        assert len(result.cards) == 3
        assert len(result.review_logs) == 3

        assert [card.card_id for card in result.cards] == [
            "mitochondria",
            "ohm",
            "avogadro",
        ]
        assert [card.review_count for card in result.cards] == [1, 1, 1]
        assert result.cards[1].interval == 0
        assert [log.rating for log in result.review_logs] == [
            Rating.Good,
            Rating.Again,
            Rating.Easy,
        ]

    def test_run_session_string_ratings(self):
        scheduler = Scheduler()

        result = scheduler.run_session(
            cards=make_deck(),
            ratings=["good", "again", "easy"],
            review_datetime=REVIEW_DATETIME,
        )

        assert result.score == 2

        with pytest.raises(InvalidArgumentError):
            scheduler.run_session(
                cards=make_deck(),
                ratings=["good", "meh", "easy"],
                review_datetime=REVIEW_DATETIME,
            )

    def test_empty_session(self):
        scheduler = Scheduler()

        result = scheduler.run_session(cards=[], ratings=[])

        assert result.cards == ()
        assert result.review_logs == ()
        assert result.score == 0
        assert result.xp == 0

        session = Session(scheduler=scheduler, cards=[])
        assert session.is_finished
        assert session.current_card is None
        assert session.result() == result

    def test_mismatched_ratings(self):
        scheduler = Scheduler()

        with pytest.raises(InvalidArgumentError):
            scheduler.run_session(cards=make_deck(), ratings=[Rating.Good])

        with pytest.raises(InvalidArgumentError):
            scheduler.run_session(cards=[], ratings=[Rating.Good])

    def test_cards_are_scheduled_independently(self):
        scheduler = Scheduler()
        deck = make_deck()
        deck_copy = deepcopy(deck)
        ratings = [Rating.Hard, Rating.Easy, Rating.Again]

        result = scheduler.run_session(
            cards=deck, ratings=ratings, review_datetime=REVIEW_DATETIME
        )

        for card, rating, session_card in zip(deck, ratings, result.cards):
            expected_card, _ = scheduler.review_card(
                card=card, rating=rating, review_datetime=REVIEW_DATETIME
            )
            assert session_card == expected_card

        # the input deck is left untouched
        assert deck == deck_copy
        assert [card.review_count for card in deck] == [0, 0, 0]

    def test_session_step_by_step(self):
        scheduler = Scheduler()
        deck = make_deck()

        session = Session(scheduler=scheduler, cards=deck)

        assert session.remaining == 3
        assert session.current_card == deck[0]
        assert not session.is_finished

        with pytest.raises(InvalidStateError):
            session.result()

        reviewed_card = session.rate(Rating.Easy, review_datetime=REVIEW_DATETIME)

        assert reviewed_card.card_id == deck[0].card_id
        assert reviewed_card.interval == 4
        assert reviewed_card.due == REVIEW_DATETIME + timedelta(days=4)
        assert session.score == 1
        assert session.remaining == 2
        assert session.current_card == deck[1]

        session.rate("hard", review_datetime=REVIEW_DATETIME, review_duration=2500)
        assert session.score == 1

        session.rate(Rating.Good, review_datetime=REVIEW_DATETIME)
        assert session.score == 2
        assert session.is_finished
        assert session.current_card is None

        with pytest.raises(InvalidStateError):
            session.rate(Rating.Good)

        result = session.result()
        assert result.score == 2
        assert result.review_logs[1].review_duration == 2500
        assert result.cards[2].interval == 2.5

    def test_invalid_rating_does_not_advance(self):
        session = Session(scheduler=Scheduler(), cards=make_deck())

        with pytest.raises(InvalidArgumentError):
            session.rate("perfect")

        assert session.remaining == 3
        assert session.score == 0

    def test_session_over_repeated_days(self):
        scheduler = Scheduler()
        deck = [Card(card_id="loop")]

        review_datetime = REVIEW_DATETIME
        for _ in range(3):
            result = scheduler.run_session(
                cards=deck, ratings=[Rating.Easy], review_datetime=review_datetime
            )
            deck = list(result.cards)
            review_datetime = deck[0].due

        assert deck[0].mastered is True
        assert deck[0].review_count == 3

        result = scheduler.run_session(
            cards=deck, ratings=[Rating.Again], review_datetime=review_datetime
        )

        assert result.score == 0
        assert result.cards[0].mastered is False

    def test_run_session_default_datetime_is_shared(self):
        scheduler = Scheduler()

        before = datetime.now(timezone.utc)
        result = scheduler.run_session(
            cards=make_deck(), ratings=[Rating.Good, Rating.Good, Rating.Good]
        )

        review_datetimes = {log.review_datetime for log in result.review_logs}

        assert len(review_datetimes) == 1
        assert review_datetimes.pop() >= before
