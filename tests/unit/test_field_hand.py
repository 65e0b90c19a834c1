"""场、手牌与玩家测试"""
import pytest

from daifugo.cards import Rank, str_to_cards
from daifugo.classifier import PlayClassifier
from daifugo.field import Field
from daifugo.hand import Hand
from daifugo.players import Player, Standings


def play_of(s):
    return PlayClassifier.classify(str_to_cards(s))


class TestField:
    """场测试"""

    def test_empty(self):
        field = Field()
        assert field.is_empty
        assert field.current_play is None
        assert field.current_owner is None
        assert field.previous_entry is None
        assert len(field) == 0

    def test_with_play_is_append_only(self):
        field = Field()
        first = play_of("S5")
        new_field = field.with_play(first, "p1")
        assert field.is_empty
        assert new_field.current_play is first
        assert new_field.current_owner == "p1"

    def test_history_order(self):
        a, b, c = play_of("S5"), play_of("S6"), play_of("S7")
        field = Field().with_play(a, "p1").with_play(b, "p2").with_play(c, "p3")
        assert len(field) == 3
        assert field.previous_entry.play is b
        assert [e.play for e in field.last(2)] == [b, c]
        assert field.last(0) == ()

    def test_immutable(self):
        field = Field()
        with pytest.raises(AttributeError):
            field.history = ()


class TestHand:
    """手牌测试"""

    def test_add_and_size(self):
        hand = Hand()
        hand.add(str_to_cards("S3 H4"))
        assert hand.size() == 2
        assert len(hand) == 2
        assert not hand.is_empty

    def test_remove_by_id(self):
        cards = str_to_cards("S3 H4 D5")
        hand = Hand(cards)
        hand.remove([cards[1]])
        assert hand.card_ids() == frozenset({"S3", "D5"})

    def test_remove_missing_raises(self):
        hand = Hand(str_to_cards("S3"))
        with pytest.raises(ValueError):
            hand.remove(str_to_cards("H4"))
        assert hand.size() == 1

    def test_remove_one_of_two_jokers(self):
        jokers = str_to_cards("JK JK")
        hand = Hand(jokers)
        hand.remove([jokers[0]])
        assert hand.card_ids() == frozenset({jokers[1].id})

    def test_contains_ids(self):
        hand = Hand(str_to_cards("S3 H4"))
        assert hand.contains_ids(["S3"])
        assert not hand.contains_ids(["S3", "D5"])

    def test_sort(self):
        hand = Hand(str_to_cards("S2 S3 JK DA"))
        hand.sort()
        assert [c.rank for c in hand] == [Rank.THREE, Rank.ACE, Rank.TWO, Rank.JOKER]
        hand.sort(reverse_strength=True)
        assert hand.cards[0].rank == Rank.JOKER

    def test_cards_is_snapshot(self):
        hand = Hand(str_to_cards("S3"))
        snapshot = hand.cards
        hand.add(str_to_cards("H4"))
        assert len(snapshot) == 1


class TestStandings:
    """名次信息测试"""

    def test_was_demoted(self):
        standings = Standings(city_fall_victim_id="p2")
        assert standings.was_demoted("p2")
        assert not standings.was_demoted("p1")

    def test_would_place_last_after(self):
        standings = Standings(unfinished_ids=("p1", "p2"))
        assert standings.would_place_last_after("p1") == "p2"

    def test_would_place_last_after_many_left(self):
        standings = Standings(unfinished_ids=("p1", "p2", "p3"))
        assert standings.would_place_last_after("p1") is None


class TestPlayer:
    """玩家测试"""

    def test_defaults(self):
        player = Player("p1")
        assert player.hand.is_empty
        assert not player.is_finished
        assert player.finish_position is None

    def test_independent_hands(self):
        a, b = Player("a"), Player("b")
        a.hand.add(str_to_cards("S3"))
        assert b.hand.is_empty
