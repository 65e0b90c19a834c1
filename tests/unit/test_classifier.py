"""牌型分类器测试"""
import pytest

from daifugo.cards import Suit, Rank, RANKS, SUITS, make_card, str_to_cards
from daifugo.plays import PlayType, ClassifyOptions, TUNNEL_STRENGTH, SPADE_STAIR_STRENGTH
from daifugo.classifier import PlayClassifier


ALL_OPTIONS = ClassifyOptions(
    skip_stair=True,
    double_stair=True,
    tunnel=True,
    spade_stair=True,
    taepodong=True,
)


def classify(s, options=None):
    return PlayClassifier.classify(str_to_cards(s), options)


class TestSingleAndGroups:
    """单张/同数测试"""

    @pytest.mark.parametrize("suit", SUITS)
    @pytest.mark.parametrize("rank", RANKS)
    def test_single(self, suit, rank):
        card = make_card(suit, rank)
        play = PlayClassifier.classify([card])
        assert play.play_type == PlayType.SINGLE
        assert play.strength == card.strength

    def test_joker_single(self):
        play = classify("JK")
        assert play.play_type == PlayType.SINGLE
        assert play.strength == 16

    def test_pair(self):
        play = classify("S5 H5")
        assert play.play_type == PlayType.PAIR
        assert play.strength == 5

    def test_pair_with_joker(self):
        play = classify("S9 JK")
        assert play.play_type == PlayType.PAIR
        assert play.strength == 9

    def test_joker_only_pair_rejected(self):
        assert classify("JK JK") is None
        assert classify("JK JK", ALL_OPTIONS) is None

    @pytest.mark.parametrize("a, b", [("S3", "H4"), ("DK", "CA"), ("H2", "S3")])
    def test_cross_rank_pair_rejected(self, a, b):
        assert classify(f"{a} {b}") is None

    def test_triple(self):
        play = classify("S7 H7 JK")
        assert play.play_type == PlayType.TRIPLE
        assert play.strength == 7

    def test_quad(self):
        play = classify("S2 H2 D2 C2")
        assert play.play_type == PlayType.QUAD
        assert play.strength == 15

    def test_empty(self):
        assert PlayClassifier.classify([]) is None


class TestStairs:
    """阶梯测试"""

    def test_stair(self):
        play = classify("S3 S4 S5")
        assert play.play_type == PlayType.STAIR
        assert play.strength == 5

    def test_long_stair(self):
        play = classify("H9 H10 HJ HQ HK")
        assert play.play_type == PlayType.STAIR
        assert play.strength == 13

    def test_stair_requires_one_suit(self):
        assert classify("S3 H4 S5") is None

    def test_stair_gap_rejected(self):
        assert classify("S3 S4 S6") is None

    def test_stair_duplicate_rejected(self):
        assert classify("S3 S4 S4 S5") is None

    def test_stair_with_joker_rejected(self):
        assert classify("S3 S4 JK") is None

    def test_unit_diff_is_stair_not_skip(self):
        play = classify("D5 D6 D7", ALL_OPTIONS)
        assert play.play_type == PlayType.STAIR

    def test_skip_stair(self):
        play = classify("D3 D5 D7", ALL_OPTIONS)
        assert play.play_type == PlayType.SKIP_STAIR
        assert play.skip_diff == 2
        assert play.strength == 7

    def test_skip_stair_disabled(self):
        assert classify("D3 D5 D7") is None

    def test_skip_stair_diff_out_of_range(self):
        assert classify("D3 DJ", ALL_OPTIONS) is None
        assert classify("D3 D10 DK", ALL_OPTIONS) is None

    def test_skip_stair_irregular_diff(self):
        assert classify("D3 D5 D8", ALL_OPTIONS) is None

    def test_emperor(self):
        play = classify("S5 H6 D7 C8")
        assert play.play_type == PlayType.EMPEROR
        assert play.strength == 8

    def test_double_stair(self):
        play = classify("S4 H4 S5 H5 S6 H6", ALL_OPTIONS)
        assert play.play_type == PlayType.DOUBLE_STAIR
        assert play.strength == 6

    def test_double_stair_disabled(self):
        assert classify("S4 H4 S5 H5 S6 H6") is None

    def test_tunnel(self):
        play = classify("SA S2 S3", ALL_OPTIONS)
        assert play.play_type == PlayType.TUNNEL
        assert play.strength == TUNNEL_STRENGTH

    def test_tunnel_disabled(self):
        assert classify("SA S2 S3") is None

    def test_spade_stair(self):
        play = classify("S2 JK S3", ALL_OPTIONS)
        assert play.play_type == PlayType.SPADE_STAIR
        assert play.strength == SPADE_STAIR_STRENGTH

    def test_spade_stair_requires_spades(self):
        assert classify("H2 JK H3", ALL_OPTIONS) is None


class TestTaepodong:
    """大浦洞测试"""

    def test_taepodong(self):
        play = classify("S9 H9 D9 C9 JK JK", ALL_OPTIONS)
        assert play.play_type == PlayType.TAEPODONG
        assert play.strength == 9

    def test_taepodong_disabled(self):
        assert classify("S9 H9 D9 C9 JK JK") is None

    def test_taepodong_mixed_ranks(self):
        assert classify("S9 H9 D9 C8 JK JK", ALL_OPTIONS) is None


class TestSpecialCombinations:
    """固定组合测试"""

    ENABLED = frozenset(PlayType)

    def special(self, s):
        return PlayClassifier.classify_special(str_to_cards(s), self.ENABLED)

    def test_cross_dressing(self):
        play = self.special("SQ HK")
        assert play.play_type == PlayType.CROSS_DRESSING
        assert play.strength == Rank.QUEEN

    def test_cross_dressing_uneven(self):
        assert self.special("SQ HQ HK") is None

    def test_southern_cross(self):
        assert self.special("S3 H3 D9 C6").play_type == PlayType.SOUTHERN_CROSS

    def test_heiankyo_same_suit(self):
        assert self.special("S7 S9 S4").play_type == PlayType.HEIANKYO_FLOW
        assert self.special("S7 H9 S4") is None

    def test_cyclone(self):
        assert self.special("C3 CA C9 C6").play_type == PlayType.CYCLONE

    def test_konagona_same_color(self):
        assert self.special("H5 D7 H7 D5").play_type == PlayType.KONAGONA
        assert self.special("H5 S7 H7 D5") is None

    def test_yoroshiku(self):
        assert self.special("S4 H6 D4 C9").play_type == PlayType.YOROSHIKU

    def test_disabled(self):
        assert PlayClassifier.classify_special(str_to_cards("SQ HK"), frozenset()) is None


class TestCanFollow:
    """跟牌判定测试"""

    def test_stronger_single(self):
        assert PlayClassifier.can_follow(classify("S5"), classify("S6"), False)
        assert not PlayClassifier.can_follow(classify("S6"), classify("S5"), False)

    def test_inverted(self):
        assert PlayClassifier.can_follow(classify("S6"), classify("S5"), True)
        assert not PlayClassifier.can_follow(classify("S5"), classify("S6"), True)

    @pytest.mark.parametrize("s", [
        "S5", "S5 H5", "S5 H5 D5", "S5 H5 D5 C5", "S3 S4 S5", "S5 H6 D7 C8",
        "SA S2 S3", "S2 JK S3", "D3 D5 D7", "S4 H4 S5 H5 S6 H6", "S9 H9 D9 C9 JK JK",
    ])
    def test_identical_play_cannot_follow(self, s):
        play = classify(s, ALL_OPTIONS)
        assert play is not None
        assert not PlayClassifier.can_follow(play, play, False)

    def test_type_must_match(self):
        assert not PlayClassifier.can_follow(classify("S5"), classify("S6 H6"), False)

    def test_stair_length_must_match(self):
        assert not PlayClassifier.can_follow(classify("S3 S4 S5"), classify("H6 H7 H8 H9"), False)

    def test_skip_diff_must_match(self):
        previous = classify("D3 D5 D7", ALL_OPTIONS)
        assert not PlayClassifier.can_follow(previous, classify("H4 H7 H10", ALL_OPTIONS), False)
        assert PlayClassifier.can_follow(previous, classify("H4 H6 H8", ALL_OPTIONS), False)

    def test_tunnel_loses_to_stair(self):
        tunnel = classify("SA S2 S3", ALL_OPTIONS)
        stair = classify("H3 H4 H5")
        assert PlayClassifier.can_follow(tunnel, stair, False)
        assert not PlayClassifier.can_follow(stair, tunnel, False)
        assert not PlayClassifier.can_follow(stair, tunnel, True)

    def test_spade_stair_beats_stair(self):
        spade = classify("S2 JK S3", ALL_OPTIONS)
        stair = classify("HQ HK HA")
        assert PlayClassifier.can_follow(stair, spade, False)
        assert PlayClassifier.can_follow(stair, spade, True)
        assert not PlayClassifier.can_follow(spade, stair, False)

    def test_taepodong_beats_everything(self):
        taepodong = classify("S4 H4 D4 C4 JK JK", ALL_OPTIONS)
        assert PlayClassifier.can_follow(classify("S2"), taepodong, False)
        assert PlayClassifier.can_follow(classify("S2 H2 D2 C2"), taepodong, True)
        assert not PlayClassifier.can_follow(taepodong, classify("S2"), False)

    def test_inversion_parity(self):
        low, high = classify("S4"), classify("S9")
        for a in (False, True):
            for b in (False, True):
                invert = a != b
                assert PlayClassifier.can_follow(low, high, invert) == (not invert)
                assert PlayClassifier.can_follow(high, low, invert) == invert

    def test_same_shape(self):
        assert PlayClassifier.same_shape(classify("S3 S4 S5"), classify("SA S2 S3", ALL_OPTIONS))
        assert not PlayClassifier.same_shape(classify("S5 H5"), classify("S5 H5 D5"))
