"""效果分析测试"""
import pytest

from daifugo.cards import Suit, str_to_cards
from daifugo.classifier import PlayClassifier
from daifugo.context import GameSnapshot, InversionFlags, LockState
from daifugo.effects import (
    TriggerEffect,
    TriggerEffectAnalyzer,
    EffectRule,
    EffectGroup,
    EFFECT_LABELS,
    EFFECT_RULES,
    revolution_effects,
)
from daifugo.field import Field
from daifugo.plays import PlayType, ClassifyOptions
from daifugo.settings import RuleSettings

ALL_OPTIONS = ClassifyOptions(
    skip_stair=True,
    double_stair=True,
    tunnel=True,
    spade_stair=True,
    taepodong=True,
)


def play_of(s):
    play = PlayClassifier.classify(str_to_cards(s), ALL_OPTIONS)
    if play is None:
        play = PlayClassifier.classify_special(str_to_cards(s), frozenset(PlayType))
    return play


def field_of(*plays):
    field = Field()
    for i, s in enumerate(plays):
        field = field.with_play(play_of(s), f"p{i}")
    return field


def analyze(s, field=None, **kwargs):
    """分析 s 在 field 之上打出时的效果"""
    snapshot = GameSnapshot(field=field or Field(), **kwargs)
    return TriggerEffectAnalyzer().analyze(play_of(s), snapshot)


class TestRevolution:
    """革命类效果测试"""

    def test_quad_revolution(self):
        assert analyze("S6 H6 D6 C6") == [TriggerEffect.REVOLUTION]

    def test_revolution_end(self):
        flags = InversionFlags(revolution=True)
        assert analyze("S6 H6 D6 C6", flags=flags) == [TriggerEffect.REVOLUTION_END]

    def test_great_revolution_exclusive(self):
        settings = RuleSettings(great_revolution=True)
        assert analyze("S2 H2 D2 C2", settings=settings) == [TriggerEffect.GREAT_REVOLUTION]

    def test_religious_revolution_replaces_quad(self):
        settings = RuleSettings(religious_revolution=True)
        assert analyze("SK HK DK CK", settings=settings) == [TriggerEffect.RELIGIOUS_REVOLUTION]

    def test_king_quad_without_religious_revolution(self):
        assert analyze("SK HK DK CK") == [TriggerEffect.REVOLUTION]

    def test_omen(self):
        settings = RuleSettings(omen=True)
        assert analyze("S6 H6 D6", settings=settings) == [TriggerEffect.OMEN]

    def test_omen_suppresses_revolutions(self):
        assert analyze("S6 H6 D6 C6", omen_active=True) == []

    def test_joker_only_pair_not_a_play(self):
        assert PlayClassifier.classify(str_to_cards("JK JK"), ALL_OPTIONS) is None
        assert PlayClassifier.classify_special(str_to_cards("JK JK"), frozenset(PlayType)) is None

    def test_stair_revolution_needs_four(self):
        settings = RuleSettings(stair_revolution=True)
        assert analyze("S3 S4 S5", settings=settings) == []
        assert analyze("S3 S4 S5 S6", settings=settings) == [TriggerEffect.STAIR_REVOLUTION]

    def test_fusion_revolution(self):
        settings = RuleSettings(fusion_revolution=True)
        effects = analyze("H7 D7 C7", field=field_of("S7"), settings=settings)
        assert effects == [TriggerEffect.FUSION_REVOLUTION]

    def test_revolution_effects_helper(self):
        snapshot = GameSnapshot()
        assert revolution_effects(play_of("S6 H6 D6 C6"), snapshot) == [TriggerEffect.REVOLUTION]
        assert revolution_effects(play_of("S6"), snapshot) == []
        assert revolution_effects(play_of("S6 H6 D6 C6"), GameSnapshot(omen_active=True)) == []


class TestBaseEffects:
    """基础效果测试"""

    def test_eleven_back(self):
        assert analyze("SJ") == [TriggerEffect.ELEVEN_BACK]

    def test_eleven_back_end(self):
        flags = InversionFlags(eleven_back=True)
        assert analyze("SJ", flags=flags) == [TriggerEffect.ELEVEN_BACK_END]

    def test_plain_play(self):
        assert analyze("S5") == []


class TestClearing:
    """清场效果测试"""

    def test_eight_cut(self):
        assert analyze("S8", settings=RuleSettings(eight_cut=True)) == [TriggerEffect.EIGHT_CUT]
        assert analyze("S8") == []

    def test_four_stop_needs_pending_eight_cut(self):
        settings = RuleSettings(four_stop=True)
        assert analyze("S4 H4", settings=settings) == []
        assert analyze("S4 H4", settings=settings, eight_cut_pending=True) == [TriggerEffect.FOUR_STOP]

    def test_ten_counter_same_suit(self):
        settings = RuleSettings(ten_counter=True)
        field = field_of("S8")
        assert analyze("S10", field=field, settings=settings, eight_cut_pending=True) == [
            TriggerEffect.TEN_COUNTER
        ]
        assert analyze("H10", field=field, settings=settings, eight_cut_pending=True) == []

    def test_sandstorm(self):
        settings = RuleSettings(sandstorm=True)
        assert analyze("S3 H3 D3", settings=settings) == [TriggerEffect.SANDSTORM]

    def test_spade_three_return(self):
        settings = RuleSettings(spade_three_return=True)
        assert analyze("S3", field=field_of("JK"), settings=settings) == [TriggerEffect.SPADE_THREE_RETURN]
        assert analyze("S3", settings=settings) == []


class TestLocks:
    """限制效果测试"""

    def test_suit_lock(self):
        settings = RuleSettings(suit_lock=True)
        assert analyze("S6", field=field_of("S5"), settings=settings) == [TriggerEffect.SUIT_LOCK]

    def test_suit_lock_needs_previous(self):
        assert analyze("S6", settings=RuleSettings(suit_lock=True)) == []

    def test_suit_lock_already_active(self):
        settings = RuleSettings(suit_lock=True)
        locks = LockState(suit=Suit.SPADE)
        assert analyze("S6", field=field_of("S5"), settings=settings, locks=locks) == []

    def test_strict_lock_replaces(self):
        settings = RuleSettings(stairs=True, suit_lock=True, number_lock=True, strict_lock=True)
        effects = analyze("S6 S7 S8", field=field_of("S3 S4 S5"), settings=settings)
        assert effects == [TriggerEffect.STRICT_LOCK]

    def test_number_lock_without_strict(self):
        settings = RuleSettings(stairs=True, number_lock=True)
        effects = analyze("H6 H7 H8", field=field_of("S3 S4 S5"), settings=settings)
        assert effects == [TriggerEffect.NUMBER_LOCK]

    def test_play_already_on_field(self):
        settings = RuleSettings(suit_lock=True)
        play = play_of("S6")
        field = field_of("S5").with_play(play, "p9")
        effects = TriggerEffectAnalyzer().analyze(play, GameSnapshot(field=field, settings=settings))
        assert effects == [TriggerEffect.SUIT_LOCK]

    def test_equal_play_already_on_field(self):
        settings = RuleSettings(suit_lock=True)
        field = field_of("H5").with_play(play_of("S6"), "p9")
        effects = TriggerEffectAnalyzer().analyze(play_of("S6"), GameSnapshot(field=field, settings=settings))
        assert effects == []

    def test_color_lock(self):
        settings = RuleSettings(color_lock=True)
        assert analyze("D6", field=field_of("H5"), settings=settings) == [TriggerEffect.COLOR_LOCK]

    def test_partial_lock(self):
        settings = RuleSettings(partial_lock=True)
        effects = analyze("S6 D6", field=field_of("S5 H5"), settings=settings)
        assert effects == [TriggerEffect.PARTIAL_LOCK]

    def test_hot_milk(self):
        settings = RuleSettings(hot_milk=True)
        assert analyze("S9", field=field_of("S3"), settings=settings) == [TriggerEffect.HOT_MILK]
        assert analyze("S9", field=field_of("S4"), settings=settings) == []

    def test_queen_release(self):
        settings = RuleSettings(queen_release=True, suit_lock=True)
        locks = LockState(suit=Suit.SPADE)
        effects = analyze("SQ", field=field_of("S5"), settings=settings, locks=locks)
        assert effects == [TriggerEffect.QUEEN_RELEASE]


class TestTurnEffects:
    """回合/手牌效果测试"""

    def test_freemason_single_only(self):
        settings = RuleSettings(freemason=True)
        assert analyze("S6", settings=settings) == [TriggerEffect.FREEMASON]
        assert analyze("S6 H6", settings=settings) == []

    def test_kings_march_needs_discards(self):
        settings = RuleSettings(kings_march=True)
        assert analyze("SK", settings=settings) == []
        assert analyze("SK", settings=settings, discard_pile_size=3) == [TriggerEffect.KINGS_MARCH]

    def test_table_order(self):
        settings = RuleSettings(emperor=True, ten_free=True, eight_cut=True)
        assert analyze("S8 H9 D10 CJ", settings=settings) == [
            TriggerEffect.EMPEROR,
            TriggerEffect.ELEVEN_BACK,
            TriggerEffect.TEN_FREE,
            TriggerEffect.EIGHT_CUT,
        ]


class TestAnalyzer:
    """分析器测试"""

    def test_every_effect_has_label(self):
        assert set(EFFECT_LABELS) == set(TriggerEffect)

    def test_labels(self):
        assert TriggerEffectAnalyzer.labels([TriggerEffect.REVOLUTION]) == ['革命']

    def test_every_toggle_exists(self):
        settings = RuleSettings()
        for rule in EFFECT_RULES:
            if rule.toggle is not None:
                assert hasattr(settings, rule.toggle), rule.toggle

    def test_custom_rules(self):
        rule = EffectRule(TriggerEffect.SATAN, None, lambda play, ctx: len(play) == 1, EffectGroup.GENERAL)
        analyzer = TriggerEffectAnalyzer(rules=(rule,))
        assert analyzer.analyze(play_of("S5"), GameSnapshot()) == [TriggerEffect.SATAN]

    def test_snapshot_unchanged(self):
        snapshot = GameSnapshot(field=field_of("S5"), settings=RuleSettings(suit_lock=True))
        TriggerEffectAnalyzer().analyze(play_of("S6"), snapshot)
        assert snapshot.locks == LockState()
        assert len(snapshot.field) == 1

    @pytest.mark.parametrize("s", ["S3", "S5 H5", "S7 H7 D7", "S3 S4 S5 S6"])
    def test_all_enabled_does_not_raise(self, s):
        snapshot = GameSnapshot(field=field_of("S4"), settings=RuleSettings.all_enabled())
        assert isinstance(TriggerEffectAnalyzer().analyze(play_of(s), snapshot), list)
