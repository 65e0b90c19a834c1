"""
效果分析 - 判定一次出牌会触发哪些效果

只做检测，不修改状态；效果的应用由外部编排器负责

效果表按顺序求值，优先级规则:
- オーメン生效中，革命类效果全部无效
- 大革命触发时，排除同一出牌的其他革命类效果
- 激缚り 代替 (而不是附加于) 花色缚り与数字缚り
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
import logging

from .cards import Card, Rank, Suit
from .classifier import PlayClassifier
from .context import GameSnapshot, ValidationContext
from .field import Field, FieldEntry
from .plays import Play, PlayType

logger = logging.getLogger(__name__)


class TriggerEffect(Enum):
    """效果"""
    # 革命类
    GREAT_REVOLUTION = "great_revolution"
    RELIGIOUS_REVOLUTION = "religious_revolution"
    REVOLUTION = "revolution"
    REVOLUTION_END = "revolution_end"
    STAIR_REVOLUTION = "stair_revolution"
    STAIR_REVOLUTION_END = "stair_revolution_end"
    SKIP_STAIR_REVOLUTION = "skip_stair_revolution"
    NANASAN_REVOLUTION = "nanasan_revolution"
    NANASAN_REVOLUTION_END = "nanasan_revolution_end"
    JOKER_REVOLUTION = "joker_revolution"
    JOKER_REVOLUTION_END = "joker_revolution_end"
    EMPEROR = "emperor"
    EMPEROR_END = "emperor_end"
    COUP = "coup"
    COUP_END = "coup_end"
    OMEN = "omen"
    TAEPODONG = "taepodong"
    FUSION_REVOLUTION = "fusion_revolution"
    TSUI_KAKU = "tsui_kaku"
    SOUTHERN_CROSS = "southern_cross"
    YOROSHIKU = "yoroshiku"
    KONAGONA = "konagona"

    # 强弱反转
    ELEVEN_BACK = "eleven_back"
    ELEVEN_BACK_END = "eleven_back_end"
    ENHANCED_J_BACK = "enhanced_j_back"
    TWO_BACK = "two_back"
    SIX_RETURN = "six_return"
    ARTHUR = "arthur"
    TEN_FREE = "ten_free"

    # 清场
    SANDSTORM = "sandstorm"
    TRIPLE_THREE_RETURN = "triple_three_return"
    ASSASSINATION = "assassination"
    FOUR_STOP = "four_stop"
    TEN_COUNTER = "ten_counter"
    EIGHT_CUT = "eight_cut"
    ENHANCED_EIGHT_CUT = "enhanced_eight_cut"
    FIVE_CUT = "five_cut"
    SIX_CUT = "six_cut"
    SEVEN_CUT = "seven_cut"
    AMBULANCE = "ambulance"
    ROKUROKUBI = "rokurokubi"
    DIGNITY = "dignity"
    SPADE_STAIR = "spade_stair"
    HEIANKYO_FLOW = "heiankyo_flow"
    SPADE_THREE_RETURN = "spade_three_return"
    SPADE_TWO_RETURN = "spade_two_return"
    DOWN_NUMBER = "down_number"

    # 限制
    SUIT_LOCK = "suit_lock"
    NUMBER_LOCK = "number_lock"
    STRICT_LOCK = "strict_lock"
    COLOR_LOCK = "color_lock"
    PARTIAL_LOCK = "partial_lock"
    FIVE_COLOR_LOCK = "five_color_lock"
    EVEN_RESTRICTION = "even_restriction"
    ODD_RESTRICTION = "odd_restriction"
    DOUBLE_DIGIT_SEAL = "double_digit_seal"
    HOT_MILK = "hot_milk"
    QUEEN_RELEASE = "queen_release"

    # 回合/手牌
    FIVE_SKIP = "five_skip"
    FREEMASON = "freemason"
    TEN_SKIP = "ten_skip"
    SEVEN_PASS = "seven_pass"
    SEVEN_ATTACH = "seven_attach"
    NINE_RETURN = "nine_return"
    TEN_DISCARD = "ten_discard"
    NINE_REVERSE = "nine_reverse"
    NINE_QUICK = "nine_quick"
    QUEEN_REVERSE = "queen_reverse"
    KING_REVERSE = "king_reverse"
    QUEEN_BOMBER = "queen_bomber"
    LUCKY_SEVEN = "lucky_seven"
    KINGS_MARCH = "kings_march"
    ZOMBIE = "zombie"
    SATAN = "satan"
    CHESTNUT_PICKING = "chestnut_picking"
    GALAXY_EXPRESS_999 = "galaxy_express_999"
    CYCLONE = "cyclone"


# 显示用名称
EFFECT_LABELS: Dict[TriggerEffect, str] = {
    TriggerEffect.GREAT_REVOLUTION: '大革命＋即勝利',
    TriggerEffect.RELIGIOUS_REVOLUTION: '宗教革命',
    TriggerEffect.REVOLUTION: '革命',
    TriggerEffect.REVOLUTION_END: '革命終了',
    TriggerEffect.STAIR_REVOLUTION: '階段革命',
    TriggerEffect.STAIR_REVOLUTION_END: '階段革命終了',
    TriggerEffect.SKIP_STAIR_REVOLUTION: '飛び階段革命',
    TriggerEffect.NANASAN_REVOLUTION: 'ナナサン革命',
    TriggerEffect.NANASAN_REVOLUTION_END: 'ナナサン革命終了',
    TriggerEffect.JOKER_REVOLUTION: 'ジョーカー革命',
    TriggerEffect.JOKER_REVOLUTION_END: 'ジョーカー革命終了',
    TriggerEffect.EMPEROR: 'エンペラー',
    TriggerEffect.EMPEROR_END: 'エンペラー終了',
    TriggerEffect.COUP: 'クーデター',
    TriggerEffect.COUP_END: 'クーデター終了',
    TriggerEffect.OMEN: 'オーメン',
    TriggerEffect.TAEPODONG: 'テポドン',
    TriggerEffect.FUSION_REVOLUTION: '融合革命',
    TriggerEffect.TSUI_KAKU: '追革',
    TriggerEffect.SOUTHERN_CROSS: 'サザンクロス',
    TriggerEffect.YOROSHIKU: '夜露死苦革命',
    TriggerEffect.KONAGONA: '粉々革命',
    TriggerEffect.ELEVEN_BACK: 'イレブンバック',
    TriggerEffect.ELEVEN_BACK_END: 'イレブンバック解除',
    TriggerEffect.ENHANCED_J_BACK: '強化Jバック',
    TriggerEffect.TWO_BACK: '2バック',
    TriggerEffect.SIX_RETURN: '6戻し',
    TriggerEffect.ARTHUR: 'アーサー',
    TriggerEffect.TEN_FREE: '10フリ',
    TriggerEffect.SANDSTORM: '砂嵐',
    TriggerEffect.TRIPLE_THREE_RETURN: '33返し',
    TriggerEffect.ASSASSINATION: '暗殺',
    TriggerEffect.FOUR_STOP: '4止め',
    TriggerEffect.TEN_COUNTER: '10返し',
    TriggerEffect.EIGHT_CUT: '8切り',
    TriggerEffect.ENHANCED_EIGHT_CUT: '強化8切り',
    TriggerEffect.FIVE_CUT: '5切り',
    TriggerEffect.SIX_CUT: '6切り',
    TriggerEffect.SEVEN_CUT: '7切り',
    TriggerEffect.AMBULANCE: '救急車',
    TriggerEffect.ROKUROKUBI: 'ろくろ首',
    TriggerEffect.DIGNITY: '威厳',
    TriggerEffect.SPADE_STAIR: 'スペ階段',
    TriggerEffect.HEIANKYO_FLOW: '平安京流し',
    TriggerEffect.SPADE_THREE_RETURN: 'スペ3返し',
    TriggerEffect.SPADE_TWO_RETURN: 'スペ2返し',
    TriggerEffect.DOWN_NUMBER: 'ダウンナンバー',
    TriggerEffect.SUIT_LOCK: 'マークしばり',
    TriggerEffect.NUMBER_LOCK: '数字しばり',
    TriggerEffect.STRICT_LOCK: '激縛り',
    TriggerEffect.COLOR_LOCK: '色縛り',
    TriggerEffect.PARTIAL_LOCK: '片縛り',
    TriggerEffect.FIVE_COLOR_LOCK: '5色縛り',
    TriggerEffect.EVEN_RESTRICTION: '偶数制限',
    TriggerEffect.ODD_RESTRICTION: '奇数制限',
    TriggerEffect.DOUBLE_DIGIT_SEAL: '2桁封じ',
    TriggerEffect.HOT_MILK: 'ホットミルク',
    TriggerEffect.QUEEN_RELEASE: 'Q解き',
    TriggerEffect.FIVE_SKIP: '5スキップ',
    TriggerEffect.FREEMASON: 'フリーメイソン',
    TriggerEffect.TEN_SKIP: '10飛び',
    TriggerEffect.SEVEN_PASS: '7渡し',
    TriggerEffect.SEVEN_ATTACH: '7付け',
    TriggerEffect.NINE_RETURN: '9戻し',
    TriggerEffect.TEN_DISCARD: '10捨て',
    TriggerEffect.NINE_REVERSE: '9リバース',
    TriggerEffect.NINE_QUICK: '9クイック',
    TriggerEffect.QUEEN_REVERSE: 'Qリバース',
    TriggerEffect.KING_REVERSE: 'Kリバース',
    TriggerEffect.QUEEN_BOMBER: 'クイーンボンバー',
    TriggerEffect.LUCKY_SEVEN: 'ラッキーセブン',
    TriggerEffect.KINGS_MARCH: 'キングの行進',
    TriggerEffect.ZOMBIE: 'ゾンビ',
    TriggerEffect.SATAN: 'サタン',
    TriggerEffect.CHESTNUT_PICKING: '栗拾い',
    TriggerEffect.GALAXY_EXPRESS_999: '銀河鉄道999',
    TriggerEffect.CYCLONE: 'サイクロン',
}


class EffectGroup(Enum):
    """效果分组 (决定优先级规则的作用范围)"""
    REVOLUTION = "revolution"
    LOCK = "lock"
    GENERAL = "general"


Predicate = Callable[[Play, ValidationContext], bool]


@dataclass(frozen=True)
class EffectRule:
    """
    效果表条目

    Attributes:
        effect: 触发的效果
        toggle: RuleSettings 开关名 (None 表示基础规则，总是开启)
        predicate: 触发条件
        group: 效果分组
    """
    effect: TriggerEffect
    toggle: Optional[str]
    predicate: Predicate
    group: EffectGroup = EffectGroup.GENERAL

    def enabled(self, context: ValidationContext) -> bool:
        return self.toggle is None or getattr(context.settings, self.toggle)

    def fires(self, play: Play, context: ValidationContext) -> bool:
        return self.enabled(context) and self.predicate(play, context)


# ==================== 判定辅助 ====================

def previous_entry(play: Play, field: Field) -> Optional[FieldEntry]:
    """
    本次出牌之前的一条场记录

    场中可能已经追加了本次出牌 (同一组牌不会出两次)，此时取再前一条
    """
    entry = field.current_entry
    if entry is not None and entry.play == play:
        return field.previous_entry
    return entry


def _previous_play(play: Play, ctx: ValidationContext) -> Optional[Play]:
    entry = previous_entry(play, ctx.field)
    return entry.play if entry is not None else None


def _uniform(cards: Tuple[Card, ...], key: Callable[[Card], object]):
    """非 Joker 牌在 key 上一致时返回该值，否则 None"""
    values = {key(c) for c in cards if not c.is_joker}
    if len(values) == 1:
        return values.pop()
    return None


def _group(play_type: PlayType, rank: Rank) -> Predicate:
    return lambda play, ctx: play.is_group_of(play_type, rank)


def _contains(rank: Rank) -> Predicate:
    return lambda play, ctx: play.has_rank(rank)


def _starting(predicate: Predicate) -> Predicate:
    return lambda play, ctx: not ctx.flags.revolution and predicate(play, ctx)


def _ending(predicate: Predicate) -> Predicate:
    return lambda play, ctx: ctx.flags.revolution and predicate(play, ctx)


def _during_revolution(rank: Rank) -> Predicate:
    return lambda play, ctx: ctx.flags.revolution and play.has_rank(rank)


def _is_type(play_type: PlayType) -> Predicate:
    return lambda play, ctx: play.play_type == play_type


def _single(play: Play, suit: Suit, rank: Rank) -> bool:
    return (
        play.play_type == PlayType.SINGLE
        and play.cards[0].suit == suit
        and play.cards[0].rank == rank
    )


def _is_lone_joker(play: Optional[Play]) -> bool:
    return play is not None and play.play_type == PlayType.SINGLE and play.cards[0].is_joker


def _field_has_joker(play: Play, ctx: ValidationContext) -> bool:
    previous = _previous_play(play, ctx)
    return previous is not None and previous.joker_count > 0


def fusion_total(previous: Play, current: Play) -> int:
    """
    场上与本次出牌同一牌面的自然牌合计 (牌面不一致返回 0)

    两边都必须是同数牌 (单张/对子/三张/四张)
    """
    groups = (PlayType.SINGLE, PlayType.PAIR, PlayType.TRIPLE, PlayType.QUAD)
    if previous.play_type not in groups or current.play_type not in groups:
        return 0
    prev_rank = PlayClassifier.same_rank_strength(previous.cards)
    curr_rank = PlayClassifier.same_rank_strength(current.cards)
    if prev_rank is None or prev_rank != curr_rank:
        return 0
    return (len(previous) - previous.joker_count) + (len(current) - current.joker_count)


def _fusion(play: Play, ctx: ValidationContext) -> bool:
    previous = _previous_play(play, ctx)
    return previous is not None and fusion_total(previous, play) >= 4


def _tsui_kaku(play: Play, ctx: ValidationContext) -> bool:
    previous = _previous_play(play, ctx)
    return previous is not None and len(previous) == len(play) and fusion_total(previous, play) >= 4


def _quad_revolution(play: Play, ctx: ValidationContext) -> bool:
    # K×4 宗教革命开启时代替普通革命
    if ctx.settings.religious_revolution and play.all_rank(Rank.KING):
        return False
    return play.play_type == PlayType.QUAD


def _stair_revolution(play: Play, ctx: ValidationContext) -> bool:
    return play.play_type == PlayType.STAIR and len(play) >= 4


def _skip_stair_revolution(play: Play, ctx: ValidationContext) -> bool:
    return play.play_type == PlayType.SKIP_STAIR and len(play) >= 4


def _joker_pair(play: Play, ctx: ValidationContext) -> bool:
    return play.is_group_of(PlayType.PAIR, Rank.JOKER)


def _omen(play: Play, ctx: ValidationContext) -> bool:
    return not ctx.omen_active and play.is_group_of(PlayType.TRIPLE, Rank.SIX)


def _eleven_back(play: Play, ctx: ValidationContext) -> bool:
    return not ctx.flags.eleven_back and play.has_rank(Rank.JACK)


def _eleven_back_end(play: Play, ctx: ValidationContext) -> bool:
    return ctx.flags.eleven_back and play.has_rank(Rank.JACK)


def _six_return(play: Play, ctx: ValidationContext) -> bool:
    return ctx.flags.eleven_back and play.has_rank(Rank.SIX)


def _triple_three_return(play: Play, ctx: ValidationContext) -> bool:
    return play.is_group_of(PlayType.TRIPLE, Rank.THREE) and _is_lone_joker(_previous_play(play, ctx))


def _assassination(play: Play, ctx: ValidationContext) -> bool:
    """通常: 2 之上出 3 / 革命中: 3 之上出 2"""
    previous = _previous_play(play, ctx)
    if previous is None or previous.play_type != PlayType.SINGLE or play.play_type != PlayType.SINGLE:
        return False
    if ctx.flags.revolution:
        return previous.cards[0].rank == Rank.THREE and play.cards[0].rank == Rank.TWO
    return previous.cards[0].rank == Rank.TWO and play.cards[0].rank == Rank.THREE


def _four_stop(play: Play, ctx: GameSnapshot) -> bool:
    return ctx.eight_cut_pending and play.is_group_of(PlayType.PAIR, Rank.FOUR)


def _ten_counter(play: Play, ctx: GameSnapshot) -> bool:
    """8 切り待定中，出与场上 8 同花色的 10"""
    if not ctx.eight_cut_pending or play.play_type != PlayType.SINGLE:
        return False
    card = play.cards[0]
    if card.rank != Rank.TEN:
        return False
    previous = _previous_play(play, ctx)
    if previous is None:
        return False
    return any(c.rank == Rank.EIGHT and c.suit == card.suit for c in previous.cards)


def _dignity(play: Play, ctx: ValidationContext) -> bool:
    return play.play_type == PlayType.STAIR and sorted(play.ranks) == [Rank.JACK, Rank.QUEEN, Rank.KING]


def _spade_three_return(play: Play, ctx: ValidationContext) -> bool:
    return _single(play, Suit.SPADE, Rank.THREE) and _field_has_joker(play, ctx)


def _spade_two_return(play: Play, ctx: ValidationContext) -> bool:
    return ctx.flags.revolution and _single(play, Suit.SPADE, Rank.TWO) and _field_has_joker(play, ctx)


def _down_number(play: Play, ctx: ValidationContext) -> bool:
    previous = _previous_play(play, ctx)
    if previous is None or previous.play_type != PlayType.SINGLE or play.play_type != PlayType.SINGLE:
        return False
    return is_down_number(previous.cards[0], play.cards[0])


def is_down_number(field_card: Card, card: Card) -> bool:
    """同花色且强度恰好小 1"""
    return card.suit == field_card.suit and card.strength == field_card.strength - 1


# ==================== 限制 ====================

def _suit_lock(play: Play, ctx: ValidationContext) -> bool:
    """前一条与本次出牌都是同一花色"""
    if ctx.locks.suit is not None:
        return False
    previous = _previous_play(play, ctx)
    if previous is None:
        return False
    suit = _uniform(play.cards, lambda c: c.suit)
    return suit is not None and suit == _uniform(previous.cards, lambda c: c.suit)


def _number_lock(play: Play, ctx: ValidationContext) -> bool:
    """阶梯连续出两次"""
    if ctx.locks.number:
        return False
    previous = _previous_play(play, ctx)
    return (
        previous is not None
        and previous.play_type == PlayType.STAIR
        and play.play_type == PlayType.STAIR
    )


def _strict_lock(play: Play, ctx: ValidationContext) -> bool:
    return (
        ctx.settings.suit_lock
        and ctx.settings.number_lock
        and _suit_lock(play, ctx)
        and _number_lock(play, ctx)
    )


def _color_lock(play: Play, ctx: ValidationContext) -> bool:
    if ctx.locks.color is not None:
        return False
    previous = _previous_play(play, ctx)
    if previous is None:
        return False
    color = _uniform(play.cards, lambda c: c.color)
    return color is not None and color == _uniform(previous.cards, lambda c: c.color)


def _partial_lock(play: Play, ctx: ValidationContext) -> bool:
    """多张出牌与前一条共享部分花色 (全部同花色时属于花色缚り)"""
    if ctx.locks.partial_suits is not None or ctx.locks.suit is not None:
        return False
    previous = _previous_play(play, ctx)
    if previous is None or len(play) < 2 or len(previous) < 2:
        return False
    common = (play.suits & previous.suits) - {Suit.JOKER}
    if not common:
        return False
    return not (len(common) == 1 and play.suits - {Suit.JOKER} == common == previous.suits - {Suit.JOKER})


def _five_color_lock(play: Play, ctx: ValidationContext) -> bool:
    return (
        ctx.locks.color is None
        and play.play_type == PlayType.SINGLE
        and play.cards[0].rank == Rank.FIVE
    )


def _even_restriction(play: Play, ctx: ValidationContext) -> bool:
    return ctx.locks.parity is None and play.has_rank(Rank.FOUR)


def _odd_restriction(play: Play, ctx: ValidationContext) -> bool:
    return ctx.locks.parity is None and play.has_rank(Rank.FIVE)


def _double_digit_seal(play: Play, ctx: ValidationContext) -> bool:
    return not ctx.locks.double_digit_seal and play.has_rank(Rank.SIX)


def _hot_milk(play: Play, ctx: ValidationContext) -> bool:
    """3 之上出 9"""
    if ctx.locks.hot_milk is not None or not play.all_rank(Rank.NINE):
        return False
    previous = _previous_play(play, ctx)
    return previous is not None and previous.all_rank(Rank.THREE)


def _queen_release(play: Play, ctx: ValidationContext) -> bool:
    locks = ctx.locks
    locked = (
        locks.suit is not None
        or locks.number
        or locks.color is not None
        or locks.partial_suits is not None
    )
    return locked and play.has_rank(Rank.QUEEN)


def _freemason(play: Play, ctx: ValidationContext) -> bool:
    return play.play_type == PlayType.SINGLE and play.cards[0].rank == Rank.SIX


def _kings_march(play: Play, ctx: GameSnapshot) -> bool:
    return ctx.discard_pile_size > 0 and play.has_rank(Rank.KING)


def _zombie(play: Play, ctx: GameSnapshot) -> bool:
    return ctx.discard_pile_size > 0 and play.is_group_of(PlayType.TRIPLE, Rank.THREE)


R = EffectGroup.REVOLUTION
L = EffectGroup.LOCK

# 效果表 (按顺序求值，结果保持表顺序)
EFFECT_RULES: Tuple[EffectRule, ...] = (
    # 革命类
    EffectRule(TriggerEffect.GREAT_REVOLUTION, 'great_revolution', _group(PlayType.QUAD, Rank.TWO), R),
    EffectRule(TriggerEffect.RELIGIOUS_REVOLUTION, 'religious_revolution', _group(PlayType.QUAD, Rank.KING), R),
    EffectRule(TriggerEffect.REVOLUTION, None, _starting(_quad_revolution), R),
    EffectRule(TriggerEffect.REVOLUTION_END, None, _ending(_quad_revolution), R),
    EffectRule(TriggerEffect.STAIR_REVOLUTION, 'stair_revolution', _starting(_stair_revolution), R),
    EffectRule(TriggerEffect.STAIR_REVOLUTION_END, 'stair_revolution', _ending(_stair_revolution), R),
    EffectRule(TriggerEffect.SKIP_STAIR_REVOLUTION, 'skip_stair_revolution', _skip_stair_revolution, R),
    EffectRule(TriggerEffect.NANASAN_REVOLUTION, 'nanasan_revolution',
               _starting(_group(PlayType.TRIPLE, Rank.SEVEN)), R),
    EffectRule(TriggerEffect.NANASAN_REVOLUTION_END, 'nanasan_revolution',
               _ending(_group(PlayType.TRIPLE, Rank.SEVEN)), R),
    EffectRule(TriggerEffect.JOKER_REVOLUTION, 'joker_revolution', _starting(_joker_pair), R),
    EffectRule(TriggerEffect.JOKER_REVOLUTION_END, 'joker_revolution', _ending(_joker_pair), R),
    EffectRule(TriggerEffect.EMPEROR, 'emperor', _starting(_is_type(PlayType.EMPEROR)), R),
    EffectRule(TriggerEffect.EMPEROR_END, 'emperor', _ending(_is_type(PlayType.EMPEROR)), R),
    EffectRule(TriggerEffect.COUP, 'coup', _starting(_group(PlayType.TRIPLE, Rank.NINE)), R),
    EffectRule(TriggerEffect.COUP_END, 'coup', _ending(_group(PlayType.TRIPLE, Rank.NINE)), R),
    EffectRule(TriggerEffect.OMEN, 'omen', _omen, R),
    EffectRule(TriggerEffect.TAEPODONG, 'taepodong', _is_type(PlayType.TAEPODONG), R),
    EffectRule(TriggerEffect.FUSION_REVOLUTION, 'fusion_revolution', _fusion, R),
    EffectRule(TriggerEffect.TSUI_KAKU, 'tsui_kaku', _tsui_kaku, R),
    EffectRule(TriggerEffect.SOUTHERN_CROSS, 'southern_cross', _is_type(PlayType.SOUTHERN_CROSS), R),
    EffectRule(TriggerEffect.YOROSHIKU, 'yoroshiku_revolution', _is_type(PlayType.YOROSHIKU), R),
    EffectRule(TriggerEffect.KONAGONA, 'konagona_revolution', _is_type(PlayType.KONAGONA), R),

    # 清场 / 反转
    EffectRule(TriggerEffect.SANDSTORM, 'sandstorm', _group(PlayType.TRIPLE, Rank.THREE)),
    EffectRule(TriggerEffect.TRIPLE_THREE_RETURN, 'triple_three_return', _triple_three_return),
    EffectRule(TriggerEffect.ASSASSINATION, 'assassination', _assassination),
    EffectRule(TriggerEffect.ELEVEN_BACK, None, _eleven_back),
    EffectRule(TriggerEffect.ELEVEN_BACK_END, None, _eleven_back_end),
    EffectRule(TriggerEffect.ENHANCED_J_BACK, 'enhanced_j_back', _group(PlayType.TRIPLE, Rank.JACK)),
    EffectRule(TriggerEffect.SIX_RETURN, 'six_return', _six_return),
    EffectRule(TriggerEffect.TWO_BACK, 'two_back', _contains(Rank.TWO)),
    EffectRule(TriggerEffect.ARTHUR, 'arthur', _group(PlayType.TRIPLE, Rank.KING)),
    EffectRule(TriggerEffect.TEN_FREE, 'ten_free', _contains(Rank.TEN)),
    EffectRule(TriggerEffect.FOUR_STOP, 'four_stop', _four_stop),
    EffectRule(TriggerEffect.TEN_COUNTER, 'ten_counter', _ten_counter),
    EffectRule(TriggerEffect.EIGHT_CUT, 'eight_cut', _contains(Rank.EIGHT)),
    EffectRule(TriggerEffect.ENHANCED_EIGHT_CUT, 'enhanced_eight_cut', _group(PlayType.TRIPLE, Rank.EIGHT)),
    EffectRule(TriggerEffect.FIVE_CUT, 'five_cut', _during_revolution(Rank.FIVE)),
    EffectRule(TriggerEffect.SIX_CUT, 'six_cut', _during_revolution(Rank.SIX)),
    EffectRule(TriggerEffect.SEVEN_CUT, 'seven_cut', _during_revolution(Rank.SEVEN)),
    EffectRule(TriggerEffect.AMBULANCE, 'ambulance', _group(PlayType.PAIR, Rank.NINE)),
    EffectRule(TriggerEffect.ROKUROKUBI, 'rokurokubi', _group(PlayType.PAIR, Rank.SIX)),
    EffectRule(TriggerEffect.DIGNITY, 'dignity', _dignity),
    EffectRule(TriggerEffect.SPADE_STAIR, 'spade_stair', _is_type(PlayType.SPADE_STAIR)),
    EffectRule(TriggerEffect.HEIANKYO_FLOW, 'heiankyo_flow', _is_type(PlayType.HEIANKYO_FLOW)),
    EffectRule(TriggerEffect.SPADE_THREE_RETURN, 'spade_three_return', _spade_three_return),
    EffectRule(TriggerEffect.SPADE_TWO_RETURN, 'spade_two_return', _spade_two_return),
    EffectRule(TriggerEffect.DOWN_NUMBER, 'down_number', _down_number),

    # 限制
    EffectRule(TriggerEffect.STRICT_LOCK, 'strict_lock', _strict_lock, L),
    EffectRule(TriggerEffect.SUIT_LOCK, 'suit_lock', _suit_lock, L),
    EffectRule(TriggerEffect.NUMBER_LOCK, 'number_lock', _number_lock, L),
    EffectRule(TriggerEffect.COLOR_LOCK, 'color_lock', _color_lock, L),
    EffectRule(TriggerEffect.PARTIAL_LOCK, 'partial_lock', _partial_lock, L),
    EffectRule(TriggerEffect.FIVE_COLOR_LOCK, 'five_color_lock', _five_color_lock, L),
    EffectRule(TriggerEffect.EVEN_RESTRICTION, 'even_restriction', _even_restriction, L),
    EffectRule(TriggerEffect.ODD_RESTRICTION, 'odd_restriction', _odd_restriction, L),
    EffectRule(TriggerEffect.DOUBLE_DIGIT_SEAL, 'double_digit_seal', _double_digit_seal, L),
    EffectRule(TriggerEffect.HOT_MILK, 'hot_milk', _hot_milk, L),
    EffectRule(TriggerEffect.QUEEN_RELEASE, 'queen_release', _queen_release, L),

    # 回合/手牌
    EffectRule(TriggerEffect.FIVE_SKIP, 'five_skip', _contains(Rank.FIVE)),
    EffectRule(TriggerEffect.FREEMASON, 'freemason', _freemason),
    EffectRule(TriggerEffect.TEN_SKIP, 'ten_skip', _contains(Rank.TEN)),
    EffectRule(TriggerEffect.SEVEN_PASS, 'seven_pass', _contains(Rank.SEVEN)),
    EffectRule(TriggerEffect.SEVEN_ATTACH, 'seven_attach', _contains(Rank.SEVEN)),
    EffectRule(TriggerEffect.NINE_RETURN, 'nine_return', _contains(Rank.NINE)),
    EffectRule(TriggerEffect.TEN_DISCARD, 'ten_discard', _contains(Rank.TEN)),
    EffectRule(TriggerEffect.NINE_REVERSE, 'nine_reverse', _contains(Rank.NINE)),
    EffectRule(TriggerEffect.NINE_QUICK, 'nine_quick', _contains(Rank.NINE)),
    EffectRule(TriggerEffect.QUEEN_REVERSE, 'queen_reverse', _contains(Rank.QUEEN)),
    EffectRule(TriggerEffect.KING_REVERSE, 'king_reverse', _contains(Rank.KING)),
    EffectRule(TriggerEffect.QUEEN_BOMBER, 'queen_bomber', _contains(Rank.QUEEN)),
    EffectRule(TriggerEffect.LUCKY_SEVEN, 'lucky_seven', _group(PlayType.TRIPLE, Rank.SEVEN)),
    EffectRule(TriggerEffect.KINGS_MARCH, 'kings_march', _kings_march),
    EffectRule(TriggerEffect.ZOMBIE, 'zombie', _zombie),
    EffectRule(TriggerEffect.SATAN, 'satan', _group(PlayType.TRIPLE, Rank.SIX)),
    EffectRule(TriggerEffect.CHESTNUT_PICKING, 'chestnut_picking', _contains(Rank.NINE)),
    EffectRule(TriggerEffect.GALAXY_EXPRESS_999, 'galaxy_express_999', _group(PlayType.TRIPLE, Rank.NINE)),
    EffectRule(TriggerEffect.CYCLONE, 'cyclone', _is_type(PlayType.CYCLONE)),
)

REVOLUTION_RULES: Tuple[EffectRule, ...] = tuple(r for r in EFFECT_RULES if r.group == R)


def _apply_precedence(effects: List[TriggerEffect]) -> List[TriggerEffect]:
    """大革命独占革命类，激缚り 代替花色缚り与数字缚り"""
    if TriggerEffect.GREAT_REVOLUTION in effects:
        revolution = {r.effect for r in REVOLUTION_RULES}
        effects = [e for e in effects if e not in revolution or e == TriggerEffect.GREAT_REVOLUTION]
    if TriggerEffect.STRICT_LOCK in effects:
        replaced = (TriggerEffect.SUIT_LOCK, TriggerEffect.NUMBER_LOCK)
        effects = [e for e in effects if e not in replaced]
    return effects


def revolution_effects(play: Play, context: ValidationContext) -> List[TriggerEffect]:
    """
    革命类效果 (治安维持法判定用)

    Args:
        play: 出牌
        context: 验证快照 (场中不含本次出牌)

    Returns:
        触发的革命类效果
    """
    if context.omen_active:
        return []
    effects = [r.effect for r in REVOLUTION_RULES if r.fires(play, context)]
    return _apply_precedence(effects)


class TriggerEffectAnalyzer:
    """
    效果分析器

    纯函数，不修改快照
    """

    def __init__(self, rules: Tuple[EffectRule, ...] = EFFECT_RULES):
        self.rules = rules

    def analyze(self, play: Play, snapshot: GameSnapshot) -> List[TriggerEffect]:
        """
        分析一次出牌触发的全部效果

        Args:
            play: 已通过验证的出牌
            snapshot: 游戏状态快照

        Returns:
            效果列表 (表顺序)
        """
        effects = []
        for rule in self.rules:
            if rule.group == EffectGroup.REVOLUTION and snapshot.omen_active:
                continue
            if rule.fires(play, snapshot):
                effects.append(rule.effect)
        effects = _apply_precedence(effects)
        if effects:
            logger.debug(f"{play.play_type.value} triggers {[e.value for e in effects]}")
        return effects

    @staticmethod
    def labels(effects: List[TriggerEffect]) -> List[str]:
        """效果显示名称"""
        return [EFFECT_LABELS[e] for e in effects]
