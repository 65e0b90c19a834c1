"""
牌型分类器 - 牌型检测、跟牌判定

所有方法都是纯函数，无状态
"""
from typing import Optional, Sequence, Collection, Dict, Tuple, Callable
from collections import Counter

from .cards import Card, Rank, Suit
from .plays import (
    Play,
    PlayType,
    ClassifyOptions,
    sorted_cards,
    TUNNEL_STRENGTH,
    SPADE_STAIR_STRENGTH,
    TAEPODONG_DEFAULT_STRENGTH,
)

# 跳阶梯允许的公差范围
MIN_SKIP_DIFF = 2
MAX_SKIP_DIFF = 6

# 阶梯最少张数
MIN_STAIR_LEN = 3

# 二列阶梯最少张数
MIN_DOUBLE_STAIR_LEN = 6

# 女装按 Q 的强度比较
CROSS_DRESSING_STRENGTH = int(Rank.QUEEN)

TUNNEL_RANKS = frozenset({Rank.ACE, Rank.TWO, Rank.THREE})

# 谐音组合: 牌面多重集 + 额外条件
GOROAWASE_RANKS: Dict[PlayType, Tuple[Rank, ...]] = {
    PlayType.SOUTHERN_CROSS: (Rank.THREE, Rank.THREE, Rank.NINE, Rank.SIX),
    PlayType.HEIANKYO_FLOW: (Rank.SEVEN, Rank.NINE, Rank.FOUR),
    PlayType.CYCLONE: (Rank.THREE, Rank.ACE, Rank.NINE, Rank.SIX),
    PlayType.KONAGONA: (Rank.FIVE, Rank.SEVEN, Rank.FIVE, Rank.SEVEN),
    PlayType.YOROSHIKU: (Rank.FOUR, Rank.SIX, Rank.FOUR, Rank.NINE),
}


def _same_suit(cards: Sequence[Card]) -> bool:
    return len({c.suit for c in cards}) == 1


def _same_color(cards: Sequence[Card]) -> bool:
    return len({c.color for c in cards}) == 1


GOROAWASE_EXTRA: Dict[PlayType, Callable[[Sequence[Card]], bool]] = {
    PlayType.HEIANKYO_FLOW: _same_suit,
    PlayType.CYCLONE: _same_suit,
    PlayType.KONAGONA: _same_color,
}


class PlayClassifier:
    """
    大富豪牌型分类器

    提供牌型检测、跟牌判定等功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def is_consecutive(strengths: Sequence[int]) -> bool:
        """
        检查强度列表是否连续

        Args:
            strengths: 已排序的强度列表

        Returns:
            是否连续
        """
        for i in range(len(strengths) - 1):
            if strengths[i + 1] - strengths[i] != 1:
                return False
        return True

    @staticmethod
    def same_rank_strength(cards: Sequence[Card]) -> Optional[int]:
        """
        同数判定 (Joker 可代替任意牌)

        Returns:
            共同牌面的强度，不成立返回 None
        """
        naturals = [c for c in cards if not c.is_joker]
        if not naturals:
            return None
        first = naturals[0].rank
        if all(c.rank == first for c in naturals):
            return int(first)
        return None

    @staticmethod
    def is_stair(cards: Sequence[Card]) -> bool:
        """阶梯: 同一花色、强度连续、不含 Joker、3 张以上"""
        if len(cards) < MIN_STAIR_LEN:
            return False
        if any(c.is_joker for c in cards):
            return False
        if not _same_suit(cards):
            return False
        return PlayClassifier.is_consecutive(sorted(c.strength for c in cards))

    @staticmethod
    def skip_stair_diff(cards: Sequence[Card]) -> Optional[int]:
        """
        跳阶梯判定

        Returns:
            公差 (2~6)，不成立返回 None
        """
        if len(cards) < MIN_STAIR_LEN:
            return None
        if any(c.is_joker for c in cards) or not _same_suit(cards):
            return None
        strengths = sorted(c.strength for c in cards)
        diffs = {strengths[i + 1] - strengths[i] for i in range(len(strengths) - 1)}
        if len(diffs) != 1:
            return None
        diff = diffs.pop()
        if MIN_SKIP_DIFF <= diff <= MAX_SKIP_DIFF:
            return diff
        return None

    @staticmethod
    def is_emperor(cards: Sequence[Card]) -> bool:
        """皇帝: 四种花色各一张且连号"""
        if len(cards) != 4 or any(c.is_joker for c in cards):
            return False
        if len({c.suit for c in cards}) != 4:
            return False
        return PlayClassifier.is_consecutive(sorted(c.strength for c in cards))

    @staticmethod
    def is_tunnel(cards: Sequence[Card]) -> bool:
        """隧道: 同花 A-2-3"""
        if len(cards) != 3 or any(c.is_joker for c in cards):
            return False
        return _same_suit(cards) and {c.rank for c in cards} == TUNNEL_RANKS

    @staticmethod
    def is_spade_stair(cards: Sequence[Card]) -> bool:
        """黑桃阶梯: ♠2 + Joker + ♠3"""
        if len(cards) != 3:
            return False
        jokers = [c for c in cards if c.is_joker]
        naturals = [c for c in cards if not c.is_joker]
        if len(jokers) != 1:
            return False
        return (
            all(c.suit == Suit.SPADE for c in naturals)
            and {c.rank for c in naturals} == {Rank.TWO, Rank.THREE}
        )

    @staticmethod
    def double_stair_strength(cards: Sequence[Card]) -> Optional[int]:
        """
        二列阶梯: 每个牌面恰好两张，牌面连续

        Returns:
            最大强度，不成立返回 None
        """
        n = len(cards)
        if n < MIN_DOUBLE_STAIR_LEN or n % 2 != 0:
            return None
        if any(c.is_joker for c in cards):
            return None
        counter = Counter(c.strength for c in cards)
        if any(v != 2 for v in counter.values()):
            return None
        unique = sorted(counter.keys())
        if not PlayClassifier.is_consecutive(unique):
            return None
        return unique[-1]

    @staticmethod
    def taepodong_strength(cards: Sequence[Card]) -> Optional[int]:
        """大浦洞: Joker 恰好两张，其余 4 张同数"""
        if len(cards) != 6:
            return None
        jokers = [c for c in cards if c.is_joker]
        naturals = [c for c in cards if not c.is_joker]
        if len(jokers) != 2:
            return None
        if not naturals:
            return TAEPODONG_DEFAULT_STRENGTH
        if len({c.rank for c in naturals}) != 1:
            return None
        return naturals[0].strength

    @staticmethod
    def classify(
        cards: Sequence[Card],
        options: Optional[ClassifyOptions] = None,
    ) -> Optional[Play]:
        """
        检测牌型

        同张数下多个牌型可能重叠，按固定优先级尝试，先匹配者生效

        Args:
            cards: 牌列表
            options: 非默认牌型开关

        Returns:
            Play，无效组合返回 None
        """
        if not cards:
            return None
        options = options or ClassifyOptions()
        ordered = sorted_cards(cards)
        n = len(ordered)

        def make(play_type: PlayType, strength: float, skip_diff: Optional[int] = None) -> Play:
            return Play(cards=ordered, play_type=play_type, strength=strength, skip_diff=skip_diff)

        # 6 张: 大浦洞优先
        if n == 6 and options.taepodong:
            strength = PlayClassifier.taepodong_strength(ordered)
            if strength is not None:
                return make(PlayType.TAEPODONG, strength)

        # 单张
        if n == 1:
            return make(PlayType.SINGLE, ordered[0].strength)

        # 对子 (Joker 可与任意牌成对，至少一张普通牌)
        if n == 2:
            strength = PlayClassifier.same_rank_strength(ordered)
            if strength is not None:
                return make(PlayType.PAIR, strength)
            return None

        max_strength = max(c.strength for c in ordered)

        # 三张
        if n == 3:
            strength = PlayClassifier.same_rank_strength(ordered)
            if strength is not None:
                return make(PlayType.TRIPLE, strength)
            if options.spade_stair and PlayClassifier.is_spade_stair(ordered):
                return make(PlayType.SPADE_STAIR, SPADE_STAIR_STRENGTH)
            if options.tunnel and PlayClassifier.is_tunnel(ordered):
                return make(PlayType.TUNNEL, TUNNEL_STRENGTH)
            if PlayClassifier.is_stair(ordered):
                return make(PlayType.STAIR, max_strength)
            if options.skip_stair:
                diff = PlayClassifier.skip_stair_diff(ordered)
                if diff is not None:
                    return make(PlayType.SKIP_STAIR, max_strength, diff)
            return None

        # 四张
        if n == 4:
            strength = PlayClassifier.same_rank_strength(ordered)
            if strength is not None:
                return make(PlayType.QUAD, strength)
            if PlayClassifier.is_emperor(ordered):
                return make(PlayType.EMPEROR, max_strength)
            if PlayClassifier.is_stair(ordered):
                return make(PlayType.STAIR, max_strength)
            if options.skip_stair:
                diff = PlayClassifier.skip_stair_diff(ordered)
                if diff is not None:
                    return make(PlayType.SKIP_STAIR, max_strength, diff)
            return None

        # 5 张以上
        if PlayClassifier.is_stair(ordered):
            return make(PlayType.STAIR, max_strength)
        if options.skip_stair:
            diff = PlayClassifier.skip_stair_diff(ordered)
            if diff is not None:
                return make(PlayType.SKIP_STAIR, max_strength, diff)
        if options.double_stair:
            strength = PlayClassifier.double_stair_strength(ordered)
            if strength is not None:
                return make(PlayType.DOUBLE_STAIR, strength)
        return None

    @staticmethod
    def is_cross_dressing(cards: Sequence[Card]) -> bool:
        """女装: Q 与 K 同数 (各 N ≥ 1 张)，不含其他牌"""
        if len(cards) < 2 or len(cards) % 2 != 0:
            return False
        queens = sum(1 for c in cards if c.rank == Rank.QUEEN)
        kings = sum(1 for c in cards if c.rank == Rank.KING)
        return queens > 0 and queens == kings and queens + kings == len(cards)

    @staticmethod
    def goroawase_type(cards: Sequence[Card]) -> Optional[PlayType]:
        """匹配谐音组合，返回对应牌型"""
        if any(c.is_joker for c in cards):
            return None
        counter = Counter(c.rank for c in cards)
        for play_type, ranks in GOROAWASE_RANKS.items():
            if counter != Counter(ranks):
                continue
            extra = GOROAWASE_EXTRA.get(play_type)
            if extra is None or extra(cards):
                return play_type
        return None

    @staticmethod
    def classify_special(
        cards: Sequence[Card],
        enabled: Collection[PlayType],
    ) -> Optional[Play]:
        """
        检测固定组合 (女装、谐音组合)

        这些组合是常规牌型规则的例外，在常规分类之前检测

        Args:
            cards: 牌列表
            enabled: 已启用的特殊牌型

        Returns:
            Play，不匹配返回 None
        """
        if not cards or not enabled:
            return None
        ordered = sorted_cards(cards)

        if PlayType.CROSS_DRESSING in enabled and PlayClassifier.is_cross_dressing(ordered):
            return Play(ordered, PlayType.CROSS_DRESSING, CROSS_DRESSING_STRENGTH)

        play_type = PlayClassifier.goroawase_type(ordered)
        if play_type is not None and play_type in enabled:
            return Play(ordered, play_type, max(c.strength for c in ordered))
        return None

    @staticmethod
    def same_shape(previous: Play, current: Play) -> bool:
        """
        结构是否匹配 (不比较强度)

        阶梯类之间只要求张数相同，其余牌型要求牌型一致
        """
        if previous.is_stair_like and current.is_stair_like:
            return len(previous) == len(current)
        if previous.play_type != current.play_type:
            return False
        if current.play_type == PlayType.SKIP_STAIR:
            return len(previous) == len(current) and previous.skip_diff == current.skip_diff
        if current.play_type == PlayType.DOUBLE_STAIR:
            return len(previous) == len(current)
        return True

    @staticmethod
    def can_follow(previous: Play, current: Play, invert: bool) -> bool:
        """
        判定 current 能否压过 previous

        Args:
            previous: 场上的牌
            current: 要出的牌
            invert: 是否反转强弱 (革命等)

        Returns:
            是否能压过
        """
        # 大浦洞压过一切，且无法被压过
        if current.play_type == PlayType.TAEPODONG:
            return previous.play_type != PlayType.TAEPODONG
        if previous.play_type == PlayType.TAEPODONG:
            return False

        if not PlayClassifier.same_shape(previous, current):
            return False

        # 隧道/黑桃阶梯: 固定胜负，不比较数值
        fixed = (PlayType.TUNNEL, PlayType.SPADE_STAIR)
        if previous.play_type in fixed or current.play_type in fixed:
            if previous.play_type == PlayType.SPADE_STAIR:
                return False
            if current.play_type == PlayType.SPADE_STAIR:
                return True
            if current.play_type == PlayType.TUNNEL:
                return False
            return True  # 场上为隧道，任何真实阶梯都能压过

        prev_strength = -previous.strength if invert else previous.strength
        curr_strength = -current.strength if invert else current.strength
        return curr_strength > prev_strength
