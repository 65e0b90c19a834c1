"""
出牌 (Play) 类型定义

一次出牌 = 牌组合 + 牌型 + 比较用强度
"""
from enum import Enum
from dataclasses import dataclass
from typing import Tuple, Optional, FrozenSet, Iterable

from .cards import Card, Rank, Suit


class PlayType(Enum):
    """牌型"""
    SINGLE = "single"                  # 单张
    PAIR = "pair"                      # 对子
    TRIPLE = "triple"                  # 三张
    QUAD = "quad"                      # 四张
    STAIR = "stair"                    # 阶梯 (同花顺, 3 张以上)
    EMPEROR = "emperor"                # 皇帝 (四种花色连号)
    SKIP_STAIR = "skip_stair"          # 跳阶梯 (同花等差 2~6)
    DOUBLE_STAIR = "double_stair"      # 二列阶梯 (连对)
    TUNNEL = "tunnel"                  # 隧道 (同花 A-2-3, 最弱阶梯)
    SPADE_STAIR = "spade_stair"        # 黑桃阶梯 (♠2-JK-♠3, 最强阶梯)
    TAEPODONG = "taepodong"            # 大浦洞 (同数 4 张 + Joker 2 张)
    CROSS_DRESSING = "cross_dressing"  # 女装 (Q 与 K 同数混出)
    SOUTHERN_CROSS = "southern_cross"  # 3396
    HEIANKYO_FLOW = "heiankyo_flow"    # 794 (同花)
    CYCLONE = "cyclone"                # 3A96 (同花)
    KONAGONA = "konagona"              # 5757 (同色)
    YOROSHIKU = "yoroshiku"            # 4649


# 可互相比较的阶梯类牌型 (只要求张数相同)
STAIR_LIKE: FrozenSet[PlayType] = frozenset({
    PlayType.STAIR,
    PlayType.TUNNEL,
    PlayType.SPADE_STAIR,
})

# 谐音组合 (固定牌面组合)
GOROAWASE: FrozenSet[PlayType] = frozenset({
    PlayType.SOUTHERN_CROSS,
    PlayType.HEIANKYO_FLOW,
    PlayType.CYCLONE,
    PlayType.KONAGONA,
    PlayType.YOROSHIKU,
})

# 固定强度
TUNNEL_STRENGTH = 0       # 低于任何真实牌
SPADE_STAIR_STRENGTH = 100  # 最大
TAEPODONG_DEFAULT_STRENGTH = 14


@dataclass(frozen=True)
class ClassifyOptions:
    """非默认牌型开关"""
    skip_stair: bool = False
    double_stair: bool = False
    tunnel: bool = False
    spade_stair: bool = False
    taepodong: bool = False


@dataclass(frozen=True)
class Play:
    """
    不可变出牌表示

    Attributes:
        cards: 出牌的牌元组
        play_type: 牌型
        strength: 比较键 (不一定等于任何单张的强度)
        skip_diff: 跳阶梯的公差 (仅 SKIP_STAIR)
    """
    cards: Tuple[Card, ...]
    play_type: PlayType
    strength: float
    skip_diff: Optional[int] = None

    @property
    def ranks(self) -> Tuple[Rank, ...]:
        return tuple(c.rank for c in self.cards)

    @property
    def suits(self) -> FrozenSet[Suit]:
        return frozenset(c.suit for c in self.cards)

    @property
    def is_stair_like(self) -> bool:
        return self.play_type in STAIR_LIKE

    @property
    def is_goroawase(self) -> bool:
        return self.play_type in GOROAWASE

    @property
    def joker_count(self) -> int:
        return sum(1 for c in self.cards if c.is_joker)

    def has_rank(self, *ranks: Rank) -> bool:
        """是否包含任一指定牌面"""
        return any(c.rank in ranks for c in self.cards)

    def all_rank(self, rank: Rank) -> bool:
        """是否全部为指定牌面"""
        return all(c.rank == rank for c in self.cards)

    def is_group_of(self, play_type: PlayType, rank: Rank) -> bool:
        """如 9x2: is_group_of(PAIR, NINE)"""
        return self.play_type == play_type and self.all_rank(rank)

    def card_ids(self) -> FrozenSet[str]:
        return frozenset(c.id for c in self.cards)

    def __len__(self) -> int:
        return len(self.cards)


def sorted_cards(cards: Iterable[Card]) -> Tuple[Card, ...]:
    """按强度排序 (同强度按花色)"""
    return tuple(sorted(cards, key=lambda c: (c.strength, c.suit.value)))
