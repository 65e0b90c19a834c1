"""
验证上下文

每次验证由外部编排器新建快照，引擎不保留引用:
- 强弱反转标志 (革命、11 バック、2 バック ...)
- 限制状态 (花色、数字、奇偶 ...)
- 场
- 规则配置
"""
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Optional, FrozenSet

from .cards import Suit, Rank, Color
from .field import Field
from .players import Standings
from .settings import RuleSettings


class Parity(Enum):
    """奇偶限制"""
    EVEN = "even"
    ODD = "odd"


# 偶数: 4, 6, 8, 10, Q / 奇数: 3, 5, 7, 9, J, K, A / 2 与 Joker 不受限制
EVEN_RANKS: FrozenSet[Rank] = frozenset({
    Rank.FOUR, Rank.SIX, Rank.EIGHT, Rank.TEN, Rank.QUEEN,
})
ODD_RANKS: FrozenSet[Rank] = frozenset({
    Rank.THREE, Rank.FIVE, Rank.SEVEN, Rank.NINE, Rank.JACK, Rank.KING, Rank.ACE,
})
PARITY_FREE_RANKS: FrozenSet[Rank] = frozenset({Rank.TWO, Rank.JOKER})

# 2 桁封じ: J~K 不能出
DOUBLE_DIGIT_RANKS: FrozenSet[Rank] = frozenset({Rank.JACK, Rank.QUEEN, Rank.KING})

# ホットミルク: 只能出红色 (♦/♥)
WARM_SUITS: FrozenSet[Suit] = frozenset({Suit.DIAMOND, Suit.HEART})
HOT_MILK_WARM = "warm"


@dataclass(frozen=True)
class InversionFlags:
    """
    强弱反转相关标志

    Attributes:
        revolution: 革命中
        eleven_back: 11 バック中
        two_back: 2 バック中
        religious_revolution: 宗教革命中
        ten_free: 10 フリ (下一位玩家出牌不受强度限制)
        arthur: アーサー (Joker 强度介于 10 与 J 之间)
    """
    revolution: bool = False
    eleven_back: bool = False
    two_back: bool = False
    religious_revolution: bool = False
    ten_free: bool = False
    arthur: bool = False

    @property
    def should_reverse(self) -> bool:
        """反转标志奇数个为 True 时反转，偶数个互相抵消"""
        return bool(self.revolution ^ self.eleven_back ^ self.two_back ^ self.religious_revolution)


@dataclass(frozen=True)
class LockState:
    """
    限制状态 (一旦成立，直到场被清空为止)

    Attributes:
        suit: 花色缚り
        number: 数字缚り
        color: 色缚り
        parity: 奇偶限制
        double_digit_seal: 2 桁封じ
        hot_milk: ホットミルク ("warm" 或 None)
        partial_suits: 片缚り花色
        trump_rank: 切り札 (ドラ)
    """
    suit: Optional[Suit] = None
    number: bool = False
    color: Optional[Color] = None
    parity: Optional[Parity] = None
    double_digit_seal: bool = False
    hot_milk: Optional[str] = None
    partial_suits: Optional[FrozenSet[Suit]] = None
    trump_rank: Optional[Rank] = None


@dataclass(frozen=True)
class ValidationContext:
    """
    验证快照

    Attributes:
        field: 场
        settings: 规则配置
        flags: 强弱反转标志
        locks: 限制状态
        standings: 名次信息 (仇讨禁止令、治安维持法)
        omen_active: オーメン生效中 (之后不再发生革命)
    """
    field: Field = dc_field(default_factory=Field)
    settings: RuleSettings = dc_field(default_factory=RuleSettings)
    flags: InversionFlags = dc_field(default_factory=InversionFlags)
    locks: LockState = dc_field(default_factory=LockState)
    standings: Standings = dc_field(default_factory=Standings)
    omen_active: bool = False

    @property
    def should_reverse(self) -> bool:
        return self.flags.should_reverse


@dataclass(frozen=True)
class GameSnapshot(ValidationContext):
    """
    完整游戏状态快照 (效果分析用)

    Attributes:
        eight_cut_pending: 8 切り待定中 (4 止め / 10 返し 可以阻止)
        discard_pile_size: 弃牌堆张数
    """
    eight_cut_pending: bool = False
    discard_pile_size: int = 0
