"""
牌的定义与编码

大富豪使用 52 张牌 + 最多 2 张 Joker:
- 四种花色 (♠♥♦♣) 各 A, 2-10, J, Q, K
- Joker 可选 (0~2 张)

强度顺序: 3 最弱, 2 为 15, Joker 为 16 (最强)
"""
from enum import Enum, IntEnum
from dataclasses import dataclass
from typing import List, Tuple, Dict, Iterable, Optional
from collections import Counter
import itertools

import numpy as np


class Suit(Enum):
    """花色"""
    SPADE = "S"
    HEART = "H"
    DIAMOND = "D"
    CLUB = "C"
    JOKER = "JK"


class Rank(IntEnum):
    """牌面值定义 (值即强度)"""
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14
    TWO = 15
    JOKER = 16


class Color(Enum):
    """花色颜色"""
    RED = "red"
    BLACK = "black"


# 四种普通花色 (编码顺序)
SUITS: Tuple[Suit, ...] = (Suit.SPADE, Suit.HEART, Suit.DIAMOND, Suit.CLUB)

# 13 种普通牌面 (按强度升序)
RANKS: Tuple[Rank, ...] = tuple(r for r in Rank if r != Rank.JOKER)

# 牌面值到显示字符的映射
RANK_TO_STR: Dict[Rank, str] = {
    Rank.THREE: '3', Rank.FOUR: '4', Rank.FIVE: '5', Rank.SIX: '6',
    Rank.SEVEN: '7', Rank.EIGHT: '8', Rank.NINE: '9', Rank.TEN: '10',
    Rank.JACK: 'J', Rank.QUEEN: 'Q', Rank.KING: 'K', Rank.ACE: 'A',
    Rank.TWO: '2', Rank.JOKER: 'JK',
}

# 显示字符到牌面值的映射
STR_TO_RANK: Dict[str, Rank] = {v: k for k, v in RANK_TO_STR.items()}

# 花色到颜色
SUIT_COLOR: Dict[Suit, Optional[Color]] = {
    Suit.SPADE: Color.BLACK,
    Suit.CLUB: Color.BLACK,
    Suit.HEART: Color.RED,
    Suit.DIAMOND: Color.RED,
    Suit.JOKER: None,
}

# 牌面值到数组列索引的映射 (用于 one-hot 编码)
RANK_TO_COLUMN: Dict[Rank, int] = {rank: i for i, rank in enumerate(RANKS)}

_joker_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class Card:
    """
    不可变单张牌

    Attributes:
        id: 唯一标识 (区分两张 Joker)
        suit: 花色
        rank: 牌面值
    """
    id: str
    suit: Suit
    rank: Rank

    @property
    def strength(self) -> int:
        return int(self.rank)

    @property
    def is_joker(self) -> bool:
        return self.rank == Rank.JOKER

    @property
    def color(self) -> Optional[Color]:
        return SUIT_COLOR[self.suit]

    def __str__(self) -> str:
        if self.is_joker:
            return 'JK'
        return f"{self.suit.value}{RANK_TO_STR[self.rank]}"


def make_card(suit: Suit, rank: Rank) -> Card:
    """创建普通牌, id 形如 S3 / H10"""
    if suit == Suit.JOKER or rank == Rank.JOKER:
        return make_joker()
    return Card(id=f"{suit.value}{RANK_TO_STR[rank]}", suit=suit, rank=rank)


def make_joker() -> Card:
    """创建 Joker (每次调用 id 唯一)"""
    return Card(id=f"JK{next(_joker_ids)}", suit=Suit.JOKER, rank=Rank.JOKER)


def build_deck(include_jokers: bool = True) -> List[Card]:
    """
    生成完整牌组

    Args:
        include_jokers: 是否加入两张 Joker

    Returns:
        52 或 54 张牌
    """
    deck = [make_card(suit, rank) for suit in SUITS for rank in RANKS]
    if include_jokers:
        deck.extend([make_joker(), make_joker()])
    return deck


def parse_card(token: str) -> Card:
    """
    解析单张牌

    Args:
        token: 如 "S3", "H10", "DA", "JK"

    Returns:
        Card
    """
    token = token.strip().upper()
    if token in ('JK', 'JOKER'):
        return make_joker()
    if len(token) < 2:
        raise ValueError(f"Invalid card token: {token!r}")
    suit_char, rank_str = token[0], token[1:]
    try:
        suit = Suit(suit_char)
        rank = STR_TO_RANK[rank_str]
    except (ValueError, KeyError):
        raise ValueError(f"Invalid card token: {token!r}") from None
    if rank == Rank.JOKER:
        raise ValueError(f"Invalid card token: {token!r}")
    return make_card(suit, rank)


def str_to_cards(s: str) -> List[Card]:
    """
    将空格分隔的字符串转换为牌列表

    Args:
        s: 如 "S3 H3 JK"

    Returns:
        牌列表
    """
    return [parse_card(token) for token in s.split()]


def cards_to_str(cards: Iterable[Card]) -> str:
    """将牌列表按强度排序转换为可读字符串"""
    ordered = sorted(cards, key=lambda c: (c.strength, c.suit.value))
    return ' '.join(str(c) for c in ordered)


def rank_counts(cards: Iterable[Card]) -> Counter:
    """统计非 Joker 牌面数量"""
    return Counter(c.rank for c in cards if not c.is_joker)


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 54 维 one-hot 向量

    编码方式:
    - 前 52 维: 4 种花色 × 13 种牌面 (按花色展开)
    - 后 2 维: Joker 数量 (第一张, 第二张)

    Args:
        cards: 牌列表

    Returns:
        54 维 numpy 数组
    """
    matrix = np.zeros((4, 13), dtype=np.float32)
    jokers = np.zeros(2, dtype=np.float32)

    joker_count = 0
    for card in cards:
        if card.is_joker:
            if joker_count < 2:
                jokers[joker_count] = 1
            joker_count += 1
            continue
        matrix[SUITS.index(card.suit), RANK_TO_COLUMN[card.rank]] = 1

    return np.concatenate([matrix.flatten(), jokers])


def cards_to_matrix(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 4×14 矩阵

    适用于卷积网络输入

    Returns:
        (4, 14) numpy 数组, 列 0-12 为 3-2, 列 13 第 0 行为 Joker 数量
    """
    matrix = np.zeros((4, 14), dtype=np.float32)
    for card in cards:
        if card.is_joker:
            matrix[0, 13] += 1
        else:
            matrix[SUITS.index(card.suit), RANK_TO_COLUMN[card.rank]] = 1
    return matrix
