"""
手牌搜索 - 枚举手牌中所有合法的出牌

精确枚举全部非空子集 (2^n - 1)，合法性交给验证器判定
规则组合过于不规则，无法用启发式保证完整
"""
from itertools import combinations
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from .cards import Card
from .context import ValidationContext
from .players import Player
from .validator import PlayValidator, ValidationResult, Reason

logger = logging.getLogger(__name__)

# 默认手牌上限 (超过时需要调用方显式放宽)
DEFAULT_MAX_CARDS = 20


def enumerate_legal_subsets(
    cards: Sequence[Card],
    validate_fn: Callable[[Tuple[Card, ...]], bool],
    max_cards: Optional[int] = None,
) -> List[Tuple[Card, ...]]:
    """
    枚举所有通过验证的子集

    Args:
        cards: 手牌
        validate_fn: 子集 -> 是否合法
        max_cards: 手牌张数上限 (None 表示不限制)

    Returns:
        合法子集列表 (按张数升序)

    Raises:
        ValueError: 手牌超过上限
    """
    cards = tuple(cards)
    if max_cards is not None and len(cards) > max_cards:
        raise ValueError(f"Hand too large for exhaustive search: {len(cards)} > {max_cards}")

    legal = []
    checked = 0
    for size in range(1, len(cards) + 1):
        for subset in combinations(cards, size):
            checked += 1
            if validate_fn(subset):
                legal.append(subset)

    logger.debug(f"Checked {checked} subsets, {len(legal)} legal")
    return legal


def find_legal_plays(
    player: Player,
    context: ValidationContext,
    validator: Optional[PlayValidator] = None,
    max_cards: Optional[int] = DEFAULT_MAX_CARDS,
) -> List[ValidationResult]:
    """
    玩家当前可以出的全部组合

    Args:
        player: 玩家
        context: 验证快照
        validator: 验证器 (默认新建)
        max_cards: 手牌张数上限

    Returns:
        通过验证的结果列表 (result.play 为对应出牌)
    """
    validator = validator or PlayValidator()
    results = []

    def accept(subset: Tuple[Card, ...]) -> bool:
        result = validator.validate(player, subset, context)
        if result.valid:
            results.append(result)
        return result.valid

    enumerate_legal_subsets(player.hand.cards, accept, max_cards)
    return results


def forbidden_finish_card_ids(
    player: Player,
    context: ValidationContext,
    validator: Optional[PlayValidator] = None,
) -> List[str]:
    """
    单独打出会因禁止上がり被拒绝的牌

    Args:
        player: 玩家
        context: 验证快照
        validator: 验证器 (默认新建)

    Returns:
        牌 id 列表
    """
    validator = validator or PlayValidator()
    ids = []
    for card in player.hand.cards:
        result = validator.validate(player, (card,), context)
        if result.reason == Reason.FORBIDDEN_FINISH:
            ids.append(card.id)
    return ids
