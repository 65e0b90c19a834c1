"""
大富豪规则引擎 - 纯游戏逻辑

Modules:
    cards: 牌定义与编码
    plays: 出牌与牌型
    classifier: 牌型分类器
    field: 场状态
    hand: 手牌
    players: 玩家与名次
    settings: 规则配置
    context: 验证快照
    validator: 出牌验证
    effects: 效果分析
    search: 手牌搜索
"""
from .cards import (
    Suit,
    Rank,
    Color,
    Card,
    SUITS,
    RANKS,
    make_card,
    make_joker,
    build_deck,
    parse_card,
    str_to_cards,
    cards_to_str,
    cards_to_array,
    cards_to_matrix,
)

from .plays import (
    PlayType,
    Play,
    ClassifyOptions,
)

from .classifier import PlayClassifier

from .field import (
    FieldEntry,
    Field,
)

from .hand import Hand

from .players import (
    Player,
    Standings,
)

from .settings import (
    RuleSettings,
    FORBIDDEN_FINISH_RANKS,
)

from .context import (
    Parity,
    InversionFlags,
    LockState,
    ValidationContext,
    GameSnapshot,
)

from .validator import (
    Violation,
    Reason,
    ValidationResult,
    PlayValidator,
)

from .effects import (
    TriggerEffect,
    EffectGroup,
    EffectRule,
    EFFECT_LABELS,
    TriggerEffectAnalyzer,
    revolution_effects,
)

from .search import (
    enumerate_legal_subsets,
    find_legal_plays,
    forbidden_finish_card_ids,
)

__all__ = [
    # cards
    "Suit",
    "Rank",
    "Color",
    "Card",
    "SUITS",
    "RANKS",
    "make_card",
    "make_joker",
    "build_deck",
    "parse_card",
    "str_to_cards",
    "cards_to_str",
    "cards_to_array",
    "cards_to_matrix",
    # plays
    "PlayType",
    "Play",
    "ClassifyOptions",
    # classifier
    "PlayClassifier",
    # field
    "FieldEntry",
    "Field",
    # hand / players
    "Hand",
    "Player",
    "Standings",
    # settings
    "RuleSettings",
    "FORBIDDEN_FINISH_RANKS",
    # context
    "Parity",
    "InversionFlags",
    "LockState",
    "ValidationContext",
    "GameSnapshot",
    # validator
    "Violation",
    "Reason",
    "ValidationResult",
    "PlayValidator",
    # effects
    "TriggerEffect",
    "EffectGroup",
    "EffectRule",
    "EFFECT_LABELS",
    "TriggerEffectAnalyzer",
    "revolution_effects",
    # search
    "enumerate_legal_subsets",
    "find_legal_plays",
    "forbidden_finish_card_ids",
]
