"""
出牌验证 - 判定一次出牌是否合法

固定流程，任一阶段拒绝即返回:
1. 持有检查
2. 组合检查 (特殊组合优先)
3. ダウンナンバー (跳过限制与强度，只检查禁止上がり)
4. 限制检查
5. 强度检查
6. 禁止上がり
7. 仇讨禁止令
8. 治安维持法
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
import logging

from .cards import Card, Color, Rank, Suit
from .classifier import PlayClassifier
from .context import (
    ValidationContext,
    Parity,
    EVEN_RANKS,
    ODD_RANKS,
    PARITY_FREE_RANKS,
    DOUBLE_DIGIT_RANKS,
    WARM_SUITS,
    HOT_MILK_WARM,
)
from .effects import fusion_total, is_down_number, revolution_effects
from .players import Player
from .plays import Play, PlayType
from .settings import FORBIDDEN_FINISH_RANKS

logger = logging.getLogger(__name__)

# ダブルキング: K 以下的对子
DOUBLE_KING_MAX_STRENGTH = int(Rank.KING)

# アーサー: Joker 介于 10 与 J 之间
ARTHUR_JOKER_STRENGTH = 10.5

# 红 7 / 黑 7: 比 2 强、比 Joker 弱 (不受反转影响)
SEVEN_POWER_STRENGTH = 15.5
JOKER_TOP_STRENGTH = float(Rank.JOKER)


class Violation(Enum):
    """拒绝类别"""
    OWNERSHIP = "ownership"
    STRUCTURE = "structure"
    LOCK = "lock"
    STRENGTH = "strength"
    TERMINAL = "terminal"
    INTERNAL = "internal"


class Reason(Enum):
    """
    验证结果标签

    value = (拒绝类别, 显示文本)，接受时类别为 None
    """
    # 接受
    ACCEPTED = (None, '')
    STAIR = (None, '階段')
    EMPEROR = (None, 'エンペラー')
    DOWN_NUMBER = (None, 'ダウンナンバー')
    TEN_FREE = (None, '10フリ')
    TAEPODONG = (None, 'テポドン')
    GOROAWASE = (None, '語呂合わせ')
    TRUMP = (None, '切り札')
    FUSION_REVOLUTION = (None, '融合革命')
    TSUI_KAKU = (None, '追革')
    CROSS_DRESSING = (None, '女装')
    SANDSTORM = (None, '砂嵐')
    SPADE_THREE_RETURN = (None, 'スぺ3返し')
    SPADE_STAIR = (None, 'スペ階段')
    DOUBLE_KING = (None, 'ダブルキング')
    ARTHUR = (None, 'アーサー')
    SEVEN_POWER = (None, 'セブンパワー')

    # 持有
    NOT_IN_HAND = (Violation.OWNERSHIP, 'そのカードは手札にありません')
    DUPLICATE_CARD = (Violation.OWNERSHIP, '同じカードが重複しています')

    # 组合
    INVALID_COMBINATION = (Violation.STRUCTURE, '無効なカードの組み合わせです')
    STAIRS_DISABLED = (Violation.STRUCTURE, '階段は現在使用できません')
    EMPEROR_DISABLED = (Violation.STRUCTURE, 'エンペラーは現在使用できません')

    # 限制
    SUIT_LOCK = (Violation.LOCK, 'マークしばりが発動中です')
    NUMBER_LOCK = (Violation.LOCK, '数字しばりが発動中です（階段のみ）')
    COLOR_LOCK = (Violation.LOCK, '色縛りが発動中です')
    PARTIAL_LOCK = (Violation.LOCK, '片縛りが発動中です')
    EVEN_RESTRICTION = (Violation.LOCK, '偶数制限が発動中です（偶数のみ）')
    ODD_RESTRICTION = (Violation.LOCK, '奇数制限が発動中です（奇数のみ）')
    DOUBLE_DIGIT_SEAL = (Violation.LOCK, '2桁封じが発動中です（J〜Kは出せません）')
    HOT_MILK = (Violation.LOCK, 'ホットミルクが発動中です（ダイヤ/ハートのみ）')

    # 强度
    TYPE_MISMATCH = (Violation.STRENGTH, '場のカードと同じタイプの組み合わせを出してください')
    COUNT_MISMATCH = (Violation.STRENGTH, '場のカードと枚数が合いません')
    NOT_STRONGER = (Violation.STRENGTH, '場のカードより強くありません')
    TAEPODONG_ON_FIELD = (Violation.STRENGTH, 'テポドンには誰も勝てません')
    TRUMP_ON_FIELD = (Violation.STRENGTH, '切り札には切り札でしか対抗できません')
    SANDSTORM_ON_FIELD = (Violation.STRENGTH, '砂嵐には3のスリーカードでしか対抗できません')
    DOUBLE_KING_LIMIT = (Violation.STRENGTH, 'ダブルキングはK以下のペアにしか出せません')
    ARTHUR_LIMIT = (Violation.STRENGTH, 'アーサー効果によりジョーカーの強さが10〜Jの間です')

    # 出完
    FORBIDDEN_FINISH = (Violation.TERMINAL, 'J, 2, 8, Jokerでは上がることができません')
    ADAUCHI_BAN = (Violation.TERMINAL, '仇討ち禁止令により上がれません')
    SECURITY_LAW = (Violation.TERMINAL, '治安維持法により革命できません')

    INTERNAL_ERROR = (Violation.INTERNAL, '内部エラー')

    def __init__(self, violation: Optional[Violation], label: str):
        self.violation = violation
        self.label = label


@dataclass(frozen=True)
class ValidationResult:
    """
    验证结果

    Attributes:
        valid: 是否合法
        reason: 结果标签
        play: 判定所用的出牌 (组合检查通过后才有)
    """
    valid: bool
    reason: Reason = Reason.ACCEPTED
    play: Optional[Play] = None

    @property
    def violation(self) -> Optional[Violation]:
        return self.reason.violation

    @classmethod
    def accept(cls, play: Optional[Play], reason: Reason = Reason.ACCEPTED) -> 'ValidationResult':
        return cls(True, reason, play)

    @classmethod
    def reject(cls, reason: Reason, play: Optional[Play] = None) -> 'ValidationResult':
        return cls(False, reason, play)


class InternalValidationError(Exception):
    """验证过程中内部不变量被破坏"""


class PlayValidator:
    """
    出牌验证器

    无状态；每次调用都由外部传入快照
    """

    def validate(
        self,
        player: Player,
        cards: Sequence[Card],
        context: ValidationContext,
    ) -> ValidationResult:
        """
        验证出牌

        Args:
            player: 出牌玩家
            cards: 要出的牌
            context: 验证快照

        Returns:
            ValidationResult
        """
        cards = tuple(cards)
        result = self._check_ownership(player, cards)
        if result is not None:
            return self._log_rejection(player, result)

        try:
            result = self._run_stages(player, cards, context)
        except InternalValidationError as e:
            logger.error(f"Internal validation error for {player.id}: {e}")
            return ValidationResult.reject(Reason.INTERNAL_ERROR)

        if not result.valid:
            return self._log_rejection(player, result)
        return result

    def _run_stages(
        self,
        player: Player,
        cards: tuple,
        context: ValidationContext,
    ) -> ValidationResult:
        play = self.classify(cards, context)
        if play is None:
            return ValidationResult.reject(Reason.INVALID_COMBINATION)

        disabled = self._check_disabled(play, context)
        if disabled is not None:
            return ValidationResult.reject(disabled, play)

        if self._is_down_number(play, context):
            return self._check_terminal(player, play, context, Reason.DOWN_NUMBER, down_number=True)

        lock = self._check_locks(play, context)
        if lock is not None:
            return ValidationResult.reject(lock, play)

        strength = self._check_strength(play, context)
        if not strength.valid:
            return strength

        return self._check_terminal(player, play, context, strength.reason)

    # ==================== 持有 / 组合 ====================

    @staticmethod
    def _check_ownership(player: Player, cards: tuple) -> Optional[ValidationResult]:
        ids = [c.id for c in cards]
        if len(set(ids)) != len(ids):
            return ValidationResult.reject(Reason.DUPLICATE_CARD)
        if not player.hand.contains_ids(ids):
            return ValidationResult.reject(Reason.NOT_IN_HAND)
        return None

    @staticmethod
    def classify(cards: Sequence[Card], context: ValidationContext) -> Optional[Play]:
        """
        按规则配置分类 (特殊组合优先)

        Returns:
            Play，无效组合返回 None
        """
        settings = context.settings
        special = PlayClassifier.classify_special(cards, settings.special_play_types())
        if special is not None:
            return special
        return PlayClassifier.classify(cards, settings.classify_options())

    @staticmethod
    def _check_disabled(play: Play, context: ValidationContext) -> Optional[Reason]:
        settings = context.settings
        if play.play_type == PlayType.STAIR and not settings.stairs:
            return Reason.STAIRS_DISABLED
        if play.play_type == PlayType.EMPEROR and not settings.emperor:
            return Reason.EMPEROR_DISABLED
        return None

    @staticmethod
    def _is_down_number(play: Play, context: ValidationContext) -> bool:
        if not context.settings.down_number:
            return False
        field_play = context.field.current_play
        if field_play is None:
            return False
        if play.play_type != PlayType.SINGLE or field_play.play_type != PlayType.SINGLE:
            return False
        return is_down_number(field_play.cards[0], play.cards[0])

    # ==================== 限制 ====================

    @staticmethod
    def _check_locks(play: Play, context: ValidationContext) -> Optional[Reason]:
        """
        检查全部生效中的限制

        Returns:
            第一个不满足的限制，全部满足返回 None
        """
        settings = context.settings
        locks = context.locks
        naturals = [c for c in play.cards if not c.is_joker]

        if locks.suit is not None and (settings.suit_lock or settings.strict_lock):
            if any(c.suit != locks.suit for c in naturals):
                return Reason.SUIT_LOCK

        if locks.number and (settings.number_lock or settings.strict_lock):
            if play.play_type != PlayType.STAIR:
                return Reason.NUMBER_LOCK

        if locks.color is not None and (settings.color_lock or settings.five_color_lock):
            if any(c.color != locks.color for c in naturals):
                return Reason.COLOR_LOCK

        if locks.partial_suits is not None and settings.partial_lock:
            missing = locks.partial_suits - {c.suit for c in naturals}
            if len(missing) > play.joker_count:
                return Reason.PARTIAL_LOCK

        if locks.parity == Parity.EVEN and settings.even_restriction:
            if any(c.rank not in EVEN_RANKS and c.rank not in PARITY_FREE_RANKS for c in play.cards):
                return Reason.EVEN_RESTRICTION

        if locks.parity == Parity.ODD and settings.odd_restriction:
            if any(c.rank not in ODD_RANKS and c.rank not in PARITY_FREE_RANKS for c in play.cards):
                return Reason.ODD_RESTRICTION

        if locks.double_digit_seal and settings.double_digit_seal:
            if any(c.rank in DOUBLE_DIGIT_RANKS for c in play.cards):
                return Reason.DOUBLE_DIGIT_SEAL

        if locks.hot_milk == HOT_MILK_WARM and settings.hot_milk:
            if any(c.suit not in WARM_SUITS for c in naturals):
                return Reason.HOT_MILK

        return None

    # ==================== 强度 ====================

    def _check_strength(self, play: Play, context: ValidationContext) -> ValidationResult:
        """
        强度检查

        特殊规则按固定顺序尝试，生效即返回，最后使用一般规则
        """
        field = context.field
        if field.is_empty:
            return ValidationResult.accept(play, self._plain_reason(play))

        field_play = field.current_play
        if field_play is None:
            raise InternalValidationError("non-empty field without a current play")

        settings = context.settings
        flags = context.flags
        reverse = context.should_reverse

        # 10 フリ
        if settings.ten_free and flags.ten_free:
            return ValidationResult.accept(play, Reason.TEN_FREE)

        # 大浦洞
        if PlayType.TAEPODONG in (play.play_type, field_play.play_type):
            if PlayClassifier.can_follow(field_play, play, reverse):
                return ValidationResult.accept(play, Reason.TAEPODONG)
            return ValidationResult.reject(Reason.TAEPODONG_ON_FIELD, play)

        # 切り札
        result = self._check_trump(field_play, play, context)
        if result is not None:
            return result

        # 融合革命 / 追革
        if settings.fusion_revolution and fusion_total(field_play, play) >= 4:
            return ValidationResult.accept(play, Reason.FUSION_REVOLUTION)
        if settings.tsui_kaku and len(field_play) == len(play) and fusion_total(field_play, play) >= 4:
            return ValidationResult.accept(play, Reason.TSUI_KAKU)

        # 女装
        if play.play_type == PlayType.CROSS_DRESSING:
            return self._check_cross_dressing(field_play, play, reverse)

        # 砂嵐
        if settings.sandstorm:
            result = self._check_sandstorm(field_play, play)
            if result is not None:
                return result

        # スぺ3返し
        if (
            settings.spade_three_return
            and self._is_lone(play, Suit.SPADE, Rank.THREE)
            and field_play.play_type == PlayType.SINGLE
            and field_play.cards[0].is_joker
        ):
            return ValidationResult.accept(play, Reason.SPADE_THREE_RETURN)

        # 黑桃阶梯 / 隧道: 固定胜负
        fixed = (PlayType.SPADE_STAIR, PlayType.TUNNEL)
        if play.play_type in fixed or field_play.play_type in fixed:
            if PlayClassifier.can_follow(field_play, play, reverse):
                reason = Reason.SPADE_STAIR if play.play_type == PlayType.SPADE_STAIR else Reason.STAIR
                return ValidationResult.accept(play, reason)
            return ValidationResult.reject(self._strength_failure(field_play, play), play)

        # ダブルキング
        if settings.double_king and play.is_group_of(PlayType.PAIR, Rank.KING):
            result = self._check_double_king(field_play, play, reverse)
            if result is not None:
                return result

        # アーサー
        if settings.arthur and flags.arthur:
            result = self._check_arthur(field_play, play, reverse)
            if result is not None:
                return result

        # 红 7 / 黑 7
        result = self._check_seven_power(field_play, play, context)
        if result is not None:
            return result

        # 一般规则
        if not PlayClassifier.can_follow(field_play, play, reverse):
            return ValidationResult.reject(self._strength_failure(field_play, play), play)
        return ValidationResult.accept(play, self._plain_reason(play))

    @staticmethod
    def _plain_reason(play: Play) -> Reason:
        if play.is_stair_like:
            return Reason.STAIR
        if play.play_type == PlayType.EMPEROR:
            return Reason.EMPEROR
        if play.play_type == PlayType.CROSS_DRESSING:
            return Reason.CROSS_DRESSING
        if play.is_goroawase:
            return Reason.GOROAWASE
        return Reason.ACCEPTED

    @staticmethod
    def _strength_failure(field_play: Play, play: Play) -> Reason:
        if PlayClassifier.same_shape(field_play, play):
            return Reason.NOT_STRONGER
        if field_play.play_type == play.play_type or (field_play.is_stair_like and play.is_stair_like):
            return Reason.COUNT_MISMATCH
        return Reason.TYPE_MISMATCH

    @staticmethod
    def _is_lone(play: Play, suit: Suit, rank: Rank) -> bool:
        return (
            play.play_type == PlayType.SINGLE
            and play.cards[0].suit == suit
            and play.cards[0].rank == rank
        )

    @staticmethod
    def _check_trump(field_play: Play, play: Play, context: ValidationContext) -> Optional[ValidationResult]:
        """
        切り札: 含切り札的出牌压过同结构的非切り札出牌

        双方都含切り札时交给一般规则
        """
        trump = context.locks.trump_rank
        if not context.settings.trump or trump is None:
            return None
        play_trump = play.has_rank(trump)
        field_trump = field_play.has_rank(trump)
        if play_trump == field_trump:
            return None
        if not PlayClassifier.same_shape(field_play, play):
            return ValidationResult.reject(Reason.TYPE_MISMATCH, play)
        if play_trump:
            return ValidationResult.accept(play, Reason.TRUMP)
        return ValidationResult.reject(Reason.TRUMP_ON_FIELD, play)

    @staticmethod
    def _check_cross_dressing(field_play: Play, play: Play, reverse: bool) -> ValidationResult:
        """女装按 Q 的强度与半数张数的场牌比较"""
        if len(field_play) != len(play) // 2:
            return ValidationResult.reject(Reason.COUNT_MISMATCH, play)
        if reverse:
            stronger = play.strength < field_play.strength
        else:
            stronger = play.strength > field_play.strength
        if stronger:
            return ValidationResult.accept(play, Reason.CROSS_DRESSING)
        return ValidationResult.reject(Reason.NOT_STRONGER, play)

    @staticmethod
    def _check_sandstorm(field_play: Play, play: Play) -> Optional[ValidationResult]:
        """3×3 压过任何三张；场上的砂嵐只能由砂嵐压过"""
        if play.is_group_of(PlayType.TRIPLE, Rank.THREE):
            if field_play.play_type != play.play_type:
                return ValidationResult.reject(Reason.TYPE_MISMATCH, play)
            return ValidationResult.accept(play, Reason.SANDSTORM)
        if field_play.is_group_of(PlayType.TRIPLE, Rank.THREE):
            return ValidationResult.reject(Reason.SANDSTORM_ON_FIELD, play)
        return None

    @staticmethod
    def _check_double_king(field_play: Play, play: Play, reverse: bool) -> Optional[ValidationResult]:
        """K×2 可以压过强度 ≤ K 的任意对子 (反转时为 ≥ K)"""
        if field_play.play_type != PlayType.PAIR:
            return None
        if reverse:
            allowed = field_play.strength >= DOUBLE_KING_MAX_STRENGTH
        else:
            allowed = field_play.strength <= DOUBLE_KING_MAX_STRENGTH
        if allowed:
            return ValidationResult.accept(play, Reason.DOUBLE_KING)
        return ValidationResult.reject(Reason.DOUBLE_KING_LIMIT, play)

    @staticmethod
    def _check_arthur(field_play: Play, play: Play, reverse: bool) -> Optional[ValidationResult]:
        """含 Joker 的出牌按 10.5 的强度比较"""
        field_joker = field_play.joker_count > 0
        play_joker = play.joker_count > 0
        if not field_joker and not play_joker:
            return None
        if field_play.play_type != play.play_type:
            return ValidationResult.reject(Reason.TYPE_MISMATCH, play)
        field_strength = ARTHUR_JOKER_STRENGTH if field_joker else field_play.strength
        play_strength = ARTHUR_JOKER_STRENGTH if play_joker else play.strength
        if reverse:
            field_strength, play_strength = -field_strength, -play_strength
        if play_strength > field_strength:
            return ValidationResult.accept(play, Reason.ARTHUR)
        return ValidationResult.reject(Reason.ARTHUR_LIMIT, play)

    @staticmethod
    def _is_power_seven(play: Play, context: ValidationContext) -> bool:
        """通常时红 7、反转时黑 7 的单张"""
        if play.play_type != PlayType.SINGLE or play.cards[0].rank != Rank.SEVEN:
            return False
        color = play.cards[0].color
        if context.should_reverse:
            return context.settings.black_seven_power and color == Color.BLACK
        return context.settings.red_seven_power and color == Color.RED

    def _check_seven_power(
        self,
        field_play: Play,
        play: Play,
        context: ValidationContext,
    ) -> Optional[ValidationResult]:
        """
        强化 7 的单张比较

        强化 7 固定为 15.5 (不受反转影响)，Joker 仍在其上，其余牌按反转后的强度
        """
        if play.play_type != PlayType.SINGLE or field_play.play_type != PlayType.SINGLE:
            return None
        play_power = self._is_power_seven(play, context)
        field_power = self._is_power_seven(field_play, context)
        if not play_power and not field_power:
            return None

        reverse = context.should_reverse

        def oriented(p: Play, power: bool) -> float:
            if power:
                return SEVEN_POWER_STRENGTH
            if p.cards[0].is_joker:
                return JOKER_TOP_STRENGTH
            return -p.strength if reverse else p.strength

        if oriented(play, play_power) > oriented(field_play, field_power):
            return ValidationResult.accept(play, Reason.SEVEN_POWER)
        return ValidationResult.reject(Reason.NOT_STRONGER, play)

    # ==================== 出完 ====================

    @staticmethod
    def _check_terminal(
        player: Player,
        play: Play,
        context: ValidationContext,
        reason: Reason,
        down_number: bool = False,
    ) -> ValidationResult:
        """
        禁止上がり / 仇讨禁止令 / 治安维持法

        ダウンナンバー只检查禁止上がり
        """
        settings = context.settings
        finishing = player.hand.size() - len(play) == 0

        if settings.forbidden_finish and finishing:
            if any(c.rank in FORBIDDEN_FINISH_RANKS for c in play.cards):
                return ValidationResult.reject(Reason.FORBIDDEN_FINISH, play)

        if down_number:
            return ValidationResult.accept(play, reason)

        standings = context.standings
        if settings.adauchi_ban and finishing:
            last = standings.would_place_last_after(player.id)
            if (
                last is not None
                and last == standings.city_fall_victim_id
                and player.id == standings.city_fall_attacker_id
            ):
                return ValidationResult.reject(Reason.ADAUCHI_BAN, play)

        if settings.security_law and standings.was_demoted(player.id):
            if revolution_effects(play, context):
                return ValidationResult.reject(Reason.SECURITY_LAW, play)

        return ValidationResult.accept(play, reason)

    @staticmethod
    def _log_rejection(player: Player, result: ValidationResult) -> ValidationResult:
        logger.debug(f"Rejected play by {player.id}: {result.reason.name}")
        return result
