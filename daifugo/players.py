"""
玩家视图与名次状态

引擎只读取这些信息 (手牌、身份、是否已出完)
"""
from dataclasses import dataclass, field
from typing import Tuple, Optional

from .hand import Hand


@dataclass
class Player:
    """
    玩家

    Attributes:
        id: 玩家 id
        hand: 手牌
        is_finished: 是否已出完
        finish_position: 出完名次 (1 起)
    """
    id: str
    hand: Hand = field(default_factory=Hand)
    is_finished: bool = False
    finish_position: Optional[int] = None


@dataclass(frozen=True)
class Standings:
    """
    名次相关快照

    Attributes:
        unfinished_ids: 尚未出完的玩家 (座位顺序)
        city_fall_attacker_id: 上局造成都落的玩家
        city_fall_victim_id: 上局被都落的玩家
    """
    unfinished_ids: Tuple[str, ...] = ()
    city_fall_attacker_id: Optional[str] = None
    city_fall_victim_id: Optional[str] = None

    def was_demoted(self, player_id: str) -> bool:
        return self.city_fall_victim_id is not None and self.city_fall_victim_id == player_id

    def would_place_last_after(self, player_id: str) -> Optional[str]:
        """
        player_id 出完后，若只剩一人未出完，返回该玩家 (即将成为最后一名)
        """
        remaining = [pid for pid in self.unfinished_ids if pid != player_id]
        if len(remaining) == 1:
            return remaining[0]
        return None
