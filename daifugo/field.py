"""
场 (Field) 状态

使用不可变数据结构，只能追加:
- 出牌历史按顺序记录 (出牌, 出牌者)
- 场被清空时由外部编排器新建 Field()
"""
from dataclasses import dataclass
from typing import Tuple, Optional

from .plays import Play


@dataclass(frozen=True)
class FieldEntry:
    """出牌历史条目"""
    play: Play
    owner_id: str


@dataclass(frozen=True)
class Field:
    """
    不可变场状态

    Attributes:
        history: 出牌历史 ((play, owner_id), ...)
    """
    history: Tuple[FieldEntry, ...] = ()

    def with_play(self, play: Play, owner_id: str) -> 'Field':
        """
        追加出牌后的新场

        Args:
            play: 已通过验证的出牌
            owner_id: 出牌玩家

        Returns:
            新场
        """
        return Field(history=self.history + (FieldEntry(play, owner_id),))

    @property
    def is_empty(self) -> bool:
        return not self.history

    @property
    def current_entry(self) -> Optional[FieldEntry]:
        return self.history[-1] if self.history else None

    @property
    def current_play(self) -> Optional[Play]:
        return self.history[-1].play if self.history else None

    @property
    def current_owner(self) -> Optional[str]:
        return self.history[-1].owner_id if self.history else None

    @property
    def previous_entry(self) -> Optional[FieldEntry]:
        """当前出牌之前的一条"""
        return self.history[-2] if len(self.history) >= 2 else None

    def last(self, n: int) -> Tuple[FieldEntry, ...]:
        """最近 n 条出牌 (时间顺序)"""
        if n <= 0:
            return ()
        return self.history[-n:]

    def __len__(self) -> int:
        return len(self.history)
