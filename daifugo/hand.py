"""手牌"""
from typing import List, Tuple, Iterable, Iterator, FrozenSet

from .cards import Card


class Hand:
    """
    玩家手牌 (可变，无序)

    只由持有者所在的外部编排器增删，验证器只读取
    """

    def __init__(self, cards: Iterable[Card] = ()):
        self._cards: List[Card] = list(cards)

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    def card_ids(self) -> FrozenSet[str]:
        return frozenset(c.id for c in self._cards)

    def contains_ids(self, ids: Iterable[str]) -> bool:
        """是否持有全部指定 id 的牌"""
        owned = self.card_ids()
        return all(card_id in owned for card_id in ids)

    def add(self, cards: Iterable[Card]) -> None:
        self._cards.extend(cards)

    def remove(self, cards: Iterable[Card]) -> None:
        """
        按 id 移除牌

        Raises:
            ValueError: 有牌不在手中
        """
        ids = {c.id for c in cards}
        missing = ids - self.card_ids()
        if missing:
            raise ValueError(f"Cards not in hand: {sorted(missing)}")
        self._cards = [c for c in self._cards if c.id not in ids]

    def sort(self, reverse_strength: bool = False) -> None:
        """按强度排序 (革命中 reverse_strength=True)"""
        self._cards.sort(key=lambda c: (c.strength, c.suit.value), reverse=reverse_strength)

    def size(self) -> int:
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(tuple(self._cards))

    def __repr__(self) -> str:
        return f"Hand({' '.join(str(c) for c in self._cards)})"
