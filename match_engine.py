import logging
import random
from typing import List, Optional, Sequence, Tuple

from engine import HandOracle, RuleEngine
from models import (
    HAND_SIZE, NUM_TILES, GameStatus, Snapshot, Tile, build_deck, kinds_of, sort_by_kind,
)
from utils import kinds_to_str

logger = logging.getLogger(__name__)


class PracticeMatch:
    """
    单人牌效练习对局：只有一位玩家，摸切直到和牌

    手牌 14 张时，前 13 张按种类排序，第 14 张是刚摸到的牌 (不参与排序)
    任意时刻 手牌 + 牌山 + 牌河 = 136 张，且每张物理牌只出现一次
    只有 reset / discard_and_draw / undo 三个操作会修改状态
    """

    def __init__(self, oracle: Optional[HandOracle] = None, rng: Optional[random.Random] = None):
        self.oracle = oracle if oracle is not None else RuleEngine()
        self._rng = rng

        self._hand: Tuple[Tile, ...] = ()
        self._wall: Tuple[Tile, ...] = ()
        self._discard_pile: Tuple[Tile, ...] = ()
        self._history: List[Snapshot] = []
        self.status = GameStatus.UNINITIALIZED

    # --- 只读视图 ---
    @property
    def hand(self) -> Tuple[Tile, ...]:
        return self._hand

    @property
    def discard_pile(self) -> Tuple[Tile, ...]:
        return self._discard_pile

    @property
    def wall_remaining(self) -> int:
        return len(self._wall)

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 0

    @property
    def history_depth(self) -> int:
        return len(self._history)

    @property
    def winning_hand(self) -> Optional[Tuple[Tile, ...]]:
        """和牌时的 14 张手牌，未和牌为 None"""
        return self._hand if self.status == GameStatus.COMPLETE else None

    @property
    def drawn_tile(self) -> Optional[Tile]:
        return self._hand[HAND_SIZE] if len(self._hand) > HAND_SIZE else None

    def snapshot(self) -> Snapshot:
        return Snapshot(self._hand, self._wall, self._discard_pile)

    # --- 状态变更 ---
    def reset(self, shuffle: bool = True, deck: Optional[Sequence[int]] = None) -> None:
        """
        开局：前 13 张排序后作为手牌，第 14 张作为摸到的牌放在最后，其余 122 张为牌山
        deck 为物理 ID 序列时按该牌序开局 (复盘/测试)，必须恰好是 0-135 的一个排列
        """
        if deck is not None:
            if sorted(deck) != list(range(NUM_TILES)):
                raise ValueError("deck must be a permutation of all 136 physical tile ids")
            tiles = [Tile.from_physical(i) for i in deck]
        else:
            tiles = build_deck(shuffle, self._rng)

        self._hand = tuple(sort_by_kind(tiles[:HAND_SIZE])) + (tiles[HAND_SIZE],)
        self._wall = tuple(tiles[HAND_SIZE + 1:])
        self._discard_pile = ()
        self._history = []
        self.status = GameStatus.ACTIVE
        logger.debug("practice reset, hand=%s", kinds_to_str(kinds_of(self._hand)))

    def discard_and_draw(self, physical_id: int) -> bool:
        """
        打出一张牌并从牌山摸一张，作为一个动作记入历史
        牌不在手里、牌山已空或对局不在进行中时什么都不做，返回 False
        """
        if self.status != GameStatus.ACTIVE:
            return False
        discarded = next((t for t in self._hand if t.physical_id == physical_id), None)
        if discarded is None or not self._wall:
            logger.debug("discard ignored: tile=%s wall=%d", physical_id, len(self._wall))
            return False

        self._history.append(self.snapshot())

        remaining = [t for t in self._hand if t.physical_id != physical_id]
        drawn = self._wall[0]
        self._hand = tuple(sort_by_kind(remaining)) + (drawn,)
        self._wall = self._wall[1:]
        self._discard_pile = self._discard_pile + (discarded,)
        logger.debug("discarded %d, drew %d, wall=%d", physical_id, drawn.physical_id, len(self._wall))

        if self._is_winning_draw():
            self.status = GameStatus.COMPLETE
            logger.debug("winning hand: %s", kinds_to_str(kinds_of(self._hand)))
        elif not self._wall:
            self.status = GameStatus.EXHAUSTED
            logger.debug("wall exhausted without a win")
        return True

    def undo(self) -> bool:
        """撤销上一次摸切；没有历史或已经和牌时什么都不做"""
        if not self._history or self.status == GameStatus.COMPLETE:
            return False
        previous = self._history.pop()
        self._hand = previous.hand
        self._wall = previous.wall
        self._discard_pile = previous.discard_pile
        # 快照只在进行中的对局里保存
        self.status = GameStatus.ACTIVE
        logger.debug("undo, history=%d", len(self._history))
        return True

    # --- 判定 ---
    def current_shanten(self) -> Optional[int]:
        """不含摸到那张牌的 13 张的向听数"""
        if len(self._hand) < HAND_SIZE:
            return None
        return self.oracle.get_shanten(kinds_of(self._hand[:HAND_SIZE]))

    def _is_winning_draw(self) -> bool:
        """13 张听牌，且摸到的牌在有效牌中"""
        settled = kinds_of(self._hand[:HAND_SIZE])
        if self.oracle.get_shanten(settled) != 0:
            return False
        return self._hand[HAND_SIZE].kind_id in self.oracle.get_effective_kinds(settled)
