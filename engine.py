import logging
from functools import lru_cache
from typing import Dict, FrozenSet, Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from mahjong.shanten import Shanten

from models import COPIES_PER_KIND, HAND_SIZE, NUM_KINDS, Tile, is_honor, kinds_of
from utils import kinds_to_str

logger = logging.getLogger(__name__)


class HandOracle(Protocol):
    """
    手牌评估接口：输入 13 张牌的种类 ID，给出向听数和有效牌种类
    RuleEngine 是默认实现；测试可以换成固定表的桩对象
    """

    def get_shanten(self, kinds: Sequence[int]) -> int:
        ...

    def get_effective_kinds(self, kinds: Sequence[int]) -> Set[int]:
        ...


class RuleEngine:
    CACHE_SIZE = 4096

    def __init__(self, cache_size: int = CACHE_SIZE):
        self.shanten_calculator = Shanten()
        # 以 34 计数元组为键缓存 (向听数, 有效牌)，结果只取决于牌的多重集合；LRU 限制条目数
        self._evaluate_counts = lru_cache(maxsize=cache_size)(self._evaluate_uncached)

    # --- 基础工具方法 ---
    @staticmethod
    def to_34_array(kinds: Iterable[int]) -> List[int]:
        """种类 ID 列表 -> 长度 34 的计数数组"""
        counts = [0] * NUM_KINDS
        for k in kinds:
            if not (0 <= k < NUM_KINDS):
                raise ValueError(f"kind id out of range: {k}")
            counts[k] += 1
        return counts

    def cache_info(self):
        return self._evaluate_counts.cache_info()

    def _evaluate(self, kinds: Sequence[int]) -> Tuple[int, FrozenSet[int]]:
        if len(kinds) != HAND_SIZE:
            raise ValueError(f"expected {HAND_SIZE} tiles, got {len(kinds)}")
        return self._evaluate_counts(tuple(self.to_34_array(kinds)))

    def _evaluate_uncached(self, counts: Tuple[int, ...]) -> Tuple[int, FrozenSet[int]]:
        hand = list(counts)
        shanten = self.shanten_calculator.calculate_shanten(hand)
        effective = set()
        for draw_tile in range(NUM_KINDS):
            # 第 5 张不存在
            if hand[draw_tile] >= COPIES_PER_KIND:
                continue
            hand[draw_tile] += 1
            if self.shanten_calculator.calculate_shanten(hand) < shanten:
                effective.add(draw_tile)
            hand[draw_tile] -= 1
        return shanten, frozenset(effective)

    def get_shanten(self, kinds: Sequence[int]) -> int:
        """计算 13 张手牌的向听数 (0 = 听牌)"""
        return self._evaluate(kinds)[0]

    def get_effective_kinds(self, kinds: Sequence[int]) -> Set[int]:
        """摸到后能让向听数下降的牌种类"""
        return set(self._evaluate(kinds)[1])


def iter_runs_containing(kind_id: int) -> Iterable[Tuple[int, int, int]]:
    """包含该牌的所有顺子 (同花色连续三张)，字牌没有顺子"""
    if is_honor(kind_id):
        return
    base = (kind_id // 9) * 9
    offset = kind_id - base
    for start in (offset - 2, offset - 1, offset):
        if 0 <= start <= 6:
            yield (base + start, base + start + 1, base + start + 2)


def completes_group(kinds: Sequence[int], kind_id: int) -> bool:
    """加入 kind_id 后能否和手里的两张直接组成面子 (顺子或刻子)"""
    counts = RuleEngine.to_34_array(kinds)
    if counts[kind_id] >= 2:
        return True
    for run in iter_runs_containing(kind_id):
        if all(counts[t] > 0 for t in run if t != kind_id):
            return True
    return False


class DiscardAdvisor:
    """
    打牌推荐：
    1. 向听数越小越好
    2. 同向听时比较加权进张分 = Σ 剩余枚数 × 权重
       权重：摸到后直接成面子 = 10，否则 = 1
    剩余枚数只扣除可见的牌 (自己的手牌 + 牌河)
    """

    GROUP_WEIGHT = 10
    BASE_WEIGHT = 1

    def __init__(self, oracle: Optional[HandOracle] = None):
        self.oracle = oracle if oracle is not None else RuleEngine()

    @staticmethod
    def count_visible(hand: Sequence[Tile], discard_pile: Sequence[Tile]) -> List[int]:
        visible = [0] * NUM_KINDS
        for t in list(hand) + list(discard_pile):
            visible[t.kind_id] += 1
        return visible

    def _score_rest(self, rest: List[int], visible: List[int]) -> Dict:
        shanten = self.oracle.get_shanten(rest)
        details = []
        score = 0
        for draw_tile in sorted(set(self.oracle.get_effective_kinds(rest))):
            left = max(0, COPIES_PER_KIND - visible[draw_tile])
            weight = self.GROUP_WEIGHT if completes_group(rest, draw_tile) else self.BASE_WEIGHT
            score += left * weight
            details.append({'tile': draw_tile, 'left_count': left, 'weight': weight})
        return {'shanten_after_discard': shanten, 'score': score, 'details': details}

    # --- 核心方法 ---

    def evaluate_discards(self, hand: Sequence[Tile], discard_pile: Sequence[Tile]) -> List[Dict]:
        """按手牌顺序逐张评估打出后的结果，手牌不足 14 张时返回空列表"""
        if len(hand) <= HAND_SIZE:
            return []

        visible = self.count_visible(hand, discard_pile)
        # 同种类的牌打出后结果相同，只算一次
        memo: Dict[int, Dict] = {}
        evaluations = []
        for candidate in hand:
            cached = memo.get(candidate.kind_id)
            if cached is None:
                rest = [t.kind_id for t in hand if t.physical_id != candidate.physical_id]
                cached = self._score_rest(rest, visible)
                memo[candidate.kind_id] = cached
            evaluations.append({
                'discard_id': candidate.physical_id,
                'discard_tile': candidate.kind_id,
                **cached,
            })
        return evaluations

    @staticmethod
    def _optimal(evaluations: List[Dict]) -> List[Dict]:
        if not evaluations:
            return []
        min_shanten = min(e['shanten_after_discard'] for e in evaluations)
        candidates = [e for e in evaluations if e['shanten_after_discard'] == min_shanten]
        max_score = max(e['score'] for e in candidates)
        return [e for e in candidates if e['score'] == max_score]

    def compute_best_discards(self, hand: Sequence[Tile], discard_pile: Sequence[Tile]) -> Set[int]:
        """返回所有最优打牌的物理 ID (平局全部返回)"""
        best = self._optimal(self.evaluate_discards(hand, discard_pile))
        logger.debug("best discards for %s: %s",
                     kinds_to_str(kinds_of(hand)), kinds_to_str([e['discard_tile'] for e in best]))
        return {e['discard_id'] for e in best}

    def pick_best_discard(self, hand: Sequence[Tile], discard_pile: Sequence[Tile]) -> Optional[int]:
        """只要一张时，取手牌顺序中第一张最优牌"""
        best = self._optimal(self.evaluate_discards(hand, discard_pile))
        return best[0]['discard_id'] if best else None

    def preview_discard(self, hand: Sequence[Tile], physical_id: int,
                        discard_pile: Sequence[Tile] = ()) -> Optional[Dict]:
        """
        预览打出某张牌：当前向听 (不含摸到的牌) -> 打出后的向听，以及有效牌
        牌不在 14 张手牌中时返回 None
        """
        if len(hand) <= HAND_SIZE or all(t.physical_id != physical_id for t in hand):
            return None

        current_shanten = self.oracle.get_shanten(kinds_of(hand[:HAND_SIZE]))
        rest = [t.kind_id for t in hand if t.physical_id != physical_id]
        result = self._score_rest(rest, self.count_visible(hand, discard_pile))
        return {
            'current_shanten': current_shanten,
            'next_shanten': result['shanten_after_discard'],
            'is_shanten_down': result['shanten_after_discard'] < current_shanten,
            'score': result['score'],
            'details': result['details'],
        }
