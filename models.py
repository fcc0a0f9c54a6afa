import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

NUM_TILES = 136
NUM_KINDS = 34
COPIES_PER_KIND = 4
HAND_SIZE = 13


class TileConst:
    """
    常量类：为了代码可读性，定义字牌的索引
    0-8: 万 (1m-9m)
    9-17: 筒 (1p-9p)
    18-26: 索 (1s-9s)
    27-33: 字牌 (东 南 西 北 白 发 中)
    """
    EAST, SOUTH, WEST, NORTH = 27, 28, 29, 30
    HAKU, HATSU, CHUN = 31, 32, 33

    # 花色分组: 万 / 筒 / 索 / 字
    SUIT_MAN, SUIT_PIN, SUIT_SOU, SUIT_HONOR = 0, 1, 2, 3


class GameStatus:
    """
    练习对局的状态
    UNINITIALIZED -> ACTIVE -> COMPLETE (和牌，终局)
                            -> EXHAUSTED (牌山摸完仍未和牌)
    只有 reset 可以离开 COMPLETE；EXHAUSTED 还允许 undo 退回
    """
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    COMPLETE = "complete"
    EXHAUSTED = "exhausted"


def kind_of(physical_id: int) -> int:
    """物理牌 ID (0-135) -> 种类 ID (0-33)"""
    if not (0 <= physical_id < NUM_TILES):
        raise ValueError(f"physical tile id out of range: {physical_id}")
    if physical_id < 36:
        return physical_id // 4  # 万
    if physical_id < 72:
        return 9 + (physical_id - 36) // 4  # 筒
    if physical_id < 108:
        return 18 + (physical_id - 72) // 4  # 索
    return 27 + (physical_id - 108) // 4  # 字牌


def suit_of(kind_id: int) -> int:
    """种类 ID 所在的花色分组 (TileConst.SUIT_*)"""
    if not (0 <= kind_id < NUM_KINDS):
        raise ValueError(f"kind id out of range: {kind_id}")
    return min(kind_id // 9, TileConst.SUIT_HONOR)


def is_honor(kind_id: int) -> bool:
    return suit_of(kind_id) == TileConst.SUIT_HONOR


@dataclass(frozen=True)
class Tile:
    """
    一张具体的牌：物理 ID + 种类 ID
    同一种类有 4 张物理牌，例如 0,1,2,3 都是一万
    """
    physical_id: int
    kind_id: int

    @classmethod
    def from_physical(cls, physical_id: int) -> "Tile":
        return cls(physical_id, kind_of(physical_id))


def build_deck(shuffle: bool = True, rng: Optional[random.Random] = None) -> List[Tile]:
    """
    生成全部 136 张牌
    shuffle=False 时按物理 ID 升序排列 (测试用)；
    shuffle=True 时洗牌，rng 可注入以便复现
    """
    deck = [Tile.from_physical(i) for i in range(NUM_TILES)]
    if shuffle:
        (rng or random.Random()).shuffle(deck)
    return deck


def sort_by_kind(tiles: Sequence[Tile]) -> List[Tile]:
    """按种类 ID 升序排列，同种类保持原有顺序，不修改输入"""
    return sorted(tiles, key=lambda t: t.kind_id)


def kinds_of(tiles: Sequence[Tile]) -> List[int]:
    return [t.kind_id for t in tiles]


@dataclass(frozen=True)
class Snapshot:
    """
    某一时刻的 (手牌, 牌山, 牌河)，撤销历史的单位
    全部使用元组保存，快照之间按值比较
    """
    hand: Tuple[Tile, ...]
    wall: Tuple[Tile, ...]
    discard_pile: Tuple[Tile, ...]

    def total_tiles(self) -> int:
        return len(self.hand) + len(self.wall) + len(self.discard_pile)
