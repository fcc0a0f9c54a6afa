from typing import List, Sequence

from models import COPIES_PER_KIND, NUM_KINDS, Tile


def parse_tiles(hand_str: str) -> List[int]:
    """
    将天凤格式的字符串解析为牌的种类 ID 列表。
    支持的格式例如: '123m456p789s1122z'
    m: 万(0-8), p: 筒(9-17), s: 索(18-26), z: 字牌(27-33, 1-7分别对应东南西北白发中)

    返回:
        List[int]: 包含牌 ID 的列表，例如 [0, 1, 2, ...]
    """
    result = []
    current_numbers = []
    offsets = {'m': 0, 'p': 9, 's': 18, 'z': 27}

    for char in hand_str:
        if char.isdigit():
            current_numbers.append(int(char))
        elif char in offsets:
            offset = offsets[char]
            for num in current_numbers:
                limit = 7 if char == 'z' else 9
                if not (1 <= num <= limit):
                    raise ValueError(f"invalid tile: {num}{char}")
                # 牌面数字 1-9，对应的内部索引是 0-8，所以要减 1
                result.append(num - 1 + offset)
            current_numbers = []
        elif not char.isspace():
            raise ValueError(f"unexpected character: {char!r}")

    if current_numbers:
        raise ValueError(f"missing suit after: {''.join(map(str, current_numbers))}")
    return result


def id_to_str(tile_id: int) -> str:
    """
    将单个内部牌 ID (0-33) 转换为人类可读的中文全称。
    例如: 0 -> '1万', 27 -> '东'
    """
    if tile_id < 0 or tile_id > 33:
        return "未知牌"

    if tile_id < 9:
        return f"{tile_id + 1}万"
    if tile_id < 18:
        return f"{tile_id - 9 + 1}筒"
    if tile_id < 27:
        return f"{tile_id - 18 + 1}索"

    zi_names = ["东", "南", "西", "北", "白", "发", "中"]
    return zi_names[tile_id - 27]


def kinds_to_str(kinds: Sequence[int]) -> str:
    """
    将种类 ID 列表转换回天凤格式的字符串 (按花色归类，花色内按数字排序)
    例如: [0, 1, 2, 27, 27] -> '123m11z'
    """
    hand_array = [0] * NUM_KINDS
    for k in kinds:
        hand_array[k] += 1

    res = ""
    for suit, start, end in (("m", 0, 9), ("p", 9, 18), ("s", 18, 27), ("z", 27, 34)):
        part = "".join([str(i - start + 1) * hand_array[i] for i in range(start, end)])
        if part: res += part + suit
    return res


def tiles_from_kinds(kinds: Sequence[int]) -> List[Tile]:
    """
    种类 ID 列表 -> 物理牌列表 (保持顺序)
    同种类依次取第 0,1,2,3 张物理牌；超过 4 张时报错
    """
    used = [0] * NUM_KINDS
    tiles = []
    for k in kinds:
        if used[k] >= COPIES_PER_KIND:
            raise ValueError(f"more than {COPIES_PER_KIND} copies of kind {k}")
        tiles.append(Tile(k * COPIES_PER_KIND + used[k], k))
        used[k] += 1
    return tiles


def print_hand(tiles: Sequence[Tile]) -> None:
    """在控制台打印手牌，摸到的第 14 张与前 13 张分开显示"""
    names = [id_to_str(t.kind_id) for t in tiles]
    if len(names) > 13:
        print(f"[{', '.join(names[:13])}] + {names[13]}")
    else:
        print(f"[{', '.join(names)}]")
