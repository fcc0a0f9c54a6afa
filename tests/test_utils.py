import pytest

from utils import id_to_str, kinds_to_str, parse_tiles, tiles_from_kinds


def test_parse_tiles():
    assert parse_tiles("123m456p789s1122z") == [0, 1, 2, 12, 13, 14, 24, 25, 26, 27, 27, 28, 28]


@pytest.mark.parametrize("text", ["8z", "0m", "12", "12x"])
def test_parse_tiles_rejects_bad_input(text):
    with pytest.raises(ValueError):
        parse_tiles(text)


def test_id_to_str():
    assert id_to_str(0) == "1万"
    assert id_to_str(13) == "5筒"
    assert id_to_str(26) == "9索"
    assert id_to_str(27) == "东"
    assert id_to_str(33) == "中"
    assert id_to_str(34) == "未知牌"


def test_kinds_to_str_groups_by_suit():
    assert kinds_to_str([27, 0, 2, 1, 27]) == "123m11z"
    assert kinds_to_str(parse_tiles("19m19p19s1234567z")) == "19m19p19s1234567z"


def test_tiles_from_kinds_uses_distinct_copies():
    tiles = tiles_from_kinds([0, 0, 33])
    assert [t.physical_id for t in tiles] == [0, 1, 132]
    assert [t.kind_id for t in tiles] == [0, 0, 33]


def test_tiles_from_kinds_rejects_fifth_copy():
    with pytest.raises(ValueError):
        tiles_from_kinds([5] * 5)
