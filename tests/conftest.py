import pytest


class StubOracle:
    """
    固定规则的评估桩：不依赖真实的向听计算
    shanten / effective 可以是常量，也可以是以 13 张种类列表为参数的函数
    """

    def __init__(self, shanten=1, effective=()):
        self._shanten = shanten
        self._effective = effective
        self.shanten_calls = 0

    def get_shanten(self, kinds):
        assert len(kinds) == 13
        self.shanten_calls += 1
        return self._shanten(kinds) if callable(self._shanten) else self._shanten

    def get_effective_kinds(self, kinds):
        assert len(kinds) == 13
        effective = self._effective(kinds) if callable(self._effective) else self._effective
        return set(effective)


@pytest.fixture
def make_oracle():
    return StubOracle
