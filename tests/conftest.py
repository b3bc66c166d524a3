import pytest


class StubModel:
    """辞書に登録した候補をそのまま返すだけのモデル。"""

    def __init__(self, suggestions):
        self.suggestions = dict(suggestions)
        self.calls = []

    def suggest(self, word):
        self.calls.append(word)
        return self.suggestions.get(word)


@pytest.fixture
def stub_model():
    return StubModel
