import pytest

from tracealign import align


@pytest.fixture
def build_counter(monkeypatch):
    """
    Reset the shared scoring matrix and record every call to build_matrix
    """
    calls = []
    original_build_matrix = align.build_matrix

    def counting_build_matrix(match, mismatch):
        calls.append((match, mismatch))
        return original_build_matrix(match, mismatch)

    monkeypatch.setattr(align, "build_matrix", counting_build_matrix)
    monkeypatch.setattr(align, "_matrix", None)
    return calls
