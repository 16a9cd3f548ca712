import numpy as np
import pytest

from vision.similarity import cosine_similarity

VECTORS = [
    [1.0, 0.0, 0.0],
    [0.3, -1.2, 4.5, 0.01],
    np.linspace(-1.0, 1.0, 1024, dtype=np.float32),
]


@pytest.mark.parametrize("v", VECTORS)
def test_identical_vectors_score_one(v):
    assert cosine_similarity(v, v) == pytest.approx(1.0, abs=1e-6)


@pytest.mark.parametrize("v", VECTORS)
def test_opposite_vectors_score_minus_one(v):
    negated = -np.asarray(v, dtype=np.float32)
    assert cosine_similarity(v, negated) == pytest.approx(-1.0, abs=1e-6)


def test_orthogonal_vectors_score_zero():
    assert cosine_similarity([1, 0, 0], [0, 1, 0]) == 0.0


@pytest.mark.parametrize(
    "a, b",
    [
        ([1.0, 2.0], [1.0, 2.0, 3.0]),
        ([], []),
        ([], [1.0]),
        ([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]),
        ([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]),
    ],
)
def test_degenerate_inputs_score_zero(a, b):
    assert cosine_similarity(a, b) == 0.0


def test_non_finite_input_scores_zero():
    assert cosine_similarity([float("nan"), 1.0], [1.0, 1.0]) == 0.0


def test_symmetric():
    rng = np.random.default_rng(7)
    a = rng.normal(size=256).astype(np.float32)
    b = rng.normal(size=256).astype(np.float32)
    assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_magnitude_independent():
    assert cosine_similarity([1.0, 2.0, 3.0], [10.0, 20.0, 30.0]) == pytest.approx(1.0)


def test_matches_float32_reference():
    a = np.array([0.25, -0.5, 0.75, 1.0], dtype=np.float32)
    b = np.array([0.2, -0.4, 0.9, 0.8], dtype=np.float32)
    dot = np.float32(0.0)
    mag_a = np.float32(0.0)
    mag_b = np.float32(0.0)
    for x, y in zip(a, b):
        dot += x * y
        mag_a += x * x
        mag_b += y * y
    reference = float(dot / np.float32(np.sqrt(mag_a) * np.sqrt(mag_b)))
    assert cosine_similarity(a, b) == pytest.approx(reference, abs=1e-5)


def test_returns_python_float():
    assert type(cosine_similarity([1.0, 2.0], [2.0, 1.0])) is float
