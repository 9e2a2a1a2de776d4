# tests/test_extraction.py
import pytest

from embedline.connectors.extraction import available_extractors, extract, to_vector
from embedline.exceptions import ExtractionError, ValidationError

OPENAI = "connector.post_process.openai.embedding"
COHERE = "connector.post_process.cohere.embedding"
DEFAULT = "connector.post_process.default.embedding"


def test_available_rules():
    assert available_extractors() == sorted([OPENAI, COHERE, DEFAULT])


def test_openai_shape():
    payload = {"object": "list", "data": [{"embedding": [0.1, 2, -3.5]}]}
    assert extract(OPENAI, payload) == [0.1, 2.0, -3.5]


def test_cohere_shapes():
    assert extract(COHERE, {"embeddings": [[1, 2]]}) == [1.0, 2.0]
    assert extract(COHERE, {"embeddings": {"float": [[3, 4]]}}) == [3.0, 4.0]


def test_default_shapes():
    assert extract(DEFAULT, [0.5, 0.25]) == [0.5, 0.25]
    assert extract(DEFAULT, [[0.5, 0.25]]) == [0.5, 0.25]
    assert extract(DEFAULT, {"embedding": [1]}) == [1.0]


def test_unknown_rule():
    with pytest.raises(ValidationError):
        extract("connector.post_process.nope", {})


def test_missing_key_is_extraction_error():
    with pytest.raises(ExtractionError, match="missing"):
        extract(OPENAI, {"data": [{}]})


@pytest.mark.parametrize(
    "candidate",
    [None, "0.1,0.2", [], [[1.0]], [1.0, None], [float("nan")], [True]],
)
def test_to_vector_rejects(candidate):
    with pytest.raises(ExtractionError):
        to_vector(candidate)
