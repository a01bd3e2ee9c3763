import math

import pytest

from rendezvous.coordinator.hashers import fnv1a_32
from rendezvous.coordinator.scoring import (
    composite_key,
    compute_weighted_score,
    normalize,
    score_from_snapshot,
)
from rendezvous.errors import InternalInconsistency


def test_composite_key_reference_format():
    assert composite_key("s1.test.com", "request") == b"s1.test.com:request"


def test_composite_key_escapes_separator_in_node_id():
    # Without escaping both pairs would hash "a:b:c"
    assert composite_key("a:b", "c") != composite_key("a", "b:c")
    assert composite_key("a:b", "c") == b"a\\:b:c"
    assert composite_key("a\\", ":c") != composite_key("a\\:", "c")


def test_composite_key_is_utf8():
    assert composite_key("nœud", "clé") == "nœud:clé".encode("utf-8")


def test_normalize_range():
    assert normalize(0) == 1.0 / 2 ** 32
    assert normalize(0xFFFFFFFF) == 1.0
    # wider hashes keep only the low 32 bits
    assert normalize(0x1_0000_0000) == normalize(0)


def test_score_matches_formula():
    h = fnv1a_32(b"s1.test.com:request")
    u = (h + 1) / 2 ** 32
    expected = 3.0 * (1.0 / -math.log(u))
    assert compute_weighted_score("s1.test.com", 3.0, "request", fnv1a_32) == pytest.approx(expected)


def test_score_scales_with_weight():
    one = compute_weighted_score("node", 1.0, "key", fnv1a_32)
    assert compute_weighted_score("node", 4.0, "key", fnv1a_32) == pytest.approx(4 * one)
    assert one > 0


@pytest.mark.parametrize("weight", [0.0, -1.0, -10.0])
def test_non_positive_weight_gives_non_positive_score(weight):
    assert compute_weighted_score("node", weight, "key", fnv1a_32) <= 0


def test_maximum_hash_gives_infinite_score():
    def max_hasher(data):
        return 0xFFFFFFFF

    assert compute_weighted_score("node", 1.0, "key", max_hasher) == math.inf
    assert compute_weighted_score("node", 0.0, "key", max_hasher) == 0.0


def test_score_from_snapshot_uses_snapshot_weight():
    snapshot = {"s1.test.com": 2.0}
    assert score_from_snapshot(snapshot, "s1.test.com", "request", fnv1a_32) == \
        compute_weighted_score("s1.test.com", 2.0, "request", fnv1a_32)


def test_score_from_snapshot_missing_node():
    with pytest.raises(InternalInconsistency) as exc_info:
        score_from_snapshot({"s1.test.com": 1.0}, "s2.test.com", "request", fnv1a_32)
    assert exc_info.value.node_id == "s2.test.com"
    assert isinstance(exc_info.value, RuntimeError)
