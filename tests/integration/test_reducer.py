"""Tests for the Merkle reducer.

These tests verify that the reducer:
1. Returns a lone digest unchanged
2. Pads odd-length levels by repeating the last digest
3. Hashes concatenated hex text with no separator
4. Is deterministic and sensitive to input order
"""

import hashlib

import pytest

from merkle_dag.errors import EmptyInput, MerkleDagError
from merkle_dag.hashing import HashProvider
from merkle_dag.reducer import merkle_levels, reduce_digests


def h(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()


class TestReduceDigests:
    """Tests for reduce_digests."""

    def test_single_digest_is_root(self):
        """A one-element sequence is returned unchanged."""
        digest = h("leaf")
        assert reduce_digests([digest]) == digest

    def test_single_non_hex_element_is_returned_verbatim(self):
        """The base case does not rehash or normalize its input."""
        assert reduce_digests(["a"]) == "a"

    def test_empty_input_raises(self):
        """Reducing nothing fails with EmptyInput."""
        with pytest.raises(EmptyInput):
            reduce_digests([])

    def test_empty_input_is_a_merkle_dag_error(self):
        with pytest.raises(MerkleDagError):
            reduce_digests([])

    def test_pair_hashes_concatenated_text(self):
        """Two digests reduce to hash(a + b)."""
        assert reduce_digests(["a", "b"]) == h("ab")

    def test_odd_length_duplicates_last(self):
        """Three digests pad to four by repeating the third."""
        expected = h(h("ab") + h("cc"))
        assert reduce_digests(["a", "b", "c"]) == expected

    def test_four_digests_two_levels(self):
        expected = h(h("ab") + h("cd"))
        assert reduce_digests(["a", "b", "c", "d"]) == expected

    def test_five_digests_pad_at_every_odd_level(self):
        """Padding applies again on the next level when it is odd."""
        level1 = [h("ab"), h("cd"), h("ee")]
        level2 = [h(level1[0] + level1[1]), h(level1[2] + level1[2])]
        expected = h(level2[0] + level2[1])
        assert reduce_digests(["a", "b", "c", "d", "e"]) == expected

    def test_order_sensitive(self):
        """Swapping inputs changes the root."""
        assert reduce_digests(["a", "b"]) != reduce_digests(["b", "a"])

    def test_deterministic(self):
        digests = [h(str(i)) for i in range(7)]
        assert reduce_digests(digests) == reduce_digests(list(digests))

    def test_input_is_not_mutated(self):
        """Padding does not append to the caller's list."""
        digests = ["a", "b", "c"]
        reduce_digests(digests)
        assert digests == ["a", "b", "c"]

    def test_accepts_tuple(self):
        assert reduce_digests(("a", "b")) == h("ab")

    def test_custom_hasher(self):
        """A different 256-bit algorithm is used for every pair."""
        hasher = HashProvider("sha3_256")
        expected = hashlib.sha3_256(b"ab").hexdigest()
        assert reduce_digests(["a", "b"], hasher) == expected
        assert reduce_digests(["a", "b"], hasher) != reduce_digests(["a", "b"])


class TestMerkleLevels:
    """Tests for the per-level view of a reduction."""

    def test_levels_from_leaves_to_root(self):
        levels = merkle_levels(["a", "b", "c"])

        assert levels[0] == ["a", "b", "c"]
        assert levels[1] == [h("ab"), h("cc")]
        assert levels[2] == [h(h("ab") + h("cc"))]

    def test_single_digest_has_one_level(self):
        assert merkle_levels(["a"]) == [["a"]]

    def test_last_level_matches_reduce(self):
        digests = [h(str(i)) for i in range(6)]
        assert merkle_levels(digests)[-1] == [reduce_digests(digests)]

    def test_empty_raises(self):
        with pytest.raises(EmptyInput):
            merkle_levels([])


class TestHashProvider:
    """Tests for the digest primitive."""

    def test_sha256_default(self):
        hasher = HashProvider()
        assert hasher.digest(b"A") == hashlib.sha256(b"A").digest()
        assert hasher.hexdigest(b"A") == hashlib.sha256(b"A").hexdigest()

    def test_hex_is_lowercase(self):
        hexdigest = HashProvider().hexdigest(b"data")
        assert hexdigest == hexdigest.lower()
        assert len(hexdigest) == 64

    def test_rejects_non_256_bit_algorithm(self):
        with pytest.raises(ValueError):
            HashProvider("sha512")  # type: ignore[arg-type]

    def test_rejects_unknown_algorithm(self):
        with pytest.raises(ValueError):
            HashProvider("not-a-hash")  # type: ignore[arg-type]
