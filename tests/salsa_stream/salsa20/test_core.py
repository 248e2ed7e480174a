"""
Known-answer tests for the Salsa20 block function.

Round-function vectors are the worked examples in the Salsa20 paper:
https://cr.yp.to/snuffle/spec.pdf
"""

from __future__ import annotations

import pytest

from salsa_stream.salsa20 import (
    BLOCK_SIZE,
    build_state,
    column_round,
    double_round,
    quarter_round,
    row_round,
    salsa20_block,
    salsa20_core,
)
from salsa_stream.salsa20 import core
from salsa_stream.salsa20.core import SIGMA_WORDS, keystream_block
from salsa_stream.salsa20.encoding import words_from_bytes, words_to_bytes
from salsa_stream.types import Bytes64, KeyMaterialError
from tests.salsa_stream.helpers import make_key, make_nonce, reference_keystream

ZERO_KEY = b"\x00" * 32
ZERO_NONCE = b"\x00" * 8


def _transpose(words: list[int]) -> list[int]:
    return [words[4 * (i % 4) + i // 4] for i in range(16)]


class TestQuarterRound:
    """Quarter-round examples from section 3 of the Salsa20 paper."""

    @pytest.mark.parametrize(
        "inputs, expected",
        [
            ((0, 0, 0, 0), (0, 0, 0, 0)),
            ((1, 0, 0, 0), (0x08008145, 0x00000080, 0x00010200, 0x20500000)),
            ((0, 1, 0, 0), (0x88000100, 0x00000001, 0x00000200, 0x00402000)),
            ((0, 0, 1, 0), (0x80040000, 0x00000000, 0x00000001, 0x00002000)),
            ((0, 0, 0, 1), (0x00048044, 0x00000080, 0x00010000, 0x20100001)),
        ],
    )
    def test_known_values(
        self, inputs: tuple[int, int, int, int], expected: tuple[int, int, int, int]
    ) -> None:
        assert quarter_round(*inputs) == expected

    def test_is_invertible_not_constant(self) -> None:
        """Distinct inputs give distinct outputs."""
        assert quarter_round(1, 0, 0, 0) != quarter_round(0, 1, 0, 0)

    def test_rotations_use_word_rotation_helper(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Every quarter-round step rotates through `rotl32`, in 7, 9, 13, 18 order."""
        shifts: list[int] = []
        real_rotl32 = core.rotl32

        def recording_rotl32(value: int, shift: int) -> int:
            shifts.append(shift)
            return real_rotl32(value, shift)

        monkeypatch.setattr(core, "rotl32", recording_rotl32)

        assert quarter_round(1, 0, 0, 0) == (0x08008145, 0x00000080, 0x00010200, 0x20500000)
        assert shifts == [7, 9, 13, 18]


class TestRowAndColumnRounds:
    ONES = [1, 0, 0, 0] * 4

    def test_row_round_known_value(self) -> None:
        assert row_round(self.ONES) == [
            0x08008145, 0x00000080, 0x00010200, 0x20500000,
            0x20100001, 0x00048044, 0x00000080, 0x00010000,
            0x00000001, 0x00002000, 0x80040000, 0x00000000,
            0x00000001, 0x00000200, 0x00402000, 0x88000100,
        ]  # fmt: skip

    def test_column_round_known_value(self) -> None:
        assert column_round(self.ONES) == [
            0x10090288, 0x00000000, 0x00000000, 0x00000000,
            0x00000101, 0x00000000, 0x00000000, 0x00000000,
            0x00020401, 0x00000000, 0x00000000, 0x00000000,
            0x40A04001, 0x00000000, 0x00000000, 0x00000000,
        ]  # fmt: skip

    def test_column_round_is_transposed_row_round(self) -> None:
        words = list(range(0x01010101, 0x01010101 + 16 * 0x1F3D, 0x1F3D))
        assert column_round(words) == _transpose(row_round(_transpose(words)))

    def test_double_round_known_value(self) -> None:
        assert double_round([1] + [0] * 15) == [
            0x8186A22D, 0x0040A284, 0x82479210, 0x06929051,
            0x08000090, 0x02402200, 0x00004000, 0x00800000,
            0x00010200, 0x20400000, 0x08008104, 0x00000000,
            0x20500000, 0xA0000040, 0x0008180A, 0x612A8020,
        ]  # fmt: skip

    def test_double_round_composes_column_then_row(self) -> None:
        words = list(range(100, 116))
        assert double_round(words) == row_round(column_round(words))

    def test_input_is_not_mutated(self) -> None:
        words = [1] + [0] * 15
        double_round(words)
        assert words == [1] + [0] * 15

    @pytest.mark.parametrize("words", [[0] * 15, [0] * 17, [2**32] + [0] * 15, [-1] + [0] * 15])
    def test_malformed_state_rejected(self, words: list[int]) -> None:
        with pytest.raises(ValueError):
            row_round(words)


class TestCore:
    def test_zero_state_stays_zero(self) -> None:
        assert salsa20_core([0] * 16) == [0] * 16

    def test_salsa20_8_scrypt_vector(self) -> None:
        """Salsa20/8 core test vector from RFC 7914, section 8."""
        given = bytes.fromhex(
            "7e879a214f3ec9867ca940e641718f26baee555b8c61c1b50df846116dcd3b1d"
            "ee24f319df9b3d8514121e4b5ac5aa3276021d2909c74829edebc68db8b8c25e"
        )
        expected = bytes.fromhex(
            "a41f859c6608cc993b81cacb020cef05044b2181a2fd337dfd7b1c6396682f29"
            "b4393168e3c9e6bcfe6bc5b7a06d96bae424cc102c91745c24ad673dc7618f81"
        )
        out = salsa20_core(words_from_bytes(given), double_rounds=4)
        assert words_to_bytes(out) == expected

    def test_zero_rounds_doubles_the_input(self) -> None:
        """With no mixing, the feed-forward adds the state to itself."""
        words = [0x80000001] + list(range(15))
        assert salsa20_core(words, double_rounds=0) == [
            (2 * w) & 0xFFFFFFFF for w in words
        ]

    def test_negative_rounds_rejected(self) -> None:
        with pytest.raises(ValueError, match="double_rounds"):
            salsa20_core([0] * 16, double_rounds=-1)


class TestKeystreamBlock:
    def test_sigma_words(self) -> None:
        assert SIGMA_WORDS == (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)

    def test_matches_core_serialization(self) -> None:
        state = build_state(make_key(2), make_nonce(2), 5)
        assert keystream_block(state) == words_to_bytes(salsa20_core(state))

    def test_state_is_not_mutated(self) -> None:
        state = build_state(make_key(2), make_nonce(2), 5)
        before = list(state)
        keystream_block(state)
        assert state == before

    def test_block_path_skips_state_validation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Prepared states go straight to mixing; only `salsa20_core` re-checks its input."""

        def fail(words: object) -> list[int]:
            raise AssertionError("state re-validated")

        expected = salsa20_block(ZERO_KEY, ZERO_NONCE, 0)
        monkeypatch.setattr(core, "_check_state", fail)

        assert salsa20_block(ZERO_KEY, ZERO_NONCE, 0) == expected
        with pytest.raises(AssertionError, match="re-validated"):
            salsa20_core([0] * 16)


class TestBuildState:
    def test_layout(self) -> None:
        key = bytes(range(1, 33))
        nonce = bytes(range(101, 109))
        state = build_state(key, nonce, 0x0123456789ABCDEF)

        key_words = words_from_bytes(key)
        nonce_words = words_from_bytes(nonce)

        assert [state[i] for i in (0, 5, 10, 15)] == list(SIGMA_WORDS)
        assert [state[i] for i in (1, 2, 3, 4)] == key_words[:4]
        assert [state[i] for i in (11, 12, 13, 14)] == key_words[4:]
        assert [state[i] for i in (6, 7)] == nonce_words
        assert state[8] == 0x89ABCDEF
        assert state[9] == 0x01234567

    def test_counter_out_of_range(self) -> None:
        with pytest.raises(OverflowError):
            build_state(ZERO_KEY, ZERO_NONCE, 2**64)

    @pytest.mark.parametrize("bad_key", [b"", b"\x00" * 16, b"\x00" * 31, b"\x00" * 33])
    def test_wrong_key_length(self, bad_key: bytes) -> None:
        with pytest.raises(KeyMaterialError) as exc_info:
            build_state(bad_key, ZERO_NONCE)
        assert exc_info.value.name == "key"
        assert exc_info.value.expected == 32
        assert exc_info.value.actual == len(bad_key)

    @pytest.mark.parametrize("bad_nonce", [b"", b"\x00" * 7, b"\x00" * 9, b"\x00" * 12])
    def test_wrong_nonce_length(self, bad_nonce: bytes) -> None:
        with pytest.raises(KeyMaterialError) as exc_info:
            build_state(ZERO_KEY, bad_nonce)
        assert exc_info.value.name == "nonce"

    def test_key_must_be_bytes_like(self) -> None:
        with pytest.raises(TypeError, match="bytes-like"):
            build_state("00" * 32, ZERO_NONCE)


class TestBlockFunction:
    def test_zero_key_zero_nonce(self) -> None:
        block = salsa20_block(ZERO_KEY, ZERO_NONCE, 0)
        assert isinstance(block, Bytes64)
        assert block.hex() == (
            "9a97f65b9b4c721b960a672145fca8d4e32e67f9111ea979ce9c4826806aeee6"
            "3de9c0da2bd7f91ebcb2639bf989c6251b29bf38d39a9bdce7c55f4b2ac12a39"
        )

    def test_estream_set1_vector0(self) -> None:
        """Key 80 00 .. 00, IV 0: first 64 bytes of keystream."""
        key = b"\x80" + b"\x00" * 31
        assert salsa20_block(key, ZERO_NONCE, 0).hex() == (
            "e3be8fdd8beca2e3ea8ef9475b29a6e7003951e1097a5c38d23b7a5fad9f6844"
            "b22c97559e2723c7cbbd3fe4fc8d9a0744652a83e72a9c461876af4d7ef1a117"
        )

    def test_expansion_example(self) -> None:
        """Salsa20 expansion of a 32-byte key, section 9 of the Salsa20 paper."""
        key = bytes(range(1, 17)) + bytes(range(201, 217))
        nonce = bytes(range(101, 109))
        counter = int.from_bytes(bytes(range(109, 117)), "little")

        expected = bytes(
            [
                69, 37, 68, 39, 41, 15, 107, 193, 255, 139, 122, 6, 170, 233, 217, 98,
                89, 144, 182, 106, 21, 51, 200, 65, 239, 49, 222, 34, 215, 114, 40, 126,
                104, 197, 7, 225, 197, 153, 31, 2, 102, 78, 76, 176, 84, 245, 246, 184,
                177, 160, 133, 130, 6, 72, 149, 119, 192, 195, 132, 236, 234, 103, 246, 74,
            ]
        )  # fmt: skip
        assert salsa20_block(key, nonce, counter) == expected

    def test_matches_reference_implementation(self) -> None:
        key, nonce = make_key(3), make_nonce(3)
        expected = reference_keystream(key, nonce, 8 * BLOCK_SIZE)
        produced = b"".join(salsa20_block(key, nonce, i) for i in range(8))
        assert produced == expected

    def test_deterministic(self) -> None:
        key, nonce = make_key(5), make_nonce(5)
        assert salsa20_block(key, nonce, 77) == salsa20_block(key, nonce, 77)

    def test_counter_high_word_is_used(self) -> None:
        key, nonce = make_key(), make_nonce()
        blocks = {salsa20_block(key, nonce, i) for i in (0, 1, 2**32, 2**32 + 1, 2**64 - 1)}
        assert len(blocks) == 5

    def test_nonce_changes_output(self) -> None:
        key = make_key()
        assert salsa20_block(key, make_nonce(1), 0) != salsa20_block(key, make_nonce(2), 0)

    def test_accepts_any_bytes_like(self) -> None:
        key, nonce = make_key(), make_nonce()
        assert salsa20_block(bytearray(key), memoryview(bytes(nonce)), 0) == salsa20_block(
            bytes(key), bytes(nonce), 0
        )
