import sys
import os
import hashlib
from array import array
from unittest.mock import patch

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

import pytest

from pureblake2s import (
    Blake2s,
    InvalidParameterError,
    StateFinalizedError,
    blake2s,
    blake2s_hash,
    final,
    init,
    init_key,
    init_param,
    make_param_block,
    update,
)
from pureblake2s.compress import IV, compress, rotr32
from pureblake2s.params import ParameterBlock
from pureblake2s.secure import secure_zero

EMPTY_DIGEST = "69217a3079908094e11121d042354a7c1f55b6482ca1a51e1b250dfd1ed0eef9"
ABC_DIGEST = "508c5e8c327c14e2e1a72ba34eeb452f37458b209ed63a294d999b4c86675982"
# blake2s-kat.txt, key = 00..1f, empty input
KEYED_EMPTY_DIGEST = "48a8997da407876b3d79c0d92325ad3b89cbb754d86ab71aee047ad345fd2c49"

BOUNDARY_LENGTHS = [0, 1, 63, 64, 65, 127, 128, 129, 191, 192, 193, 255, 256, 257, 1000]


def _message(length):
    return bytes(i & 0xFF for i in range(length))


def test_known_answers():
    assert blake2s_hash(b"").hex() == EMPTY_DIGEST
    assert blake2s_hash(b"abc").hex() == ABC_DIGEST
    assert blake2s_hash(b"", key=bytes(range(32))).hex() == KEYED_EMPTY_DIGEST


def test_matches_hashlib_unkeyed():
    for length in BOUNDARY_LENGTHS:
        data = _message(length)
        assert blake2s_hash(data) == hashlib.blake2s(data).digest()


def test_matches_hashlib_keyed():
    for keylen in (1, 16, 31, 32):
        key = bytes(range(1, keylen + 1))
        for length in BOUNDARY_LENGTHS:
            data = _message(length)
            expected = hashlib.blake2s(data, key=key).digest()
            assert blake2s_hash(data, key=key) == expected


def test_matches_hashlib_for_every_digest_size():
    data = b"The quick brown fox jumps over the lazy dog"
    for outlen in range(1, 33):
        assert blake2s_hash(data, outlen=outlen) == hashlib.blake2s(
            data, digest_size=outlen
        ).digest()
        assert len(blake2s_hash(b"", outlen=outlen)) == outlen


def test_salt_and_personalization():
    h = blake2s(b"abc", salt=b"saltsalt", person=b"me")
    expected = hashlib.blake2s(b"abc", salt=b"saltsalt", person=b"me").digest()
    assert h.digest() == expected

    keyed = blake2s(b"abc", key=b"k" * 20, salt=b"\x01", person=b"personal")
    expected = hashlib.blake2s(
        b"abc", key=b"k" * 20, salt=b"\x01", person=b"personal"
    ).digest()
    assert keyed.digest() == expected


def test_final_truncation_is_prefix_of_full_digest():
    data = _message(200)
    full = final(update(init(32), data))
    for outlen in range(1, 33):
        assert final(update(init(32), data), outlen) == full[:outlen]


def test_digest_length_is_part_of_parameter_block():
    # A 16-byte BLAKE2s digest is not a prefix of the 32-byte one.
    assert blake2s_hash(b"abc", outlen=16) != blake2s_hash(b"abc")[:16]


@pytest.mark.parametrize("chunk", [1, 7, 63, 64, 65, 128, 129])
def test_incremental_equivalence(chunk):
    data = _message(777)
    state = init()
    for idx in range(0, len(data), chunk):
        update(state, data[idx : idx + chunk])
    assert final(state) == blake2s_hash(data)


def test_incremental_equivalence_keyed_with_empty_updates():
    key = b"secret key"
    data = _message(300)
    state = init_key(24, key)
    update(state, b"")
    update(state, data[:64])
    update(state, b"")
    update(state, data[64:200])
    update(state, data[200:])
    assert final(state) == blake2s_hash(data, key=key, outlen=24)


def test_keyed_output_differs_from_unkeyed():
    data = b"message"
    assert blake2s_hash(data, key=b"\x00") != blake2s_hash(data)
    assert blake2s_hash(data, key=b"\x01" * 32) != blake2s_hash(data)


@pytest.mark.parametrize(
    "length, counter_after_update, buffered, compressions",
    [
        (0, 0, 0, 1),
        (64, 0, 64, 1),
        (128, 0, 128, 2),
        (129, 64, 65, 3),
    ],
)
def test_buffering_boundaries(length, counter_after_update, buffered, compressions):
    with patch("pureblake2s.state.compress", wraps=compress) as spy:
        state = update(init(), _message(length))
        assert state.counter == counter_after_update
        assert state.buflen == buffered
        digest = final(state)

    assert spy.call_count == compressions
    assert state.counter == length
    assert state.f == [0xFFFFFFFF, 0]
    assert digest == hashlib.blake2s(_message(length)).digest()


def test_key_block_is_counted_like_data():
    state = init_key(32, b"key")
    assert state.counter == 0
    assert state.buflen == 64

    update(state, _message(64))
    assert state.counter == 0
    assert state.buflen == 128

    update(state, b"x")
    assert state.counter == 64
    assert state.buflen == 65

    final(state)
    assert state.counter == 129


def test_counter_carries_into_high_word():
    state = init()
    state.t = [0xFFFFFFC0, 0]
    update(state, _message(129))
    assert state.t == [0, 1]
    assert state.counter == 1 << 32


def test_parameter_block_layout():
    param = make_param_block(32)
    assert param.to_bytes() == bytes([32, 0, 1, 1]) + bytes(28)
    assert param.words()[0] == 0x01010020

    keyed = make_param_block(20, 8, salt=b"\xaa", personal=b"\xbb" * 8)
    raw = keyed.to_bytes()
    assert len(raw) == 32
    assert raw[:4] == bytes([20, 8, 1, 1])
    assert raw[16:24] == b"\xaa" + bytes(7)
    assert raw[24:] == b"\xbb" * 8

    tree = ParameterBlock(digest_length=32, leaf_length=0x01020304, node_offset=0x0A0B0C0D0E0F)
    assert tree.to_bytes()[4:14] == bytes.fromhex("04030201" "0f0e0d0c0b0a")


def test_init_xors_parameter_block_into_iv():
    state = init(32)
    assert state.h[0] == IV[0] ^ 0x01010020
    assert state.h[1:] == list(IV[1:])
    assert init_param(make_param_block(32)).h == state.h


def test_parameter_block_is_immutable():
    param = make_param_block(32)
    with pytest.raises(Exception):
        param.digest_length = 16  # type: ignore[misc]


@pytest.mark.parametrize("outlen", [0, 33])
def test_invalid_outlen(outlen):
    with pytest.raises(InvalidParameterError):
        blake2s_hash(b"abc", outlen=outlen)
    with pytest.raises(InvalidParameterError):
        init(outlen)
    with pytest.raises(InvalidParameterError):
        init_key(outlen, b"key")


def test_invalid_key_parameters():
    with pytest.raises(InvalidParameterError):
        blake2s_hash(b"abc", key=b"k" * 33)
    with pytest.raises(InvalidParameterError):
        blake2s_hash(b"abc", key=b"k" * 33, keylen=33)
    with pytest.raises(InvalidParameterError):
        blake2s_hash(b"abc", key=b"secret", keylen=-1)
    with pytest.raises(InvalidParameterError):
        init_key(32, None)  # type: ignore[arg-type]
    with pytest.raises(InvalidParameterError):
        init_key(32, b"")
    with pytest.raises(InvalidParameterError):
        init_key(32, b"short", keylen=10)
    with pytest.raises(InvalidParameterError):
        make_param_block(32, salt=b"s" * 9)
    with pytest.raises(InvalidParameterError):
        make_param_block(32, personal=b"p" * 9)


def test_invalid_inputs():
    with pytest.raises(InvalidParameterError):
        blake2s_hash(None)  # type: ignore[arg-type]
    with pytest.raises(InvalidParameterError):
        blake2s_hash(b"abc", out=bytearray(16))
    with pytest.raises(TypeError):
        blake2s_hash("abc")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Blake2s(key="key")  # type: ignore[arg-type]


def test_missing_key_with_keylen_is_unkeyed():
    assert blake2s_hash(b"abc", key=None, keylen=16) == blake2s_hash(b"abc")
    assert blake2s_hash(b"abc", key=b"") == blake2s_hash(b"abc")
    assert blake2s_hash(b"abc", key=b"ignored", keylen=0) == blake2s_hash(b"abc")


def test_keylen_truncates_key():
    key = bytes(range(32))
    assert blake2s_hash(b"abc", key=key, keylen=16) == blake2s_hash(b"abc", key=key[:16])


def test_multibyte_memoryview_key_uses_every_byte():
    words = array("I", range(8))
    raw = words.tobytes()
    view = memoryview(words)

    expected = hashlib.blake2s(b"abc", key=raw).digest()
    assert blake2s_hash(b"abc", key=view) == expected
    assert final(update(init_key(32, view), b"abc")) == expected
    assert Blake2s(b"abc", key=view).digest() == expected


def test_out_buffer_receives_digest():
    out = bytearray(40)
    digest = blake2s_hash(b"abc", outlen=20, out=out)
    assert bytes(out[:20]) == digest
    assert out[20:] == bytearray(20)


def test_state_is_single_use():
    state = update(init(), b"abc")
    final(state)
    assert state.finalized
    with pytest.raises(StateFinalizedError):
        update(state, b"more")
    with pytest.raises(StateFinalizedError):
        final(state)


def test_final_outlen_bounds():
    with pytest.raises(InvalidParameterError):
        final(init(16), 17)
    with pytest.raises(InvalidParameterError):
        final(init(16), 0)


def test_hasher_object_streaming_and_copy():
    h1 = blake2s(b"abc")
    h2 = h1.copy()
    h2.update(b"def")
    assert h1.hexdigest() == ABC_DIGEST
    assert h1.hexdigest() == ABC_DIGEST
    assert h2.digest() == hashlib.blake2s(b"abcdef").digest()
    assert h1.digest_size == 32
    assert h1.block_size == 64
    assert h1.name == "blake2s"


def test_hasher_accepts_bytes_like():
    data = _message(150)
    h = Blake2s(digest_size=10)
    h.update(bytearray(data[:50])).update(memoryview(data)[50:])
    assert h.digest() == hashlib.blake2s(data, digest_size=10).digest()


def test_rotr32():
    assert rotr32(1, 1) == 0x80000000
    assert rotr32(0x80000000, 31) == 1
    assert rotr32(0x12345678, 16) == 0x56781234


def test_compress_rejects_short_block():
    with pytest.raises(ValueError):
        compress(list(IV), [0, 0], [0, 0], bytes(63))


def test_secure_zero():
    buf = bytearray(b"top secret key")
    secure_zero(buf)
    assert buf == bytearray(14)
    secure_zero(bytearray())
    with pytest.raises(TypeError):
        secure_zero(b"immutable")  # type: ignore[arg-type]


def test_key_block_is_wiped_after_init():
    with patch("pureblake2s.state.secure_zero", wraps=secure_zero) as spy:
        init_key(32, b"\xff" * 32)
    assert spy.call_count == 1
    wiped = spy.call_args[0][0]
    assert wiped == bytearray(64)
