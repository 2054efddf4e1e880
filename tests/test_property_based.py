"""
Property-Based Tests for Signet
===============================

Uses Hypothesis to generate random inputs and verify invariants:
1. Round trip: verify(generate(payload)) returns the payload
2. Tamper detection: flipping any bit of a token invalidates it
3. Token codec: decode(encode(data, mac)) recovers both segments
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from signet import InvalidSignature, MessageVerifier
from signet import token_codec

# JSON values that round-trip exactly through orjson
json_scalars = st.one_of(
    st.text(max_size=50),
    st.integers(min_value=-(2**53), max_value=2**53),
    st.floats(allow_nan=False, allow_infinity=False),
    st.booleans(),
    st.none(),
)

json_values = st.recursive(
    json_scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=5),
        st.dictionaries(st.text(max_size=10), children, max_size=5),
    ),
    max_leaves=20,
)

digests = st.sampled_from(["SHA1", "SHA256", "SHA384", "SHA512"])


@given(payload=json_values, digest=digests, url_safe=st.booleans())
@settings(max_examples=100, deadline=None)
def test_round_trip(payload, digest, url_safe):
    verifier = MessageVerifier("property secret", digest=digest, url_safe=url_safe)
    assert verifier.verify(verifier.generate(payload)) == payload


@given(payload=json_values, purpose=st.text(min_size=1, max_size=20))
@settings(max_examples=50, deadline=None)
def test_round_trip_with_purpose(payload, purpose):
    verifier = MessageVerifier("property secret")
    token = verifier.generate(payload, purpose=purpose)
    assert verifier.verify(token, purpose=purpose) == payload


@given(
    payload=json_values,
    url_safe=st.booleans(),
    position=st.integers(min_value=0),
    bit=st.integers(min_value=0, max_value=6),
)
@settings(max_examples=200, deadline=None)
def test_single_bit_flip_is_rejected(payload, url_safe, position, bit):
    verifier = MessageVerifier("property secret", url_safe=url_safe)
    token = verifier.generate(payload)

    index = position % len(token)
    flipped = token[:index] + chr(ord(token[index]) ^ (1 << bit)) + token[index + 1:]

    assert verifier.verified(flipped) is None
    with pytest.raises(InvalidSignature):
        verifier.verify(flipped)


@given(data=st.binary(min_size=1, max_size=64), mac=st.binary(min_size=1, max_size=64), url_safe=st.booleans())
def test_codec_round_trip(data, mac, url_safe):
    token = token_codec.encode(data, mac, url_safe=url_safe)
    decoded = token_codec.decode(token, url_safe=url_safe, mac_size=len(mac))
    assert decoded == token_codec.DecodedToken(data=data, mac=mac)
