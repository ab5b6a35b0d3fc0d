"""Tests for canonical content hashing."""
from __future__ import annotations

import hashlib

import pytest

from notary_verify.errors import MalformedContent
from notary_verify.hashing import canonical_json_bytes, hash_content, hash_object


class TestHashContent:
    """Tests for hash_content."""

    def test_key_order_does_not_matter(self):
        assert hash_content('{"a":1,"b":2}') == hash_content('{"b":2,"a":1}')

    def test_whitespace_does_not_matter(self):
        spaced = '{\n  "a" : 1 ,\n  "b" : [ 1 , 2 ]\n}\n'
        assert hash_content(spaced) == hash_content('{"a":1,"b":[1,2]}')

    def test_deterministic(self):
        doc = '{"event": "login", "user": {"id": 7, "roles": ["a", "b"]}}'
        assert hash_content(doc) == hash_content(doc)

    def test_numeric_literal_formatting(self):
        assert hash_content('{"n":1}') == hash_content('{"n":1.0}') == hash_content('{"n":1e0}')

    def test_digest_is_sha256_of_canonical_form(self):
        digest = hash_content('{ "k" : "v" }')
        assert digest == hashlib.sha256(b'{"k":"v"}').hexdigest()
        assert len(digest) == 64
        assert digest == digest.lower()

    def test_nested_keys_sorted(self):
        assert hash_content('{"z":{"b":1,"a":2},"a":0}') == hash_content('{"a":0,"z":{"a":2,"b":1}}')

    def test_array_order_matters(self):
        assert hash_content('[1,2]') != hash_content('[2,1]')

    @pytest.mark.parametrize(
        "content",
        ["{not json", "", '{"a": NaN}', "Infinity", "\ufeff{}", '{"n":1e400}', "[" + "9" * 400 + "]"],
    )
    def test_rejects_malformed_content(self, content):
        with pytest.raises(MalformedContent):
            hash_content(content)

    def test_unpaired_surrogate_is_escaped(self):
        digest = hash_content('{"a":"\\ud800"}')
        assert digest == hashlib.sha256(b'{"a":"\\ud800"}').hexdigest()

    def test_unpaired_surrogate_key_rejected(self):
        with pytest.raises(MalformedContent, match="canonicalize"):
            hash_content('{"\\udc00":1,"a":2}')

    def test_surrogate_pair_is_utf8(self):
        digest = hash_content('{"a":"\\ud83d\\ude00"}')
        assert digest == hashlib.sha256('{"a":"\U0001F600"}'.encode("utf-8")).hexdigest()


class TestCanonicalForm:
    """Tests for the canonical serialization itself."""

    def test_no_whitespace_sorted_keys(self):
        assert canonical_json_bytes({"b": "x", "a": [True, None]}) == b'{"a":[true,null],"b":"x"}'

    def test_keys_sorted_by_utf16_code_units(self):
        # U+1F600 is a surrogate pair (0xD83D...) and sorts before U+FB33 in UTF-16
        out = canonical_json_bytes({"\ufb33": "x", "\U0001F600": "y"})
        assert out.startswith('{"\U0001F600"'.encode("utf-8"))

    def test_hash_object_matches_hash_content(self):
        assert hash_object({"k": "v"}) == hash_content('{"k":"v"}')
