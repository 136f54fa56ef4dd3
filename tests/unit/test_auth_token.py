from storefront.auth.token import Decoded, Malformed, Missing, decode_user_id, user_id_from_token
from tests.helpers import make_token

def test_decodes_first_known_field():
    assert decode_user_id(make_token({"sub": "abc", "userId": 7})) == Decoded(7)
    assert decode_user_id(make_token({"id": 3, "sub": "abc"})) == Decoded(3)

def test_missing_when_no_token_or_no_id():
    assert decode_user_id(None) == Missing()
    assert decode_user_id("") == Missing()
    assert decode_user_id(make_token({"email": "x@y.z"})) == Missing()

def test_malformed_tokens():
    assert isinstance(decode_user_id("abc"), Malformed)
    assert isinstance(decode_user_id("a.!!!.c"), Malformed)
    assert isinstance(decode_user_id("a.bm90LWpzb24.c"), Malformed)

def test_user_id_from_token():
    assert user_id_from_token(make_token({"user_id": "u-1"})) == "u-1"
    assert user_id_from_token("garbage") is None
