from confidential_chat_verifier.sdk import build_chat_request_body
from confidential_chat_verifier.verifiers import compare_hashes, hash_exchange, sha256sum

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
HI_BODY = '{"messages":[{"content":"hi","role":"user"}],"stream":true,"model":"m"}'
HI_BODY_SHA256 = "e6f1ac39b09025a41630d7725432cc96834fe39a81abedea57e8c4448238a598"


def test_sha256sum_known_digests():
    assert sha256sum("") == EMPTY_SHA256
    assert sha256sum(HI_BODY) == HI_BODY_SHA256
    assert sha256sum(HI_BODY.encode("utf-8")) == HI_BODY_SHA256


def test_sha256sum_is_deterministic_and_distinguishes_inputs():
    corpus = ["", "a", "b", "hi", "hi\n", "héllo", HI_BODY]
    digests = [sha256sum(x) for x in corpus]
    assert digests == [sha256sum(x) for x in corpus]
    assert len(set(digests)) == len(corpus)
    assert all(len(d) == 64 and d == d.lower() for d in digests)


def test_request_body_is_compact_and_hashes_to_the_sent_bytes():
    body = build_chat_request_body("hi", "m")
    assert body == HI_BODY
    assert hash_exchange(body, "").request_hash == HI_BODY_SHA256


def test_known_request_body_from_live_exchange():
    body = build_chat_request_body("Respond with only two words", "llama-3.3-70b-instruct")
    assert sha256sum(body) == (
        "31f46232b8ae6154e75a68256523851c1ce84f9ad53a1f8290c9d0576b95929f"
    )


def test_matching_hashes():
    result = compare_hashes("a:b", "a", "b")
    assert result.valid
    assert result.request_match and result.response_match
    assert result.error is None


def test_response_mismatch():
    result = compare_hashes("a:c", "a", "b")
    assert not result.valid
    assert result.request_match is True
    assert result.response_match is False
    assert result.signed_response_hash == "c"
    assert result.expected_response_hash == "b"


def test_swapped_hashes_fail_both_checks():
    d1, d2 = sha256sum("request"), sha256sum("response")
    assert compare_hashes(f"{d1}:{d2}", d1, d2).valid

    swapped = compare_hashes(f"{d2}:{d1}", d1, d2)
    assert not swapped.valid
    assert swapped.request_match is False
    assert swapped.response_match is False


def test_comparison_is_case_sensitive():
    d1, d2 = sha256sum("request"), sha256sum("response")
    result = compare_hashes(f"{d1.upper()}:{d2}", d1, d2)
    assert result.request_match is False


def test_malformed_claim_text():
    for text, parts in [("a:b:c", 3), ("ab", 1), ("", 1)]:
        result = compare_hashes(text, "a", "b")
        assert not result.valid
        assert result.error == f"Expected 2 hash parts separated by ':', got {parts}"
        assert result.error_kind == "MalformedClaimText"
        assert result.request_match is None
        assert result.signature_text == text


def test_non_string_claim_text():
    result = compare_hashes(None, "a", "b")
    assert not result.valid
    assert "NoneType" in result.error
    assert result.error_kind == "MalformedClaimText"


def test_well_formed_claim_text_has_no_error_kind():
    assert compare_hashes("a:c", "a", "b").error_kind is None
