import pytest

from overland.domain.share_code import (
    WORD_LIST,
    ShareCodeError,
    compose_seed,
    decode_to_seed,
    encode_friendly,
    generate_code_from_entropy,
    parse_share_code,
    sanitize_word,
)


@pytest.mark.parametrize("code", ["DP-ORANGE42", "CL-ORANGE42", "DP-MANGO99", "CL-MANGO07"])
def test_codes_survive_a_seed_round_trip(code: str) -> None:
    decoded = decode_to_seed(code)

    assert decoded is not None
    is_deep, seed = decoded
    assert is_deep is code.startswith("DP")
    assert encode_friendly(is_deep, seed) == code


def test_mode_changes_the_seed() -> None:
    _, deep_seed = decode_to_seed("DP-ORANGE42")
    _, classic_seed = decode_to_seed("CL-ORANGE42")

    assert deep_seed != classic_seed
    assert deep_seed & 0xFFFF == classic_seed & 0xFFFF


def test_lowercase_and_whitespace_are_accepted() -> None:
    assert decode_to_seed("  dp-orange42 ") == decode_to_seed("DP-ORANGE42")


@pytest.mark.parametrize("code", ["", "XX-ORANGE42", "DPORANGE42", "DP-ORANGE", "DP-NOTAWORD12", "DP-42"])
def test_invalid_codes(code: str) -> None:
    assert decode_to_seed(code) is None
    with pytest.raises(ShareCodeError):
        parse_share_code(code)


def test_parse_share_code_returns_mode() -> None:
    mode, seed = parse_share_code("CL-MANGO99")

    assert mode == "classic"
    assert seed == compose_seed(False, WORD_LIST.index("MANGO"), 99)


def test_word_list_is_unique_and_complete() -> None:
    assert len(WORD_LIST) == 512
    assert len(set(WORD_LIST)) == 512
    assert all(word == sanitize_word(word) for word in WORD_LIST)


def test_sanitize_word() -> None:
    assert sanitize_word("or-ange 1") == "ORANGE"


@pytest.mark.parametrize("entropy", [0, 1, 123_456_789, 2**64 - 1])
def test_entropy_codes_decode(entropy: int) -> None:
    code = generate_code_from_entropy(True, entropy)
    decoded = decode_to_seed(code)

    assert code.startswith("DP-")
    assert decoded is not None
    assert encode_friendly(True, decoded[1]) == code
