"""
Seed phrases - BIP-39 generation, validation and seed derivation.
"""

from mnemonic import Mnemonic

from .errors import EntropyError, InvalidPhraseError, RandomSourceError

MNEMONIC_LANGUAGE = "english"

# This wallet only issues and accepts 12-word (128-bit) phrases
SEED_ENTROPY_BITS = 128
SEED_WORD_COUNT = 12

# Strengths allowed by BIP-39
BIP39_STRENGTHS = (128, 160, 192, 224, 256)

_mnemo = Mnemonic(MNEMONIC_LANGUAGE)


def normalize_phrase(phrase: str) -> str:
    """Collapse surrounding and repeated whitespace."""
    return " ".join(phrase.split())


def generate_phrase(entropy_bits: int = SEED_ENTROPY_BITS) -> str:
    """
    Generate a fresh seed phrase.

    Args:
        entropy_bits: Entropy size; 128 bits gives 12 words

    Raises:
        EntropyError: If the size is not valid for BIP-39 or does not
            produce a 12-word phrase
        RandomSourceError: If the OS random source fails
    """
    if entropy_bits not in BIP39_STRENGTHS:
        raise EntropyError(
            f"{entropy_bits} bits is not a BIP-39 entropy size "
            f"(expected one of {', '.join(map(str, BIP39_STRENGTHS))})"
        )
    if entropy_bits != SEED_ENTROPY_BITS:
        raise EntropyError(
            f"wallet phrases must be {SEED_WORD_COUNT} words "
            f"({SEED_ENTROPY_BITS} bits), got {entropy_bits} bits"
        )

    try:
        return _mnemo.generate(strength=entropy_bits)
    except OSError as e:
        raise RandomSourceError(f"secure random source unavailable: {e}") from e


def validate_phrase(phrase: str) -> str:
    """
    Check word count and BIP-39 checksum.

    Returns the normalized phrase.

    Raises: InvalidPhraseError
    """
    normalized = normalize_phrase(phrase or "")
    words = normalized.split(" ") if normalized else []

    if len(words) != SEED_WORD_COUNT:
        raise InvalidPhraseError(
            f"seed phrase must have exactly {SEED_WORD_COUNT} words, got {len(words)}"
        )
    if not _mnemo.check(normalized):
        raise InvalidPhraseError("seed phrase checksum or wordlist mismatch")

    return normalized


def derive_seed(phrase: str) -> bytes:
    """
    Derive the 64-byte BIP-39 seed.

    The wallet passphrase is never mixed in here; the BIP-39
    passphrase extension is always empty.
    """
    return Mnemonic.to_seed(normalize_phrase(phrase), passphrase="")
