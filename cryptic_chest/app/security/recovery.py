# cryptic_chest/app/security/recovery.py
"""
Recovery phrases and the backup blob envelope.

Backup blob format:  <base64(utf8 JSON payload)>_<base64(phrase)>

Security notes:
- The phrase is shown to the user once and is NEVER stored server-side
- The suffix only catches typos; it is not an authenticator
- The whole encoded phrase is compared, so phrases that share a prefix
  are still told apart
- The payload itself is readable by anyone holding the file
"""
import base64
import binascii
import logging
import secrets

from cryptic_chest.app.core.exceptions import FormatError, RecoveryPhraseError
from cryptic_chest.app.security.encryption import constant_time_compare

logger = logging.getLogger(__name__)

MIN_WORDS = 10
MAX_WORDS = 15

BACKUP_SEPARATOR = "_"

# Short dictionary words, 3-4 letters each
WORD_LIST = (
    "ace", "add", "air", "all", "and", "ant", "any", "arm", "art", "ask",
    "bad", "bag", "bat", "bed", "bee", "big", "bit", "box", "boy", "bug",
    "bus", "but", "buy", "cab", "can", "cap", "car", "cat", "cow", "cry",
    "cup", "cut", "dad", "day", "den", "dig", "dim", "dip", "dog", "dot",
    "dry", "due", "ear", "eat", "egg", "end", "eye", "fan", "far", "fat",
    "fed", "fee", "few", "fig", "fit", "fix", "fly", "fog", "for", "fox",
    "fun", "gap", "gas", "gel", "gem", "get", "gig", "gin", "got", "gum",
    "gun", "gut", "guy", "gym", "had", "ham", "has", "hat", "hay", "hem",
    "hen", "her", "hey", "him", "hip", "his", "hit", "hog", "hot", "how",
    "hub", "hug", "hut", "ice", "icy", "ink", "inn", "ion", "its", "ivy",
    "jam", "jar", "jaw", "jet", "job", "jog", "joy", "jug", "jump", "keep",
    "kick", "kind", "king", "kite", "knee", "knot", "lake", "lamp", "land",
    "last", "late", "lazy", "leaf", "lean", "left", "less", "life", "lift",
    "like", "line", "link", "lion", "list", "live", "load", "loaf", "lock",
    "look", "love", "luck", "made", "mail", "main", "make", "male", "mall",
    "many", "mark", "mask", "math", "meal", "mean", "meat", "meet", "melt",
    "milk", "mind", "mine", "miss", "mist", "moon", "more", "most", "move",
    "much", "must", "name", "near", "neat", "neck", "need", "nest", "news",
)


def generate_recovery_phrase() -> str:
    """
    Generate a recovery phrase of 10-15 words.

    Words are sampled with replacement, so repeats are possible.

    Returns:
        Space-separated words
    """
    word_count = MIN_WORDS + secrets.randbelow(MAX_WORDS - MIN_WORDS + 1)
    return " ".join(secrets.choice(WORD_LIST) for _ in range(word_count))


def normalize_phrase(phrase: str) -> str:
    """Collapse whitespace in a user-typed phrase."""
    return " ".join(phrase.split())


def phrase_check(phrase: str) -> str:
    return base64.b64encode(phrase.encode("utf-8")).decode("ascii")


def encrypt_backup_data(data: str, recovery_phrase: str) -> str:
    """
    Wrap serialized backup data with a recovery phrase.

    Args:
        data: JSON text of the backup payload
        recovery_phrase: Phrase shown to the user

    Returns:
        Two-segment backup blob joined with "_"
    """
    encoded = base64.b64encode(data.encode("utf-8")).decode("ascii")
    return f"{encoded}{BACKUP_SEPARATOR}{phrase_check(recovery_phrase)}"


def decrypt_backup_data(blob: str, recovery_phrase: str) -> str:
    """
    Unwrap a backup blob.

    Args:
        blob: Contents of a backup file
        recovery_phrase: Phrase supplied at restore time

    Returns:
        JSON text of the backup payload

    Raises:
        FormatError: blob is not two segments or payload is not base64 text
        RecoveryPhraseError: phrase check does not match
    """
    parts = blob.strip().split(BACKUP_SEPARATOR)
    if len(parts) != 2:
        logger.warning("Rejected backup blob with %d segments", len(parts))
        raise FormatError("Invalid backup format", operation="decrypt_backup_data")

    encoded, check = parts
    if not constant_time_compare(phrase_check(recovery_phrase), check):
        logger.warning("Recovery phrase check failed")
        raise RecoveryPhraseError("Incorrect recovery phrase", operation="decrypt_backup_data")

    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise FormatError("Backup payload is not valid base64 text", operation="decrypt_backup_data") from exc
