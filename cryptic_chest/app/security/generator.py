# cryptic_chest/app/security/generator.py
"""
Random password generation and the strength meter shown on sign-up.

Uses `secrets` for sampling. Generated passwords are not guaranteed
to contain a character from every selected class.
"""
import re
import secrets

from cryptic_chest.app.core.exceptions import ConfigurationError
from cryptic_chest.app.schemas.generator import PasswordOptions

LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DIGITS = "0123456789"
SYMBOLS = "!@#$%^&*()_+[]{}|;:,.<>?"


def build_charset(options: PasswordOptions) -> str:
    """Concatenate the enabled alphabets in fixed order."""
    chars = ""
    if options.include_lowercase:
        chars += LOWERCASE
    if options.include_uppercase:
        chars += UPPERCASE
    if options.include_numbers:
        chars += DIGITS
    if options.include_symbols:
        chars += SYMBOLS
    return chars


def generate_password(options: PasswordOptions) -> str:
    """
    Generate a random password.

    Args:
        options: Length and character-class selection

    Returns:
        Password of exactly options.length characters

    Raises:
        ConfigurationError: no character class selected, or length < 1
    """
    chars = build_charset(options)
    if not chars:
        raise ConfigurationError(
            "You must select at least one character type",
            operation="generate_password",
        )
    if options.length < 1:
        raise ConfigurationError("Password length must be at least 1", operation="generate_password")

    return "".join(secrets.choice(chars) for _ in range(options.length))


def password_strength(password: str) -> int:
    """Score a password from 0 to 100."""
    if not password:
        return 0

    strength = 0
    if len(password) >= 8:
        strength += 20
    if len(password) >= 12:
        strength += 10

    if re.search(r"[A-Z]", password):
        strength += 20
    if re.search(r"[0-9]", password):
        strength += 20
    if re.search(r"[^A-Za-z0-9]", password):
        strength += 20
    if re.search(r"[a-z]", password):
        strength += 10

    return min(strength, 100)


def strength_label(score: int) -> str:
    if score == 0:
        return "Enter password"
    if score < 40:
        return "Weak"
    if score < 70:
        return "Fair"
    if score < 90:
        return "Good"
    return "Strong"
