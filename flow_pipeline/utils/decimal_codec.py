import re

TOKEN_DECIMALS = 18

_DECIMAL_PATTERN = re.compile(r"^(-?)(\d+)(?:\.(\d+))?$")


def to_decimal_string(raw: int, decimals: int = TOKEN_DECIMALS) -> str:
    """
    Render a fixed-point integer amount as a minimal decimal string.

    The integer part is unpadded, the fractional part is present only when
    nonzero and has trailing zeros stripped. Negative values keep a leading
    ``-`` in front of the formatted magnitude.

    Examples:
        >>> to_decimal_string(1500000000000000000)
        '1.5'
        >>> to_decimal_string(-250000000000000000)
        '-0.25'
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")

    negative = raw < 0
    whole, frac = divmod(abs(raw), 10 ** decimals)
    prefix = "-" if negative else ""
    if frac == 0:
        return f"{prefix}{whole}"

    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{prefix}{whole}.{frac_str}"


def from_decimal_string(text: str, decimals: int = TOKEN_DECIMALS) -> int:
    """Parse a decimal string back into its fixed-point integer amount."""
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")

    match = _DECIMAL_PATTERN.match(text.strip())
    if not match:
        raise ValueError(f"Invalid decimal amount: {text!r}")

    sign, whole, frac = match.groups()
    frac = (frac or "").rstrip("0")
    if len(frac) > decimals:
        raise ValueError(f"Amount {text!r} has more than {decimals} fractional digits")

    raw = int(whole) * 10 ** decimals + int(frac.ljust(decimals, "0") or "0")
    return -raw if sign else raw
