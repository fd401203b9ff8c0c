"""Helpers for keeping secrets out of logs."""


def mask_secret(value: str | None, visible: int = 4) -> str:
    """Mask a secret so only a short prefix survives.

    Args:
        value: Token or password to mask.
        visible: Number of leading characters to keep.

    Returns:
        Masked representation, e.g. ``"abc1…(32 chars)"``. Secrets no longer
        than ``visible`` characters are fully hidden.
    """
    if not value:
        return "<empty>"
    if len(value) <= visible:
        return f"***({len(value)} chars)"
    return f"{value[:visible]}…({len(value)} chars)"
