"""Keep personal data out of console logs."""


def mask_email(email: str | None) -> str:
    """'budi@bengkel.id' -> 'b***@bengkel.id'."""
    if not email or "@" not in email:
        return "***"
    local, domain = email.rsplit("@", 1)
    return f"{local[:1]}***@{domain}"


def mask_token(token: str | None) -> str:
    """Show only the last four characters of a bearer token."""
    if not token or len(token) <= 8:
        return "***"
    return f"***{token[-4:]}"
