def mask_email(email: str) -> str:
    """
    Mask an e-mail address for logging (privacy protection).

    Args:
        email: Address to mask

    Returns:
        Masked address (e.g., "jo*****th@example.com" for "johnsmith@example.com")
    """
    if not email:
        return "***"
    local, sep, domain = email.partition("@")
    if len(local) <= 4:
        masked = "****"
    else:
        masked = f"{local[:2]}{'*' * (len(local) - 4)}{local[-2:]}"
    return f"{masked}{sep}{domain}"
