def avatar_initial(author_name: str) -> str:
    """First letter of the author's name for the avatar badge"""
    return author_name[:1].upper() or "A"
