"""Narrative beats used to seed the log."""

STORY_BEATS: dict[str, tuple[str, ...]] = {
    "arrival": (
        "Night gathers as you step from the winding forest path and the manor reveals itself at last.",
        "Ancient pines hem the clearing, their needles whispering with secrets carried on the mist.",
        "The manor's doors groan open just enough to invite you inside, "
        "promising dust-drowned memories waiting to be stirred.",
    ),
}


def build_story_log(keys: str | list[str]) -> list[str]:
    """Concatenate the entries of one or more beats, in order."""
    if isinstance(keys, str):
        keys = [keys]
    entries: list[str] = []
    for key in keys:
        entries.extend(STORY_BEATS[key])
    return entries
