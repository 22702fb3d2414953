"""IRCv3 tag block decoding for Twitch messages."""

from __future__ import annotations

from .models import EmotePosition, TagSet

IGNORED_TAGS = frozenset({"client-nonce", "flags"})
BADGE_TAGS = frozenset({"badges", "badge-info"})


def decode_tags(raw_tags: str, into: TagSet | None = None) -> TagSet:
    """Decode ``key=value;key=value`` pairs (without the leading ``@``).

    Duplicate names are last-wins. When ``into`` is given the decoded tags
    are merged into it and the same instance is returned.
    """
    tags = into if into is not None else TagSet()
    for pair in raw_tags.split(";"):
        if not pair:
            continue
        name, _, value = pair.partition("=")
        if name in BADGE_TAGS:
            _merge_badges(tags, value)
        elif name == "emotes":
            _merge_emotes(tags, value)
        elif name == "emote-sets":
            tags.emote_sets = _decode_emote_sets(value)
        elif name not in IGNORED_TAGS:
            if tags.other is None:
                tags.other = {}
            tags.other[name] = value
    return tags


def _merge_badges(tags: TagSet, value: str) -> None:
    # badge-info and badges share one mapping, e.g. "subscriber/12,premium/1"
    if not value:
        return
    if tags.badges is None:
        tags.badges = {}
    for badge in value.split(","):
        name, _, version = badge.partition("/")
        tags.badges[name] = version


def _merge_emotes(tags: TagSet, value: str) -> None:
    # "25:0-4,12-16/1902:6-10"
    if not value:
        return
    if tags.emotes is None:
        tags.emotes = {}
    for emote in value.split("/"):
        emote_id, _, raw_positions = emote.partition(":")
        positions: list[EmotePosition] = []
        for span in raw_positions.split(",") if raw_positions else ():
            start, sep, end = span.partition("-")
            positions.append(EmotePosition(start=start or None, end=end if sep else None))
        tags.emotes[emote_id] = positions


def _decode_emote_sets(value: str) -> dict[int, str]:
    if not value:
        return {}
    return dict(enumerate(value.split(",")))
