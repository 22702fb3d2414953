from __future__ import annotations

from chat_gateway.irc.models import EmotePosition, TagSet
from chat_gateway.irc.tags import decode_tags


def test_badges_and_badge_info_share_one_mapping():
    tags = decode_tags("badge-info=subscriber/8;badges=subscriber/6,bits/100")
    # last wins for the shared badge name
    assert tags.badges == {"subscriber": "6", "bits": "100"}
    assert tags.other is None


def test_empty_badges_leave_mapping_unset():
    tags = decode_tags("badges=;badge-info=")
    assert tags.badges is None


def test_emotes_positions():
    tags = decode_tags("emotes=25:0-4,12-16/1902:6-10")
    assert tags.emotes == {
        "25": [EmotePosition("0", "4"), EmotePosition("12", "16")],
        "1902": [EmotePosition("6", "10")],
    }


def test_empty_emotes_leave_mapping_unset():
    assert decode_tags("emotes=").emotes is None


def test_emote_sets_are_indexed_by_position():
    tags = decode_tags("emote-sets=0,33,50,237")
    assert tags.emote_sets == {0: "0", 1: "33", 2: "50", 3: "237"}


def test_empty_emote_sets_decode_to_empty_mapping():
    assert decode_tags("emote-sets=").emote_sets == {}


def test_ignored_tags_are_dropped():
    tags = decode_tags("client-nonce=abc;flags=0-5:P.5;color=#1E90FF")
    assert tags.other == {"color": "#1E90FF"}


def test_other_tags_keep_raw_values_and_last_wins():
    tags = decode_tags("display-name=First;user-type=;display-name=Second")
    assert tags.other == {"display-name": "Second", "user-type": ""}
    assert tags.display_name == "Second"


def test_tag_without_value():
    tags = decode_tags("mod;subscriber=1")
    assert tags.other == {"mod": "", "subscriber": "1"}


def test_decode_into_existing_tag_set():
    existing = TagSet(other={"id": "1"})
    result = decode_tags("color=red", into=existing)
    assert result is existing
    assert existing.other == {"id": "1", "color": "red"}


def test_tag_set_accessors_default_to_none():
    tags = TagSet()
    assert tags.get("id") is None
    assert tags.get("id", "x") == "x"
    assert tags.display_name is None
    assert tags.message_id is None
