import pytest
from pydantic import ValidationError

from bug_butler.models import Role, Transcript, Turn


def test_turn_is_immutable():
    turn = Turn(role=Role.USER, content="hello")
    with pytest.raises(ValidationError):
        turn.content = "changed"


def test_turn_rejects_unknown_role():
    with pytest.raises(ValidationError):
        Turn(role="moderator", content="hi")


def test_as_message_omits_failure_flag():
    turn = Turn(role=Role.ASSISTANT, content="oops", failed=True)
    assert turn.as_message() == {"role": "assistant", "content": "oops"}


def test_transcript_preserves_insertion_order():
    transcript = Transcript.seeded("hi")
    transcript.append(Turn(role=Role.USER, content="a"))
    transcript.append(Turn(role=Role.ASSISTANT, content="b"))
    transcript.append(Turn(role=Role.USER, content="c"))

    assert [t.content for t in transcript] == ["hi", "a", "b", "c"]
    assert transcript.user_turn_count == 2
    assert transcript.serialize() == "Bug Butler: hi\n\nUser: a\n\nBug Butler: b\n\nUser: c"


def test_turns_snapshot_is_detached():
    transcript = Transcript.seeded("hi")
    snapshot = transcript.turns
    transcript.append(Turn(role=Role.USER, content="later"))
    assert len(snapshot) == 1
    assert len(transcript) == 2
