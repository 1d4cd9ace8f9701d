import pytest

from learnhub.services.chat import default_response_generator


@pytest.mark.parametrize("message,fragment", [
    ("Can you HELP me?", "I can help you"),
    ("how is the quiz scored", "scored out of 100"),
    ("run a simulation", "Simulations are not available"),
])
def test_keyword_replies(message, fragment):
    assert fragment in default_response_generator(message, "general")


def test_fallback_mentions_context():
    reply = default_response_generator("good morning", "course")
    assert "about course" in reply
