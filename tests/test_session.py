import pytest

from models import GatewayResult, RegisteredPlayer, WebsiteInfo
from session import SessionState, SessionAlreadyActivatedError


def test_new_session_is_not_activated():
    state = SessionState()
    assert state.activated is False
    assert state.website is None


def test_publish_activates_session():
    state = SessionState()
    website = WebsiteInfo(id="1", name="Hub")
    state.publish(website)

    assert state.activated is True
    assert state.website == website
    assert state.website.url == ""


def test_second_publish_is_rejected_and_keeps_first_website():
    state = SessionState()
    first = WebsiteInfo(id="1", name="Hub")
    state.publish(first)

    with pytest.raises(SessionAlreadyActivatedError):
        state.publish(WebsiteInfo(id="2", name="Other"))

    assert state.website == first


def test_publish_requires_id_and_name():
    state = SessionState()
    with pytest.raises(ValueError):
        state.publish(WebsiteInfo(id="", name="Hub"))
    assert state.activated is False


def test_website_is_immutable():
    website = WebsiteInfo(id="1", name="Hub", url="https://hub.example.com")
    with pytest.raises(Exception):
        website.url = "https://elsewhere.example.com"


def test_gateway_result_helpers():
    result = GatewayResult.not_initialized()
    assert result.success is False
    assert result.message == "API client not initialized"
    assert result.has_user_data is False

    found = GatewayResult(success=True, message="User found", payload={"username": "Steve"})
    assert found.has_user_data is True


def test_registered_player_from_nickname():
    player = RegisteredPlayer.from_nickname("Notch")

    assert player.nickname == "Notch"
    assert player.lowercase_nickname == "notch"
    assert player.credential_hash == ""
    assert player.premium_id == ""
