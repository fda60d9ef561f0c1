import pytest

from cardshot.core.config import MergedConfig
from cardshot.core.errors import NoDeviceFound
from cardshot.perception.devices import DeviceInfo, DeviceMatcher, find_capture_card


@pytest.fixture
def default_matcher():
    return DeviceMatcher.from_config(MergedConfig())


@pytest.mark.parametrize("name", [
    "UGREEN HDMI Capture",
    "Live Gamer ULTRA-Video",
    "Live Gamer 4K-Video",
])
def test_known_capture_cards_match(default_matcher, name):
    assert default_matcher.matches(name)


@pytest.mark.parametrize("name", [
    "Integrated Webcam",
    "UGREEN HDMI Capture (2)",
    "My UGREEN HDMI Capture",
    "Live Gamer ULTRA-Audio",
    "",
])
def test_other_cameras_do_not_match(default_matcher, name):
    assert not default_matcher.matches(name)


def test_first_match_in_enumeration_order_wins(default_matcher):
    devices = [
        DeviceInfo(0, "Integrated Webcam"),
        DeviceInfo(1, "Live Gamer 4K-Video"),
        DeviceInfo(2, "UGREEN HDMI Capture"),
    ]
    assert find_capture_card(devices, default_matcher) == devices[1]


def test_custom_patterns():
    matcher = DeviceMatcher([r"^Elgato"])
    device = find_capture_card([DeviceInfo(3, "Elgato HD60 X")], matcher)
    assert device.index == 3


def test_no_match_lists_available_cameras(default_matcher):
    devices = [DeviceInfo(0, "Integrated Webcam"), DeviceInfo(1, "OBS Virtual Camera")]

    with pytest.raises(NoDeviceFound) as exc_info:
        find_capture_card(devices, default_matcher)

    message = str(exc_info.value)
    assert message.startswith("No supported cameras found")
    assert "Available cameras:" in message
    assert "  - Integrated Webcam" in message
    assert "  - OBS Virtual Camera" in message
    assert exc_info.value.available == ["Integrated Webcam", "OBS Virtual Camera"]


def test_no_devices_at_all(default_matcher):
    with pytest.raises(NoDeviceFound) as exc_info:
        find_capture_card([], default_matcher)
    assert str(exc_info.value) == "No supported cameras found"
