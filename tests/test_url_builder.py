import pytest

from meteofetch.core.config import API_BASE_URL
from meteofetch.core.domain.models import RequestConfig
from meteofetch.core.errors import UrlConstructionError
from meteofetch.core.services.url_builder import MAX_URL_LENGTH, construct_url


def _config(**overrides):
    values = {
        "datetime": "2024-10-23T00:00:00Z",
        "parameters": "t_2m:C",
        "location": "0,0",
        "format": "json",
    }
    values.update(overrides)
    return RequestConfig(**values)


def test_url_has_five_ordered_segments():
    url = construct_url(_config(), base_url=API_BASE_URL)
    assert url == "https://api.meteomatics.com/2024-10-23T00:00:00Z/t_2m:C/0,0/json"


def test_default_limit_is_512_bytes():
    assert MAX_URL_LENGTH == 512


def test_overlong_url_is_rejected_not_truncated():
    with pytest.raises(UrlConstructionError):
        construct_url(_config(location="1" * 600), base_url=API_BASE_URL)


def test_limit_reserves_room_for_terminator():
    url = construct_url(_config(), base_url=API_BASE_URL)

    assert construct_url(_config(), base_url=API_BASE_URL, max_length=len(url) + 1) == url
    with pytest.raises(UrlConstructionError):
        construct_url(_config(), base_url=API_BASE_URL, max_length=len(url))


def test_limit_counts_encoded_bytes():
    config = _config(location="é")
    chars = len("/".join((API_BASE_URL, config.datetime, config.parameters, "é", config.format)))

    with pytest.raises(UrlConstructionError):
        construct_url(config, base_url=API_BASE_URL, max_length=chars + 1)
    assert construct_url(config, base_url=API_BASE_URL, max_length=chars + 2)
