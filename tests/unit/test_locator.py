from urllib.parse import unquote, urlparse

import pytest

from postcode_lookup.common.errors import MalformedRequestError
from postcode_lookup.common.locator import build_locator, encode_zip
from postcode_lookup.common.models import Country


def test_build_locator_default_service():
    locator = build_locator(Country.GERMANY, "22880")
    assert locator.url == "http://api.zippopotam.us/de/22880"
    assert locator.zip_code == "22880"
    assert locator.country is Country.GERMANY


def test_build_locator_strips_trailing_slash_from_base():
    locator = build_locator(Country.DENMARK, "2400", base_url="https://zippo.test/api/")
    assert locator.url == "https://zippo.test/api/dk/2400"


def test_special_characters_stay_in_one_path_segment():
    locator = build_locator(Country.NETHERLANDS, "1011 AB/../x?y#z")
    path = urlparse(locator.url).path
    assert locator.url == "http://api.zippopotam.us/nl/1011%20AB%2F..%2Fx%3Fy%23z"
    assert path.count("/") == 2
    assert urlparse(locator.url).query == ""
    assert urlparse(locator.url).fragment == ""


@pytest.mark.parametrize("token", ["22880", "1011 AB", "a/b", "100%", "?&=#", "København", "+49"])
def test_zip_encoding_round_trips(token):
    assert unquote(encode_zip(token)) == token


@pytest.mark.parametrize("token", ["", "   "])
def test_empty_zip_is_malformed(token):
    with pytest.raises(MalformedRequestError) as excinfo:
        build_locator(Country.GERMANY, token)
    assert excinfo.value.zip_code == token


def test_unencodable_zip_is_malformed():
    with pytest.raises(MalformedRequestError) as excinfo:
        build_locator(Country.GERMANY, "22\ud800")
    assert excinfo.value.error_code == "MALFORMED_REQUEST"


@pytest.mark.parametrize("base_url", ["api.zippopotam.us", "ftp://api.zippopotam.us", "http://"])
def test_invalid_service_base_is_malformed(base_url):
    with pytest.raises(MalformedRequestError):
        build_locator(Country.GERMANY, "22880", base_url=base_url)
