import json

import pytest
import requests_mock

from boxget.kernel.errors import BoxAddNameMismatch, BoxMetadataMalformed
from boxget.kernel.metadata import fetch_metadata, parse_metadata

URL = "http://127.0.0.1:3838/foo.json"


def test_parse_full_document():
    raw = json.dumps({
        "name": "foo/bar",
        "description": "A box",
        "versions": [{
            "version": "0.7",
            "providers": [{
                "name": "virtualbox",
                "url": "http://x/0.7.box",
                "checksum_type": "sha1",
                "checksum": "abc",
            }],
        }],
    })

    document = parse_metadata(raw, URL)

    assert document.name == "foo/bar"
    assert document.description == "A box"
    assert document.version_names == ["0.7"]
    provider = document.versions[0].providers[0]
    assert provider.name == "virtualbox"
    assert provider.url == "http://x/0.7.box"
    assert provider.checksum_type == "sha1"
    assert provider.checksum == "abc"
    assert document.versions[0].provider_names == ["virtualbox"]


def test_missing_or_null_providers_become_empty():
    raw = json.dumps({
        "name": "foo/bar",
        "versions": [{"version": "0.5"}, {"version": "0.6", "providers": None}],
    })

    document = parse_metadata(raw, URL)

    assert [v.provider_names for v in document.versions] == [[], []]


def test_unknown_fields_are_ignored():
    raw = json.dumps({"name": "foo/bar", "versions": [], "tags": ["x"]})

    assert parse_metadata(raw, URL).versions == []


@pytest.mark.parametrize("raw, fragment", [
    ("not json at all", "document"),
    ('{"versions": []}', "name"),
    ('{"name": "foo/bar", "versions": [{"providers": []}]}', "versions.0.version"),
    ('{"name": "foo/bar", "versions": [{"version": "1", "providers": [{"name": "vb"}]}]}', "url"),
])
def test_malformed_documents(raw, fragment):
    with pytest.raises(BoxMetadataMalformed) as excinfo:
        parse_metadata(raw, URL)

    assert URL in str(excinfo.value)
    assert fragment in str(excinfo.value)


def test_bytes_are_decoded_as_utf8():
    document = parse_metadata('{"name": "foo/bär", "versions": []}'.encode("utf-8"), URL)
    assert document.name == "foo/bär"

    with pytest.raises(BoxMetadataMalformed) as excinfo:
        parse_metadata(b'{"name": "foo/bar\xff", "versions": []}', URL)
    assert "UTF-8" in str(excinfo.value)


def test_fetch_metadata_over_http(downloader):
    with requests_mock.Mocker() as m:
        m.get(URL, text=json.dumps({"name": "foo/bar", "versions": []}))
        document = fetch_metadata(downloader, URL)

    assert document.name == "foo/bar"


def test_fetch_metadata_checks_requested_name(downloader, write_metadata):
    md_path = write_metadata({"name": "foo/bar", "versions": []})

    assert fetch_metadata(downloader, str(md_path), "foo/bar").name == "foo/bar"
    with pytest.raises(BoxAddNameMismatch) as excinfo:
        fetch_metadata(downloader, str(md_path), "foo/baz")

    assert "foo/baz" in str(excinfo.value)
    assert "foo/bar" in str(excinfo.value)
