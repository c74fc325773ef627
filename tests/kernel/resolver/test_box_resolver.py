import pytest

from boxget.kernel.errors import (
    BoxAddInvalidVersionConstraint,
    BoxAddNoMatchingProvider,
    BoxAddNoMatchingVersion,
    BoxAddProviderChoiceRequired,
)
from boxget.kernel.metadata import MetadataDocument
from boxget.kernel.resolver import BoxResolver
from tests.helpers import metadata_document
from tests.kernel.mocks import StubChooser


def _document(versions, name="foo/bar"):
    return MetadataDocument.model_validate(metadata_document(name=name, versions=versions))


@pytest.fixture
def document():
    return _document({
        "0.5": {"virtualbox": "http://x/0.5-vb.box", "vmware": "http://x/0.5-vmw.box"},
        "0.7": {"virtualbox": "http://x/0.7-vb.box"},
        "1.1": {"vmware": "http://x/1.1-vmw.box"},
        "1.5": {},
    })


def test_picks_highest_version_with_providers(document):
    selection = BoxResolver().resolve(document)

    assert selection.name == "foo/bar"
    assert selection.version.version == "1.1"
    assert selection.provider.name == "vmware"
    assert selection.provider.url == "http://x/1.1-vmw.box"


def test_provider_constraint_skips_newer_versions(document):
    selection = BoxResolver().resolve(document, providers=("virtualbox",))

    assert selection.version.version == "0.7"
    assert selection.provider.name == "virtualbox"


def test_version_constraint(document):
    selection = BoxResolver().resolve(document, version_constraint="< 1.0", providers=("vmware",))

    assert selection.version.version == "0.5"
    assert selection.provider.name == "vmware"


def test_caller_provider_order_breaks_ties(document):
    selection = BoxResolver().resolve(document, version_constraint="= 0.5", providers=("vmware", "virtualbox"))

    assert selection.provider.name == "vmware"


def test_chooser_sees_providers_in_document_order():
    document = _document({"1.0": {"vmware": "http://x/vmw.box", "virtualbox": "http://x/vb.box"}})
    chooser = StubChooser(1)

    selection = BoxResolver(chooser=chooser).resolve(document)

    assert chooser.calls == [["vmware", "virtualbox"]]
    assert selection.provider.name == "vmware"


def test_chooser_is_asked_again_on_out_of_range_answer():
    document = _document({"1.0": {"vmware": "http://x/vmw.box", "virtualbox": "http://x/vb.box"}})
    chooser = StubChooser(0, 5, 2)

    selection = BoxResolver(chooser=chooser).resolve(document)

    assert len(chooser.calls) == 3
    assert selection.provider.name == "virtualbox"


def test_ambiguity_without_chooser_fails():
    document = _document({"1.0": {"vmware": "http://x/vmw.box", "virtualbox": "http://x/vb.box"}})

    with pytest.raises(BoxAddProviderChoiceRequired):
        BoxResolver().resolve(document)


def test_no_matching_version_lists_available(document):
    with pytest.raises(BoxAddNoMatchingVersion) as excinfo:
        BoxResolver().resolve(document, version_constraint="~> 2.0", url="http://x/foo.json")

    message = str(excinfo.value)
    assert "~> 2.0" in message
    assert "0.5, 0.7, 1.1, 1.5" in message


def test_no_matching_provider(document):
    with pytest.raises(BoxAddNoMatchingProvider) as excinfo:
        BoxResolver().resolve(document, providers=("hyperv",))

    assert "hyperv" in str(excinfo.value)


def test_versions_without_providers_never_match():
    document = _document({"1.0": {}})

    # Reported as a version problem even though a provider was requested
    with pytest.raises(BoxAddNoMatchingVersion):
        BoxResolver().resolve(document, providers=("vmware",))


def test_equal_versions_keep_document_order():
    document = _document({
        "1.0": {"virtualbox": "http://x/first.box"},
        "1.0.0": {"virtualbox": "http://x/second.box"},
    })

    selection = BoxResolver().resolve(document)

    assert selection.provider.url == "http://x/first.box"


def test_unparseable_versions_are_skipped():
    document = _document({
        "latest": {"virtualbox": "http://x/latest.box"},
        "0.9": {"virtualbox": "http://x/0.9.box"},
    })

    selection = BoxResolver().resolve(document)

    assert selection.version.version == "0.9"


def test_invalid_constraint(document):
    with pytest.raises(BoxAddInvalidVersionConstraint):
        BoxResolver().resolve(document, version_constraint="~>")


def test_resolution_is_deterministic(document):
    resolver = BoxResolver()

    first = resolver.resolve(document, providers=("virtualbox",))
    second = resolver.resolve(document, providers=("virtualbox",))

    assert first == second
