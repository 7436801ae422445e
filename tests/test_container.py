import pytest

from section_finder.config.settings import Settings
from section_finder.container import Container, configure_container, open_document
from section_finder.core.protocols.backend import SimilarityBackend
from section_finder.core.services.search_service import SectionSearchService
from section_finder.core.services.text_search_service import TextSearchService
from section_finder.infrastructure.fragment_sources import PyMuPDFDocument, PypdfDocument


class Service:
    pass


def test_singleton_is_cached():
    container = Container()
    container.register(Service, Service, singleton=True)

    assert container.resolve(Service) is container.resolve(Service)


def test_transient_creates_new_instances():
    container = Container()
    container.register(Service, Service)

    assert container.resolve(Service) is not container.resolve(Service)


def test_reregistering_replaces_cached_singleton():
    container = Container()
    container.register(Service, Service, singleton=True)
    first = container.resolve(Service)

    container.register(Service, Service, singleton=True)

    assert container.resolve(Service) is not first


def test_unknown_interface_raises():
    with pytest.raises(KeyError):
        Container().resolve(Service)


def test_open_document_picks_reader():
    assert isinstance(open_document("a.pdf", Settings(pdf_reader="pymupdf")), PyMuPDFDocument)
    assert isinstance(open_document("a.pdf", Settings(pdf_reader="PyPDF")), PypdfDocument)

    with pytest.raises(ValueError):
        open_document("a.pdf", Settings(pdf_reader="poppler"))


def test_configure_container_wires_services(fake_document):
    document = fake_document({}, total_pages=3)

    configured = configure_container(Settings(), document)

    search = configured.resolve(SectionSearchService)
    assert isinstance(search, SectionSearchService)
    assert configured.resolve(SectionSearchService) is search
    assert isinstance(configured.resolve(TextSearchService), TextSearchService)


def test_services_share_backend_protocol(fake_document):
    configured = configure_container(Settings(), fake_document({}, total_pages=1))

    assert isinstance(configured.resolve(SectionSearchService), SimilarityBackend)
    assert isinstance(configured.resolve(TextSearchService), SimilarityBackend)
