from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup

from .config import (
    DOWNLOAD_TIMEOUT,
    EMENDA_PDF_LINK_SELECTOR,
    EMENDA_SECTION_SELECTOR,
    EMENDAS_CONTAINER_SELECTOR,
    MATERIA_BASE_URL,
    REQUIRED_FIELDS,
    field_labels,
)
from .utils import http_request


class PageFetchError(Exception):
    """The materia page could not be fetched."""


@dataclass
class Emenda:
    id: str
    author: str
    date: str
    description: str = ''
    legislative_action: str = ''
    pdf_link: Optional[str] = None
    pdf_filename: Optional[str] = None

    def to_dict(self):
        """Serializable form, keys in output column order."""
        return {
            'id': self.id,
            'author': self.author,
            'date': self.date,
            'description': self.description,
            'legislativeAction': self.legislative_action,
            'pdfLink': self.pdf_link,
            'pdfFilename': self.pdf_filename,
        }


class Node:
    """Thin wrapper over a parsed HTML element.

    The extractor only relies on these four operations, so any tree that can
    answer them can be fed to extract_emendas.
    """

    def __init__(self, element):
        self._element = element

    def find_all(self, selector):
        return [Node(el) for el in self._element.select(selector)]

    def find(self, selector):
        el = self._element.select_one(selector)
        return Node(el) if el is not None else None

    def text(self):
        return self._element.get_text()

    def attr(self, name):
        value = self._element.get(name)
        if isinstance(value, list):  # multi-valued attributes such as class
            return ' '.join(value)
        return value


def parse_html(html_content):
    return Node(BeautifulSoup(html_content, 'lxml'))


def _label_index(labels, accepted):
    for index, label in enumerate(labels):
        if label.text().strip() in accepted:
            return index
    return -1


def _value_at(values, index):
    # A missing label or a dd list shorter than the dt list both read as "not found"
    if index < 0 or index >= len(values):
        return ''
    return values[index].text().strip()


def extract_emendas(document: Node) -> List[Emenda]:
    """
    Extracts the emendas listed on a materia page.

    Each section pairs its <dt> labels with its <dd> values by position: the
    value of a field is the <dd> at the index of the first <dt> carrying one of
    the field's accepted labels. Sections without a non-empty identifier,
    author and date are skipped.

    Returns:
        list: Emenda records in page order
    """
    container = document.find(EMENDAS_CONTAINER_SELECTOR)
    if container is None:
        return []

    emendas = []
    for section in container.find_all(EMENDA_SECTION_SELECTOR):
        labels = section.find_all('dt')
        values = section.find_all('dd')

        indexes = {field: _label_index(labels, accepted) for field, accepted in field_labels.items()}
        if any(indexes[field] == -1 for field in REQUIRED_FIELDS):
            continue

        fields = {field: _value_at(values, index) for field, index in indexes.items()}
        if any(fields[field] == '' for field in REQUIRED_FIELDS):
            continue

        pdf_link = None
        link_node = section.find(EMENDA_PDF_LINK_SELECTOR)
        if link_node is not None and link_node.attr('href') is not None:
            pdf_link = link_node.attr('href').strip()

        emendas.append(Emenda(
            id=fields['id'],
            author=fields['author'],
            date=fields['date'],
            description=fields['description'],
            legislative_action=fields['legislative_action'],
            pdf_link=pdf_link,
        ))

    return emendas


def build_materia_url(materia):
    return f"{MATERIA_BASE_URL}/{materia}"


def fetch_page(url, session=None, timeout=DOWNLOAD_TIMEOUT):
    """Returns the HTML of the page at url, raising PageFetchError on any failure."""
    response, error = http_request(url, session=session, timeout=timeout)
    if error:
        raise PageFetchError(f"Error fetching {url}: {error}")
    return response.text


def scrape_emendas(materia, session=None, timeout=DOWNLOAD_TIMEOUT):
    """Fetches the materia page and extracts its emendas.

    Returns:
        tuple: (page_url, emendas)
    """
    url = build_materia_url(materia)
    html_content = fetch_page(url, session=session, timeout=timeout)
    return url, extract_emendas(parse_html(html_content))
