import io

import pytest
import requests
from requests.structures import CaseInsensitiveDict

MATERIA = "157233"
PAGE_URL = f"https://www25.senado.leg.br/web/atividade/materias/-/materia/{MATERIA}"


def make_response(body=b'', status_code=200, headers=None, url=None, raw=None):
    """A real requests.Response backed by an in-memory body."""
    response = requests.Response()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    response.raw = raw if raw is not None else io.BytesIO(body)
    response.url = url
    response.encoding = 'utf-8'
    return response


class FakeSession:
    """Serves canned responses by URL; unknown URLs get a 404."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self.closed = True

    def get(self, url, timeout=None, stream=False):
        self.calls.append({'url': url, 'timeout': timeout, 'stream': stream})
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route()
        if route is None:
            return make_response(status_code=404, url=url)
        return route


def emenda_section(labels_and_values, pdf_href=None):
    """Builds one sf-texto-materia block with <dt>/<dd> pairs."""
    rows = ''.join(f"<dt>{label}</dt><dd>{value}</dd>" for label, value in labels_and_values)
    link = f'<a class="sf-texto-materia--link" href="{pdf_href}">Texto</a>' if pdf_href else ''
    return f'<div class="sf-texto-materia"><dl>{rows}</dl>{link}</div>'


def materia_page(*sections):
    return (
        "<html><body>"
        '<div id="materia_documentos_emendas">'
        + ''.join(sections)
        + "</div></body></html>"
    )


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def page_html():
    """Two valid emendas around one without an author."""
    return materia_page(
        emenda_section([
            ("Identificação:", "EMENDA 1 - PLEN"),
            ("Autor:", "Senador Fulano"),
            ("Data:", "10/03/2023"),
            ("Descrição:", "Altera o art. 2º"),
            ("Ação Legislativa:", "Aprovada"),
        ], pdf_href="https://legis.senado.leg.br/sdleg-getter/documento?dm=1"),
        emenda_section([
            ("Identificação:", "EMENDA 2 - PLEN"),
            ("Data:", "11/03/2023"),
        ], pdf_href="https://legis.senado.leg.br/sdleg-getter/documento?dm=2"),
        emenda_section([
            ("Identificação:", "EMENDA 3/2023 PLEN"),
            ("Autora:", "Senadora Beltrana"),
            ("Data da Apresentação:", "12/03/2023"),
        ], pdf_href="https://legis.senado.leg.br/sdleg-getter/documento?dm=3"),
    )
