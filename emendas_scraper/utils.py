import os
import requests
from urllib.parse import urljoin

from .config import DOWNLOAD_TIMEOUT, PDF_SUBDIR, RESULTS_DIR


def http_request(url, session=None, timeout=DOWNLOAD_TIMEOUT, stream=False):
    """
    Makes a single HTTP GET request. No retries are attempted.

    Args:
        url (str): The URL to request
        session (requests.Session): Session to issue the request with, a plain
            requests.get is used when None
        timeout (float): Request timeout in seconds, None waits indefinitely
        stream (bool): Whether to stream the response

    Returns:
        tuple: (response, error_message) where response is the requests.Response object or None
    """
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, timeout=timeout, stream=stream)
        response.raise_for_status()
        return response, None
    except requests.exceptions.HTTPError as e:
        if e.response is None:
            return None, "HTTP error! status: unknown"
        # streamed responses hold their pooled connection until closed
        e.response.close()
        return None, f"HTTP error! status: {e.response.status_code}"
    except requests.exceptions.RequestException as e:
        return None, f"Request failed: {e}"


def init_directories(materia, results_dir=RESULTS_DIR):
    """Creates the output directories for a materia if they don't exist.

    Returns:
        tuple: (materia_dir, pdf_dir)
    """
    materia_dir = os.path.join(results_dir, materia)
    pdf_dir = os.path.join(materia_dir, PDF_SUBDIR)
    os.makedirs(materia_dir, exist_ok=True)
    os.makedirs(pdf_dir, exist_ok=True)
    return materia_dir, pdf_dir


def generate_pdf_filename(emenda_id):
    """Derives the local PDF filename from an emenda identifier.

    Only the first '/' is replaced, spaces all become '_', e.g.
    '123/45 ABC' -> '123_45_abc.pdf'.
    """
    return emenda_id.replace('/', '_', 1).replace(' ', '_').lower() + '.pdf'


def resolve_pdf_url(pdf_link, page_url):
    """Makes a (possibly relative) PDF href absolute against the page it was found on."""
    return urljoin(page_url, pdf_link)
