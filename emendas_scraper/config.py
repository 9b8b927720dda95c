import math
import os
from dotenv import load_dotenv

load_dotenv()
# --- Configuration ---


def parse_timeout(value, default):
    """'0', 'none' or 'off' disables the timeout; anything else is seconds.

    Raises ValueError for non-numeric or negative values.
    """
    if value is None or value.strip() == "":
        return default
    if value.strip().lower() in ("none", "off"):
        return None
    seconds = float(value)
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"timeout must be a non-negative number of seconds, got {value!r}")
    return seconds if seconds > 0 else None


def _timeout_setting(name, default):
    try:
        return parse_timeout(os.getenv(name), default)
    except ValueError as e:
        print(f"Ignoring {name}: {e}. Using {default}s.")
        return default


MATERIA_BASE_URL = "https://www25.senado.leg.br/web/atividade/materias/-/materia"
RESULTS_DIR = os.getenv("RESULTS_DIR", "resultados")
CONFIG_FILE = os.getenv("EMENDAS_CONFIG_FILE", "config.json")
DOWNLOAD_TIMEOUT = _timeout_setting("DOWNLOAD_TIMEOUT", 60)  # seconds for requests timeout
CHUNK_SIZE = 8192
SUMMARY_PREVIEW_COUNT = 3

JSON_FILENAME = "emendas.json"
CSV_FILENAME = "emendas.csv"
PDF_SUBDIR = "pdfs"

# Page structure of the materia page
EMENDAS_CONTAINER_SELECTOR = "div#materia_documentos_emendas"
EMENDA_SECTION_SELECTOR = "div.sf-texto-materia"
EMENDA_PDF_LINK_SELECTOR = ".sf-texto-materia--link"

# Accepted <dt> labels per field, matched exactly after strip()
field_labels = {
    "id": ("Identificação:", "Identificacao:"),
    "author": ("Autor:", "Autora:"),
    "date": ("Data:", "Data da Apresentação:"),
    "description": ("Descrição:", "Descricao:", "Ementa:"),
    "legislative_action": ("Ação Legislativa:", "Acao Legislativa:"),
}

REQUIRED_FIELDS = ("id", "author", "date")

CSV_COLUMNS = [
    'id', 'author', 'date', 'description', 'legislativeAction', 'pdfLink', 'pdfFilename'
]
