import argparse
import json
import os
import traceback

import requests

from . import __version__
from .config import (
    CONFIG_FILE,
    CSV_FILENAME,
    DOWNLOAD_TIMEOUT,
    JSON_FILENAME,
    RESULTS_DIR,
    SUMMARY_PREVIEW_COUNT,
    parse_timeout,
)
from .download import ProgressReporter, TqdmProgressReporter, download_file
from .scraper import PageFetchError, build_materia_url, scrape_emendas
from .utils import generate_pdf_filename, init_directories, resolve_pdf_url
from .writer import save_to_csv, save_to_json


def read_config_file(config_path=CONFIG_FILE):
    """Returns the materia from a local JSON config file, or None."""
    if not os.path.exists(config_path):
        return None
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except (IOError, ValueError) as e:  # ValueError covers bad JSON and non-UTF-8 bytes
        print(f"Ignoring unreadable config file {config_path}: {e}")
        return None
    if not isinstance(config, dict):
        print(f"Ignoring config file {config_path}: expected a JSON object")
        return None
    materia = config.get('materia')
    return str(materia).strip() if materia not in (None, '') else None


def prompt_materia(input_func=input):
    """Asks for the materia until a non-empty answer is given. None on EOF or Ctrl-C."""
    while True:
        try:
            answer = input_func("Numero da matéria: ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None
        if answer:
            return answer
        print("A matéria é obrigatória.")


def resolve_materia(cli_materia=None, config_path=CONFIG_FILE, input_func=input):
    """Command line flag first, then the config file, then the interactive prompt."""
    if cli_materia and cli_materia.strip():
        return cli_materia.strip()
    materia = read_config_file(config_path)
    if materia:
        return materia
    return prompt_materia(input_func)


def download_pdfs(emendas, page_url, pdf_dir, progress=None, session=None, timeout=DOWNLOAD_TIMEOUT):
    """Downloads every emenda PDF in turn, setting pdf_filename on success.

    Returns:
        int: number of PDFs downloaded
    """
    downloaded = 0
    for emenda in emendas:
        if not emenda.pdf_link:
            continue
        pdf_filename = generate_pdf_filename(emenda.id)
        success, msg_or_path = download_file(
            resolve_pdf_url(emenda.pdf_link, page_url), pdf_dir, pdf_filename,
            progress=progress, session=session, timeout=timeout)
        if success:
            emenda.pdf_filename = pdf_filename
            downloaded += 1
        else:
            print(f"Failed to download PDF for emenda {emenda.id}: {msg_or_path}")
    return downloaded


def print_summary(emendas, count=SUMMARY_PREVIEW_COUNT):
    if not emendas:
        return
    print(f"\nFirst {count} emendas:")
    for i, emenda in enumerate(emendas[:count]):
        print(f"\n{i + 1}. {emenda.id}")
        print(f"   Autor: {emenda.author}")
        print(f"   Data: {emenda.date}")
        print(f"   Descrição: {(emenda.description or '')[:100]}")
        print(f"   PDF: {emenda.pdf_filename if emenda.pdf_filename is not None else 'N/A'}")


def run_pipeline(materia, results_dir=RESULTS_DIR, progress=None, session=None, timeout=DOWNLOAD_TIMEOUT):
    """
    Scrapes the emendas of one materia, downloads their PDFs and saves the
    dataset under results_dir/<materia>/.

    Returns:
        list: the emendas, or None when the materia page could not be fetched
    """
    if session is None:
        with requests.Session() as session:
            return run_pipeline(materia, results_dir=results_dir, progress=progress,
                                session=session, timeout=timeout)

    print(f"Materia: {materia}")
    print(f"   url: {build_materia_url(materia)}\n")

    try:
        page_url, emendas = scrape_emendas(materia, session=session, timeout=timeout)
    except PageFetchError as e:
        print(f"Error scraping emendas: {e}")
        traceback.print_exc()
        return None

    print(f"Numero de emendas encontradas: {len(emendas)}")

    materia_dir, pdf_dir = init_directories(materia, results_dir)

    downloaded = download_pdfs(emendas, page_url, pdf_dir, progress=progress,
                               session=session, timeout=timeout)
    with_links = sum(1 for emenda in emendas if emenda.pdf_link)
    print(f"Downloaded {downloaded}/{with_links} PDFs to {pdf_dir}\n")

    save_to_json(emendas, os.path.join(materia_dir, JSON_FILENAME))
    save_to_csv(emendas, os.path.join(materia_dir, CSV_FILENAME))

    print_summary(emendas)
    return emendas


def timeout_arg(value):
    try:
        return parse_timeout(value, DOWNLOAD_TIMEOUT)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid timeout {value!r}: expected seconds >= 0, 'none' or 'off'")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Senado Federal - Scrape emendas de projetos de lei")
    parser.add_argument(
        '--materia', type=str,
        help="Numero da matéria (a parte numerica no final do url do projeto de lei). "
             "Exemplo: https://www25.senado.leg.br/web/atividade/materias/-/materia/157233 > materia 157233")
    parser.add_argument(
        '--output-dir', default=RESULTS_DIR, help=f"Output directory (default: {RESULTS_DIR})")
    parser.add_argument(
        '--config', default=CONFIG_FILE, help=f"JSON file holding {{\"materia\": ...}} (default: {CONFIG_FILE})")
    parser.add_argument(
        '--timeout', type=timeout_arg, default=DOWNLOAD_TIMEOUT,
        help="Request timeout in seconds, 0 disables it (default: DOWNLOAD_TIMEOUT or 60)")
    parser.add_argument(
        '--no-progress', action='store_true', help="Do not draw download progress bars")
    parser.add_argument('-V', '--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    materia = resolve_materia(args.materia, args.config)
    if not materia:
        print("No materia provided.")
        return 1

    progress = ProgressReporter() if args.no_progress else TqdmProgressReporter()

    emendas = run_pipeline(materia, results_dir=args.output_dir, progress=progress, timeout=args.timeout)
    return 0 if emendas is not None else 1
