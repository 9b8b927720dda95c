import os

import requests
from tqdm import tqdm

from .config import CHUNK_SIZE, DOWNLOAD_TIMEOUT
from .utils import http_request


class ProgressReporter:
    """Receives progress of a single transfer. The base class does nothing."""

    def start(self, filename, total):
        pass

    def update(self, downloaded, total, percentage):
        pass

    def close(self):
        pass


class TqdmProgressReporter(ProgressReporter):
    """Draws one console progress bar per file."""

    def __init__(self, leave=True):
        self.leave = leave
        self._bar = None
        self._last = 0

    def start(self, filename, total):
        self._last = 0
        self._bar = tqdm(total=total, desc=filename, unit='B', unit_scale=True,
                         unit_divisor=1024, leave=self.leave)

    def update(self, downloaded, total, percentage):
        if self._bar is None:
            return
        self._bar.update(downloaded - self._last)
        self._last = downloaded

    def close(self):
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def _content_length(response):
    value = response.headers.get('Content-Length')
    if value is None:
        return None
    try:
        total = int(value)
    except ValueError:
        return None
    return total if total >= 0 else None


def download_file(url, destination_dir, filename, progress=None, session=None,
                  timeout=DOWNLOAD_TIMEOUT, chunk_size=CHUNK_SIZE, on_progress=None):
    """
    Streams a file from a URL to destination_dir/filename.

    Chunks are written as they arrive and progress is reported after every
    chunk as (downloaded, total, percentage). total is None when the server
    sends no usable Content-Length, in which case percentage stays 0.

    Returns:
        tuple: (True, destination_path) on success, (False, error_message) otherwise
    """
    progress = progress if progress is not None else ProgressReporter()
    destination_path = os.path.join(destination_dir, filename)

    response, error = http_request(url, session=session, timeout=timeout, stream=True)
    if error:
        return False, error

    if response.raw is None:
        # no underlying connection to release
        return False, "Response body is null or undefined"

    try:
        total = _content_length(response)
        downloaded = 0

        os.makedirs(destination_dir, exist_ok=True)

        progress.start(filename, total)
        try:
            with open(destination_path, 'wb') as f:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if not chunk:  # filter out keep-alive new chunks
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)

                    percentage = (downloaded / total) * 100 if total else 0
                    progress.update(downloaded, total, percentage)
                    if on_progress is not None:
                        on_progress(downloaded, total, percentage)
        finally:
            progress.close()

        return True, destination_path
    except requests.exceptions.RequestException as e:
        # ChunkedEncodingError and friends surface mid-stream
        _remove_partial(destination_path)
        return False, f"Error while streaming {url}: {e}"
    except IOError as e:
        _remove_partial(destination_path)
        return False, f"Error saving file to {destination_path}: {e}"
    finally:
        response.close()


def _remove_partial(path):
    if os.path.isfile(path):
        os.remove(path)
