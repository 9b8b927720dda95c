import json

import pandas as pd

from .config import CSV_COLUMNS


def save_to_json(emendas, filename):
    """Save emendas to a JSON file, overwriting it."""
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump([emenda.to_dict() for emenda in emendas], f, indent=2, ensure_ascii=False)
    print(f"Saved {len(emendas)} emendas to {filename}")


def save_to_csv(emendas, filename):
    """
    Save emendas to a CSV file.

    Values containing a comma, a double quote or a newline are quoted and
    embedded quotes doubled. Nothing is written for an empty list.
    """
    if not emendas:
        print("No emendas to save")
        return

    df = pd.DataFrame([emenda.to_dict() for emenda in emendas], columns=CSV_COLUMNS)
    df.to_csv(filename, index=False, na_rep='', lineterminator='\n', encoding='utf-8')
    print(f"Saved {len(emendas)} emendas to {filename}")
