"""Loads email documents from a JSON file (same shape as mock_store.json) into the Chroma collection."""
import argparse
import json
import logging

from mailtriage.config import DashboardConfig
from mailtriage.services.email.store import ChromaEmailStore

def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", nargs="?", default="mailtriage/data/mock_store.json")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    config = DashboardConfig()
    store = ChromaEmailStore(config)

    with open(args.path, "r") as f:
        documents = json.load(f).get("emails", [])

    ids = store.add_emails(documents)
    print(f"✅ Imported {len(ids)} emails into '{config.collection_name}'")

if __name__ == "__main__":
    main()
