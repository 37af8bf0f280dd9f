"""
Example: Reconfigure an alias and reload all of its documents

Documents are pulled in pages from a generator standing in for the
system of record (database, API, ...).

Usage:
    python examples/reindex_from_source.py

Environment variables:
    - ES_URL: Elasticsearch URL (default: http://localhost:9200)
    - CONTACT_COUNT: Number of sample contacts to load (default: 1000)
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from es_configuration import ElasticsearchConfiguration
from es_configuration.index import ReindexAllOptions, iterable_source


def load_contacts(count: int):
    """Sample contacts, as a system of record would page them"""
    for i in range(count):
        yield {
            "_id": f"contact-{i}",
            "firstName": f"First{i}",
            "lastName": f"Last{i}",
            "emails": [{"type": "work", "value": f"contact{i}@example.com"}],
            "bookId": "book-1",
        }


def denormalize(contact: dict) -> dict:
    """Drop the storage id and add the full name searched on"""
    body = {k: v for k, v in contact.items() if not k.startswith("_")}
    body["fn"] = f"{contact['firstName']} {contact['lastName']}"
    return body


def main():
    count = int(os.getenv("CONTACT_COUNT", "1000"))
    print("=== Full Reindex ===")
    print(f"Contacts to load: {count}")

    options = ReindexAllOptions(
        alias="contacts",
        type="contacts",
        next=iterable_source(load_contacts(count), batch_size=200),
        get_id=lambda contact: contact["_id"],
        denormalize=denormalize,
    )

    with ElasticsearchConfiguration() as config:
        config.setup("contacts", "contacts")
        total = config.reindex_all(options)

    print(f"\nIndexed {total} contacts")


if __name__ == "__main__":
    main()
