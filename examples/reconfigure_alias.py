"""
Example: Apply updated mappings to an alias without downtime

Usage:
    # Reconfigure the contacts alias with the current contacts mapping
    python examples/reconfigure_alias.py contacts

    # Alias and mapping type can differ
    python examples/reconfigure_alias.py team_contacts contacts

Environment variables:
    - ES_URL: Elasticsearch URL (default: http://localhost:9200)
    - ES_MAPPINGS_PATH: Directory of <type>.json mappings (optional)
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from es_configuration import ElasticsearchConfiguration
from es_configuration.configuration import real_index_name, tmp_index_name


def main():
    """Reconfigure alias with current mapping"""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    alias = sys.argv[1]
    type = sys.argv[2] if len(sys.argv) > 2 else alias

    print("=== Alias Reconfiguration ===")
    print(f"Alias: {alias}  Mapping: {type}")

    with ElasticsearchConfiguration() as config:
        print(f"Currently serving: {config.aliases.get_alias_indices(alias)}")

        # Confirm before proceeding
        print(f"\nDocuments will be copied to {tmp_index_name(alias)} while {real_index_name(alias)} is rebuilt.")
        confirm = input("Continue? [y/N]: ").strip().lower()

        if confirm != 'y':
            print("Aborted.")
            return

        print("\nReconfiguring...")
        config.reconfigure(alias, type)

        print(f"\nReconfiguration complete!")
        print(f"Now serving: {config.aliases.get_alias_indices(alias)}")


if __name__ == "__main__":
    main()
