"""
Example: Create the default aliases and their backing indices

Usage:
    python examples/init_aliases.py

Environment variables:
    - ES_URL: Elasticsearch URL (default: http://localhost:9200)
    - ES_MAPPINGS_PATH: Directory of <type>.json mappings (optional)
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from es_configuration import ElasticsearchConfiguration
from es_configuration.settings import INDEX_TYPES


def main():
    """Set up one alias per bundled index type"""
    print("=== Alias Initialization ===")

    with ElasticsearchConfiguration() as config:
        # Get cluster info
        print("\nConnecting to Elasticsearch...")
        info = config.gateway.get_info()
        print(f"\nCluster Info:")
        print(f"  Name: {info['cluster_name']}")
        print(f"  Version: {info['version']['number']}")

        # Check health
        health = config.gateway.check_health()
        print(f"\nCluster Health:")
        print(f"  Status: {health['status']}")
        print(f"  Nodes: {health['number_of_nodes']}")

        print("\nInitializing aliases...")
        for type in INDEX_TYPES:
            config.setup(type, type)
            print(f"✓ {type} -> {config.aliases.get_alias_indices(type)}")

    print("\nDone!")


if __name__ == "__main__":
    main()
