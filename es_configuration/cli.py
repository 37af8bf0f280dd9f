"""
Command line interface

Usage:
    es-configuration index <name> [--type TYPE]
    es-configuration setup <alias> <type>
    es-configuration ensure <alias> <type>
    es-configuration reconfigure <alias> <type>
    es-configuration reindex-all <alias> <type> <ndjson-file> [--batch-size N] [--id-field FIELD]
    es-configuration status <alias>
    es-configuration info

Environment variables:
    - ES_URL / ES_HOST / ES_PORT: Elasticsearch location (default: localhost:9200)
    - ES_MAPPINGS_PATH: Directory of <type>.json mappings (default: bundled, per ES version)
"""

import argparse
import json
import logging
import sys

from . import __version__
from .configuration import ElasticsearchConfiguration, real_index_name
from .index import ReindexAllOptions, iterable_source
from .metrics import start_metrics_server
from .settings import ElasticsearchOptions


def run_index(config: ElasticsearchConfiguration, args):
    """Create <name> index"""
    config.create_index(args.name, args.type or args.name)
    print("Index created")


def run_setup(config: ElasticsearchConfiguration, args):
    config.setup(args.alias, args.type)
    print(f"Alias {args.alias} created on index {real_index_name(args.alias)}")


def run_ensure(config: ElasticsearchConfiguration, args):
    config.ensure_healthy(args.alias, args.type)
    print(f"Alias {args.alias} checked")


def run_reconfigure(config: ElasticsearchConfiguration, args):
    config.reconfigure(args.alias, args.type)
    print(f"Alias {args.alias} reconfigured")


def _read_ndjson(file):
    for line in file:
        line = line.strip()
        if line:
            yield json.loads(line)


def run_reindex_all(config: ElasticsearchConfiguration, args):
    """Reconfigure alias and reload documents from a newline-delimited JSON file"""
    id_field = args.id_field

    with open(args.file, encoding="utf-8") as f:
        options = ReindexAllOptions(
            alias=args.alias,
            type=args.type,
            next=iterable_source(_read_ndjson(f), args.batch_size),
            get_id=(lambda doc: doc.get(id_field)) if id_field != "id" else None
        )
        total = config.reindex_all(options)

    print(f"Alias {args.alias} reconfigured with {total} documents")


def run_status(config: ElasticsearchConfiguration, args):
    indices = config.aliases.get_alias_indices(args.alias)
    if not indices:
        print(f"Alias {args.alias} does not exist")
        return
    print(f"Alias {args.alias} -> {', '.join(indices)}")


def run_info(config: ElasticsearchConfiguration, args):
    info = config.gateway.get_info()
    health = config.gateway.check_health()
    print(f"Cluster: {info['cluster_name']}")
    print(f"Version: {info['version']['number']}")
    print(f"Status: {health['status']}")
    print(f"Nodes: {health['number_of_nodes']}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="es-configuration",
        description="Manage Elasticsearch indices behind aliases"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--host", help="Elasticsearch host (env: ES_HOST)")
    parser.add_argument("--port", type=int, help="Elasticsearch port (env: ES_PORT)")
    parser.add_argument("--url", help="Elasticsearch URL, overrides host/port (env: ES_URL)")
    parser.add_argument("--path", help="Directory of <type>.json mappings (env: ES_MAPPINGS_PATH)")
    parser.add_argument("--metrics-port", type=int, help="Expose Prometheus metrics on this port")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    commands = parser.add_subparsers(dest="command", metavar="command")
    commands.required = True

    index = commands.add_parser("index", help="Create <name> index")
    index.add_argument("name")
    index.add_argument("--type", help="Configuration to use (default: <name>)")
    index.set_defaults(handler=run_index)

    for name, handler, help in (
        ("setup", run_setup, "Create <alias> and its backing index"),
        ("ensure", run_ensure, "Repair <alias> so it points at its backing index"),
        ("reconfigure", run_reconfigure, "Apply the current <type> configuration to <alias>"),
    ):
        command = commands.add_parser(name, help=help)
        command.add_argument("alias")
        command.add_argument("type")
        command.set_defaults(handler=handler)

    reindex_all = commands.add_parser("reindex-all", help="Reconfigure <alias> and reload its documents")
    reindex_all.add_argument("alias")
    reindex_all.add_argument("type")
    reindex_all.add_argument("file", help="Newline-delimited JSON documents")
    reindex_all.add_argument("--batch-size", type=int, default=100)
    reindex_all.add_argument("--id-field", default="id", help="Document field holding the id")
    reindex_all.set_defaults(handler=run_reindex_all)

    status = commands.add_parser("status", help="Show the indices <alias> points to")
    status.add_argument("alias")
    status.set_defaults(handler=run_status)

    info = commands.add_parser("info", help="Show Elasticsearch version and health")
    info.set_defaults(handler=run_info)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    try:
        options = ElasticsearchOptions.from_env(host=args.host, port=args.port, url=args.url, path=args.path)
        with ElasticsearchConfiguration(options) as config:
            args.handler(config, args)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.__cause__ is not None:
            print(f"Caused by: {e.__cause__}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
