"""Console entry point: wires configuration, gateway, service and menus."""

import logging
import sys

from rich.console import Console

from doclib_console.cli.menu import MenuController
from doclib_console.config import load_config
from doclib_console.graph.gateway import graph_gateway_from_config
from doclib_console.service.facade import document_library_service_from_config

logger = logging.getLogger(__name__)


def main() -> int:
    """Load configuration, initialize Graph access and run the menus."""
    console = Console()
    console.print("Graph SDK Console App\n")

    try:
        config = load_config()
    except KeyError as exc:
        console.print(f"Missing required environment variable {exc}.", style="red")
        return 1
    except ValueError as exc:
        console.print(str(exc), style="red", markup=False)
        return 1

    logging.basicConfig(
        level=config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("[main] configuration loaded; site_id:%s", config.site_id)

    gateway = graph_gateway_from_config(config)
    service = document_library_service_from_config(gateway, config)
    MenuController(service, console=console).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
