import json
import logging
import sys

from app.autodiscovery import auto_discover_config
from discovery.errors import DiscoveryError

def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Discover models in the llama.cpp cache and build the proxy config
    try:
        generated = auto_discover_config()
    except DiscoveryError as e:
        logging.getLogger("autodiscover").error("%s", e)
        return 1

    # Config goes to stdout so it can be redirected into a file
    print(json.dumps(generated.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
