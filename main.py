"""Launch the AllerScan desktop app with config/config.yaml."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from allerscan.utils import load_config, setup_logging

DEFAULT_CONFIG_PATH = Path("config/config.yaml")


def main():
    config = load_config(DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None)
    setup_logging(config.logging)

    from allerscan.app.app import main as run_app
    run_app(config)


if __name__ == "__main__":
    main()
