"""Entry point for `python -m palettekit`."""

import sys


def main():
    from palettekit.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
