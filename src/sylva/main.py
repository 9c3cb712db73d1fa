"""Entry-point for launching the console session."""
from __future__ import annotations

from .presentation.text.app import main as text_main


def main() -> None:
    """Run the text presentation layer."""
    text_main()


if __name__ == "__main__":
    main()
