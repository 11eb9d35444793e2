"""CLI entrypoint for Coursekit.

Usage (after installing editable):
    python -m coursekit_engine analyze <course>
    python -m coursekit_engine play <course> --event click:start
    python -m coursekit_engine info <course>
"""

from coursekit_engine.cli import main

if __name__ == "__main__":
    main()
