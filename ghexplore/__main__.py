"""Module entrypoint for `python -m ghexplore`.

Forwards to the same main() function as the `ghexplore` console script.

Usage:
    ```bash
    python -m ghexplore octocat --sort name --direction asc
    ```
"""

from .cli import main

if __name__ == "__main__":
    main()
