#!/usr/bin/env python3
"""PyInstaller entrypoint for the kubectl-federation plugin binary.

Building this file with ``pyinstaller --onefile`` yields a standalone
``kubectl-federation`` executable, so ``kubectl federation join ...`` works
without a Python installation on the operator's machine.
"""

from kubefed.cli import main


if __name__ == "__main__":
    main()
