"""
Точка входа для запуска модуля.

Позволяет запускать утилиту как:
    python -m neighbor_collector [опции] {arp,fwt} DEVICE
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
