"""
CLI для neighbor_collector.

Примеры использования:
    python -m neighbor_collector arp sw1.core.example.net
    python -m neighbor_collector -c config.yaml -v fwt sw1.core.example.net
    python -m neighbor_collector --json-logs arp sw1.core.example.net

Результат печатается в stdout как JSON. Коды выхода:
    0 — результат получен (в том числе пустой)
    1 — ошибка конфигурации или инвентаря
    2 — нет результата (сбор не разрешён, CLI и резервный источник не ответили)
"""

import argparse
import json
import logging
from typing import Any, List, Optional

from .collectors import get_collector_class
from .config import load_config
from .core.exceptions import ConfigError, NetBoxError, format_error_for_log
from .core.logging import get_logger, setup_logging, setup_logging_from_config
from .inventory import NetBoxInventory

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_RESULT = 2

logger = get_logger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    Создаёт парсер аргументов командной строки.

    Returns:
        ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog="neighbor_collector",
        description="Сбор ARP/ND кэша и таблицы коммутации с сетевых устройств через CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  %(prog)s arp sw1.core.example.net
  %(prog)s -c config.yaml fwt sw1.core.example.net
        """,
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Путь к config.yaml",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Подробный вывод (DEBUG)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Логи в формате JSON",
    )
    parser.add_argument(
        "command",
        choices=["arp", "fwt"],
        help="arp — ARP и IPv6 ND кэш, fwt — таблица коммутации",
    )
    parser.add_argument(
        "device",
        help="Имя устройства в NetBox",
    )
    return parser


def _json_default(value: Any) -> Any:
    """Множества MAC печатаются отсортированным списком."""
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {value.__class__.__name__} is not JSON serializable")


def format_result(result: Any) -> str:
    """Результат операции в JSON (None -> null)."""
    return json.dumps(result, default=_json_default, indent=2, sort_keys=True)


def _setup_logging(args: argparse.Namespace, config) -> None:
    """Логирование: -v и --json-logs приоритетнее config.yaml."""
    level = logging.DEBUG if args.verbose else getattr(logging, config.logging.level)

    if args.json_logs:
        setup_logging(json_format=True, level=level)
    else:
        setup_logging_from_config(config.logging, level=level)


def main(argv: Optional[List[str]] = None) -> int:
    """Главная функция CLI."""
    parser = setup_parser()
    args = parser.parse_args(argv)

    setup_logging(
        json_format=args.json_logs,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        config = load_config(args.config)
        _setup_logging(args, config)

        inventory = NetBoxInventory.from_config(config)
        device = inventory.get_device(args.device)
        if device is None:
            logger.error(f"Устройство {args.device} не найдено в NetBox", device=args.device)
            return EXIT_ERROR

        collector = get_collector_class(device.platform).from_config(config, inventory)

        if args.command == "arp":
            result = collector.fetch_neighbor_cache(device)
        else:
            result = collector.fetch_forwarding_table(device)

    except ConfigError as e:
        logger.error(f"Ошибка конфигурации: {format_error_for_log(e)}")
        return EXIT_ERROR
    except NetBoxError as e:
        logger.error(f"Ошибка NetBox: {format_error_for_log(e)}")
        return EXIT_ERROR

    print(format_result(result))
    return EXIT_NO_RESULT if result is None else EXIT_OK
