"""
Базовый класс CLI коллектора.

Коллектор реализует две операции для одного устройства:
- fetch_neighbor_cache: ARP (IPv4) и ND (IPv6) кэш
- fetch_forwarding_table: динамическая таблица коммутации

Каждая операция: проверка допустимости сбора, попытка через CLI,
при отсутствии результата — резервный источник. CLI и резервный
источник взаимоисключающи: пустой, но корректный результат CLI
резервный источник не вызывает.

Платформа определяет парсеры. Пример кастомного коллектора:
    class MyCollector(BaseCollector):
        platform = "my_os"
        parsers = {"arp": MyArpParser, "nd": MyNdParser, "fwt": MyFwtParser}
"""

import time
from abc import ABC
from typing import Any, Dict, List, Optional, Sequence, Type

from ..core.config_schema import AppConfig
from ..core.connection import ConnectionManager
from ..core.constants import get_collector_command, sec2dhms
from ..core.credentials import CredentialResolver
from ..core.device import Device
from ..core.domain import NeighborValidator
from ..core.exceptions import CollectorError, format_error_for_log, is_retryable
from ..core.logging import StructuredLogger, get_logger
from ..core.models import ForwardingTable, NeighborCache, NeighborTable, count_entries
from ..inventory.base import InventoryBackend
from ..parsers.base import LineParser
from .eligibility import DeviceEligibility, EligibilityPolicy
from .fallback import FallbackCollector, NullFallback


class BaseCollector(ABC):
    """
    Абстрактный CLI коллектор.

    Attributes:
        platform: Платформа, для которой написаны парсеры
        parsers: {тип данных (arp, nd, fwt): класс парсера}

    Example:
        collector = CiscoIOSCollector(inventory, credential_rules=rules)
        cache = collector.fetch_neighbor_cache(device)
        # {4: {42: {"10.82.250.129": "00:00:0c:9f:f0:02"}}, 6: {...}}
    """

    platform: str = ""
    parsers: Dict[str, Type[LineParser]] = {}

    def __init__(
        self,
        inventory: InventoryBackend,
        credential_rules: Optional[Sequence] = None,
        connection_manager: Optional[ConnectionManager] = None,
        fallback: Optional[FallbackCollector] = None,
        eligibility: Optional[EligibilityPolicy] = None,
        ignore_ips_not_within_subnet: bool = False,
        mac_format: str = "ieee",
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Инициализация коллектора.

        Args:
            inventory: Инвентарь (интерфейсы и подсети устройства)
            credential_rules: Правила cli_credentials
            connection_manager: Менеджер CLI сессий
            fallback: Резервный источник (по умолчанию NullFallback)
            eligibility: Политика допустимости сбора
            ignore_ips_not_within_subnet: Отбрасывать IP вне подсетей интерфейса
            mac_format: Формат MAC в результате
            logger: Логгер (по умолчанию модульный)
        """
        self._logger = logger or get_logger(__name__)
        self.credential_rules = credential_rules
        self.inventory = inventory
        self.fallback = fallback or NullFallback()
        self.eligibility = eligibility or DeviceEligibility()
        self._conn_manager = connection_manager or ConnectionManager(logger=self._logger)
        self.validator = NeighborValidator(
            inventory,
            ignore_ips_not_within_subnet=ignore_ips_not_within_subnet,
            mac_format=mac_format,
            logger=self._logger,
        )
        self._resolver: Optional[CredentialResolver] = None

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        inventory: InventoryBackend,
        fallback: Optional[FallbackCollector] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> "BaseCollector":
        """Создаёт коллектор из валидированной конфигурации."""
        return cls(
            inventory,
            credential_rules=config.cli_credentials,
            connection_manager=ConnectionManager.from_config(config.connection, logger=logger),
            fallback=fallback,
            ignore_ips_not_within_subnet=config.collection.ignore_ips_not_within_subnet,
            mac_format=config.collection.mac_format,
            logger=logger,
        )

    @property
    def resolver(self) -> CredentialResolver:
        """
        Resolver учётных данных (создаётся при первом обращении).

        Raises:
            ConfigError: cli_credentials отсутствует или невалиден
        """
        if self._resolver is None:
            self._resolver = CredentialResolver(self.credential_rules, logger=self._logger)
        return self._resolver

    def _device_logger(self, device: Device, kind: str) -> StructuredLogger:
        """Логгер с device и operation для всех записей операции."""
        return self._logger.bind(device=device.host, operation=kind)

    def _get_parser(self, kind: str) -> LineParser:
        return self.parsers[kind](logger=self._logger)

    def _get_command(self, device: Device, kind: str) -> str:
        """Команда для типа данных: платформа устройства, иначе команда парсера."""
        return get_collector_command(kind, device.platform) or self.parsers[kind].command

    def _run_cli(self, device: Device, kind: str) -> Optional[List[str]]:
        """
        Выполняет команду типа kind через CLI.

        Returns:
            List[str]: Строки вывода или None (нет учётных данных, ошибка сессии)

        Raises:
            ConfigError: Конфигурация учётных данных невалидна
        """
        host = device.host
        log = self._device_logger(device, kind)
        credentials = self.resolver.resolve(host)
        if credentials is None:
            log.debug(f"{host}: нет учётных данных для CLI, CLI пропущен")
            return None

        command = self._get_command(device, kind)
        try:
            return self._conn_manager.run_command(device, credentials, command)
        except CollectorError as e:
            log.error(
                f"{host}: CLI '{command}' не выполнена: {format_error_for_log(e)}",
                command=command,
                retryable=is_retryable(e),
            )
            return None

    def _neighbors_from_cli(self, device: Device, kind: str, version: int) -> Optional[NeighborTable]:
        """ARP (kind=arp) или ND (kind=nd) таблица через CLI."""
        lines = self._run_cli(device, kind)
        if lines is None:
            return None
        raw = self._get_parser(kind).parse(lines, host=device.host)
        return self.validator.validate_neighbors(device, raw, version)

    def _forwarding_from_cli(self, device: Device) -> Optional[ForwardingTable]:
        """Таблица коммутации через CLI."""
        lines = self._run_cli(device, "fwt")
        if lines is None:
            return None
        raw = self._get_parser("fwt").parse(lines, host=device.host)
        return self.validator.validate_forwarding_table(device, raw)

    def _is_eligible(self, device: Device, kind: str) -> bool:
        """Проверяет флаг сбора и окно обслуживания."""
        host = device.host
        log = self._device_logger(device, kind)
        if not self.eligibility.is_collection_enabled(device, kind):
            log.debug(f"{host}: исключено из сбора {kind}, пропуск")
            return False
        if self.eligibility.is_in_downtime(device):
            log.debug(f"{host}: в окне обслуживания, пропуск")
            return False
        return True

    def _log_fetched(
        self,
        device: Device,
        kind: str,
        what: str,
        table: Optional[dict],
        start: float,
    ) -> None:
        """INFO: число записей и время сбора."""
        entries = count_entries(table or {})
        elapsed = sec2dhms(time.monotonic() - start)
        self._device_logger(device, kind).info(
            f"{device.host}: {what}. Записей: {entries} за {elapsed}",
            entries=entries,
            elapsed=elapsed,
        )

    def fetch_neighbor_cache(self, device: Device, session: Any = None) -> Optional[NeighborCache]:
        """
        Собирает ARP и IPv6 ND кэш устройства.

        Args:
            device: Устройство
            session: Сессия резервного источника (передаётся как есть)

        Returns:
            NeighborCache: {4: {ID интерфейса: {IP: MAC}}, 6: {...}}
            None: сбор не разрешён или ни одно семейство не дало результата

        Raises:
            ConfigError: Конфигурация учётных данных невалидна
        """
        if not self._is_eligible(device, "arp"):
            return None

        cache: NeighborCache = {}

        start = time.monotonic()
        arp = self._neighbors_from_cli(device, "arp", 4)
        if arp is None:
            arp = self.fallback.fetch_arp(device, session=session)
        if arp is not None:
            cache[4] = arp
        self._log_fetched(device, "arp", "ARP кэш получен", arp, start)

        start = time.monotonic()
        nd = self._neighbors_from_cli(device, "nd", 6)
        if nd is None:
            nd = self.fallback.fetch_nd(device, session=session)
        if nd is not None:
            cache[6] = nd
        self._log_fetched(device, "nd", "IPv6 ND кэш получен", nd, start)

        if arp is None and nd is None:
            return None
        return cache

    def fetch_forwarding_table(self, device: Device, session: Any = None) -> Optional[ForwardingTable]:
        """
        Собирает динамическую таблицу коммутации устройства.

        Args:
            device: Устройство
            session: Сессия резервного источника (передаётся как есть)

        Returns:
            ForwardingTable: {ID интерфейса: {MAC, ...}}
            None: сбор не разрешён или нет результата ни от CLI, ни от резервного источника

        Raises:
            ConfigError: Конфигурация учётных данных невалидна
        """
        if not self._is_eligible(device, "fwt"):
            return None

        start = time.monotonic()
        fwt = self._forwarding_from_cli(device)
        if fwt is None:
            fwt = self.fallback.fetch_fwt(device, session=session)
        self._log_fetched(device, "fwt", "таблица коммутации получена", fwt, start)
        return fwt
