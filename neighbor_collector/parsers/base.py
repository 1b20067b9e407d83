"""
Базовые построчные парсеры вывода show-команд.

Каждая команда разбирается своим набором regex. Первая строка вывода —
заголовок таблицы и пропускается. Строка, не совпавшая ни с одним
шаблоном, пишется в DEBUG и пропускается: формат вывода зависит от
версии ПО, локали и может быть обрезан.
"""

import ipaddress
from abc import ABC, abstractmethod
from typing import Dict, Optional, Pattern, Sequence, Tuple, Match

from ..core.logging import StructuredLogger, get_logger
from ..core.models import RawNeighborTable


class LineParser(ABC):
    """
    Абстрактный построчный парсер.

    Attributes:
        command: Команда, вывод которой разбирает парсер
        patterns: Шаблоны строк (проверяются по порядку, первый совпавший побеждает)
    """

    command: str = ""
    patterns: Tuple[Pattern, ...] = ()

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._logger = logger or get_logger(__name__)

    def parse(self, lines: Sequence[str], host: str = "") -> Dict:
        """
        Разбирает вывод команды.

        Args:
            lines: Строки вывода (первая — заголовок)
            host: Hostname устройства (для логов)

        Returns:
            Dict: Промежуточная таблица, ключ — имя интерфейса из вывода
        """
        result: Dict = {}
        parser_name = self.__class__.__name__

        for line in list(lines)[1:]:
            line = line.rstrip("\r\n")
            match = self._match(line)
            if match is None:
                self._logger.debug(
                    f"{parser_name}: строка не соответствует формату: {line}",
                    device=host,
                )
                continue

            fields = self._extract(match)
            if fields is None or not all(fields):
                self._logger.debug(
                    f"{parser_name}: неполные данные: {line}",
                    device=host,
                )
                continue

            self._store(result, fields, host)

        return result

    def _match(self, line: str) -> Optional[Match]:
        """Возвращает первое совпадение из patterns."""
        for pattern in self.patterns:
            match = pattern.match(line)
            if match:
                return match
        return None

    @abstractmethod
    def _extract(self, match: Match) -> Optional[Tuple[str, ...]]:
        """
        Извлекает поля из совпадения.

        Returns:
            Tuple полей или None если строка непригодна
        """

    @abstractmethod
    def _store(self, result: Dict, fields: Tuple[str, ...], host: str) -> None:
        """Добавляет поля в результат."""


class NeighborParser(LineParser):
    """
    Парсер таблиц соседей (ARP, IPv6 ND).

    Результат: {имя интерфейса: {IP: MAC}}.

    Если одна пара (интерфейс, IP) встречается несколько раз, остаётся
    последняя строка: устройство выводит устаревшую и свежую запись,
    свежая идёт ниже.
    """

    ip_version: int = 4

    def _extract(self, match: Match) -> Optional[Tuple[str, str, str]]:
        iname = match.group("interface")
        mac = match.group("mac")
        ip = self._canonical_ip(match.group("ip"))
        return iname, ip, mac

    def _canonical_ip(self, raw: str) -> str:
        """Приводит IP к канонической записи ("" если адрес не той версии)."""
        try:
            ip = ipaddress.ip_address(raw)
        except ValueError:
            return ""
        if ip.version != self.ip_version:
            return ""
        return str(ip)

    def _store(self, result: RawNeighborTable, fields: Tuple[str, ...], host: str) -> None:
        iname, ip, mac = fields
        entries = result.setdefault(iname, {})
        previous = entries.get(ip)
        if previous is not None and previous != mac:
            self._logger.debug(
                f"{iname} {ip}: {previous} заменён на {mac}",
                device=host,
            )
        entries[ip] = mac
