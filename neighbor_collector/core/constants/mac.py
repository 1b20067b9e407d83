"""
Нормализация и валидация MAC-адресов.

Поддерживаемые форматы: IEEE, Cisco, NetBox, Unix, raw.
"""

import re

_HEX12_RE = re.compile(r"^[0-9a-f]{12}$")

# Адреса, которые никогда не принадлежат реальному узлу
_INVALID_MACS = {
    "000000000000",
    "ffffffffffff",
}


def normalize_mac_raw(mac: str) -> str:
    """
    Нормализует MAC-адрес в сырой формат (12 символов, нижний регистр).

    Используется для сравнения MAC-адресов.

    Args:
        mac: MAC-адрес в любом формате

    Returns:
        str: 12 hex-символов в нижнем регистре (aabbccddeeff) или ""
    """
    if not mac:
        return ""
    mac_clean = mac.strip().lower()
    for char in [":", "-", ".", " "]:
        mac_clean = mac_clean.replace(char, "")
    if not _HEX12_RE.match(mac_clean):
        return ""
    return mac_clean


def normalize_mac(mac: str, format: str = "ieee") -> str:
    """
    Нормализует MAC-адрес в указанный формат.

    Args:
        mac: MAC-адрес в любом формате
        format: Формат вывода:
            - "raw": aabbccddeeff (12 символов, нижний регистр)
            - "ieee": aa:bb:cc:dd:ee:ff
            - "netbox": AA:BB:CC:DD:EE:FF
            - "cisco": aabb.ccdd.eeff
            - "unix": aa-bb-cc-dd-ee-ff

    Returns:
        str: MAC в указанном формате (или пустая строка)
    """
    clean = normalize_mac_raw(mac)
    if not clean:
        return ""

    if format == "raw":
        return clean
    elif format == "cisco":
        return f"{clean[0:4]}.{clean[4:8]}.{clean[8:12]}"
    elif format == "netbox":
        return ":".join(clean[i : i + 2].upper() for i in range(0, 12, 2))
    elif format == "unix":
        return "-".join(clean[i : i + 2] for i in range(0, 12, 2))
    else:  # ieee (default)
        return ":".join(clean[i : i + 2] for i in range(0, 12, 2))


def is_group_mac(clean: str) -> bool:
    """
    Проверяет I/G бит (multicast/broadcast адрес).

    Args:
        clean: MAC в raw формате

    Returns:
        bool: True для групповых адресов
    """
    return bool(int(clean[0:2], 16) & 0x01)


def validate_mac(mac: str, format: str = "ieee") -> str:
    """
    Проверяет MAC-адрес и возвращает его в каноническом формате.

    Отбрасываются:
    - адреса не из 12 hex-символов
    - 00:00:00:00:00:00 и ff:ff:ff:ff:ff:ff
    - групповые (multicast) адреса

    Args:
        mac: MAC-адрес из вывода устройства
        format: Формат результата (см. normalize_mac)

    Returns:
        str: Канонический MAC или "" если адрес невалиден
    """
    clean = normalize_mac_raw(mac)
    if not clean or clean in _INVALID_MACS or is_group_mac(clean):
        return ""
    return normalize_mac(clean, format=format)
