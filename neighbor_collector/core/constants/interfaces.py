"""
Нормализация имён интерфейсов.

Инвентарь хранит полные имена (GigabitEthernet0/3.2335), show mac
address-table выводит сокращённые (Gi9/22), show ipv6 neighbors —
смешанные (Gi0/2.3). Для сравнения все имена приводятся к одной
форме: две первые буквы типа + числовой путь.

    GigabitEthernet0/3.2335 -> Gi0/3.2335
    Gi0/3                   -> Gi0/3
    Port-channel 12         -> Po12
    Vlan100                 -> Vl100

Регистр типа приводится к виду "Gi", чтобы GI0/1 и gi0/1 совпадали.

Имя в инвентаре и имя из вывода команды всегда проходят через одну
и ту же функцию.
"""

import re

# Тип (минимум две буквы) + путь из цифр, "/", "." и ":" в конце имени
_REDUCE_RE = re.compile(r"^([A-Za-z]{2})[A-Za-z\-_]*?([\d][\d/.:]*)$")


def reduce_interface_name(name: str) -> str:
    """
    Сокращает имя интерфейса до канонической формы для сравнения.

    Функция идемпотентна: reduce(reduce(x)) == reduce(x).
    Имена без числового пути (CPU, Null) возвращаются без изменений
    (кроме удалённых пробелов).

    Args:
        name: Имя интерфейса в любом формате

    Returns:
        str: Каноническое имя ("" для пустого)
    """
    if not name:
        return ""
    # CDP/LLDP формат: "Ten 1/1/4"
    clean = name.replace(" ", "").strip()
    match = _REDUCE_RE.match(clean)
    if not match:
        return clean
    return match.group(1).capitalize() + match.group(2)
