"""AdPulse — Country Registry.

Hand-maintained ISO 3166 alpha-2 → localized (Russian) country name table.
Codes missing here are shown as their raw code; extend the table when a new
GEO starts appearing in approvals.
"""

from typing import Dict

COUNTRY_NAMES: Dict[str, str] = {
    # A
    "AF": "Афганистан",
    "AL": "Албания",
    "DZ": "Алжир",
    "AD": "Андорра",
    "AO": "Ангола",
    "AG": "Антигуа и Барбуда",
    "AR": "Аргентина",
    "AM": "Армения",
    "AU": "Австралия",
    "AT": "Австрия",
    "AZ": "Азербайджан",
    # B
    "BD": "Бангладеш",
    "BY": "Беларусь",
    "BE": "Бельгия",
    "BO": "Боливия",
    "BA": "Босния и Герцеговина",
    "BR": "Бразилия",
    "BG": "Болгария",
    # C
    "KH": "Камбоджа",
    "CM": "Камерун",
    "CA": "Канада",
    "CL": "Чили",
    "CN": "Китай",
    "CO": "Колумбия",
    "CR": "Коста-Рика",
    "CI": "Кот-д’Ивуар",
    "HR": "Хорватия",
    "CY": "Кипр",
    "CZ": "Чехия",
    # D–G
    "DK": "Дания",
    "DO": "Доминиканская Республика",
    "EC": "Эквадор",
    "EG": "Египет",
    "EE": "Эстония",
    "FI": "Финляндия",
    "FR": "Франция",
    "GE": "Грузия",
    "DE": "Германия",
    "GH": "Гана",
    "GR": "Греция",
    "GT": "Гватемала",
    # H–L
    "HN": "Гондурас",
    "HU": "Венгрия",
    "IN": "Индия",
    "ID": "Индонезия",
    "IQ": "Ирак",
    "IE": "Ирландия",
    "IL": "Израиль",
    "IT": "Италия",
    "JP": "Япония",
    "JO": "Иордания",
    "KZ": "Казахстан",
    "KE": "Кения",
    "KG": "Киргизия",
    "LV": "Латвия",
    "LT": "Литва",
    # M–P
    "MY": "Малайзия",
    "MX": "Мексика",
    "MD": "Молдова",
    "MA": "Марокко",
    "NL": "Нидерланды",
    "NG": "Нигерия",
    "NO": "Норвегия",
    "PK": "Пакистан",
    "PA": "Панама",
    "PY": "Парагвай",
    "PE": "Перу",
    "PH": "Филиппины",
    "PL": "Польша",
    "PT": "Португалия",
    # R–Z
    "RO": "Румыния",
    "RU": "Россия",
    "SA": "Саудовская Аравия",
    "SN": "Сенегал",
    "RS": "Сербия",
    "SK": "Словакия",
    "SI": "Словения",
    "ZA": "ЮАР",
    "KR": "Южная Корея",
    "ES": "Испания",
    "SE": "Швеция",
    "CH": "Швейцария",
    "TJ": "Таджикистан",
    "TH": "Таиланд",
    "TN": "Тунис",
    "TR": "Турция",
    "UG": "Уганда",
    "UA": "Украина",
    "AE": "ОАЭ",
    "GB": "Великобритания",
    "US": "США",
    "UY": "Уругвай",
    "UZ": "Узбекистан",
    "VE": "Венесуэла",
    "VN": "Вьетнам",
}
