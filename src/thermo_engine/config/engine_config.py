"""
Конфигурация термодинамического движка.

Содержит значения по умолчанию (символ растворителя, конвенции, размер кэша)
и модель EngineConfiguration, которой владеет экземпляр ThermoEngine.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DEFAULT_SOLVENT_SYMBOL
from ..exceptions import ConventionError

# Семейства конвенций
APPARENT_PROPERTIES = "apparent-properties"
WATER_PROPERTIES = "water-properties"

# Реализованные конвенции: имя -> семейство
IMPLEMENTED_CONVENTIONS: Dict[str, str] = {
    "Benson-Helgeson": APPARENT_PROPERTIES,
    "Berman-Brown": APPARENT_PROPERTIES,
    "steam-tables": WATER_PROPERTIES,
}

# Конфигурация движка по умолчанию
ENGINE_CONFIG: Dict[str, Any] = {
    "solvent_symbol": DEFAULT_SOLVENT_SYMBOL,

    # Семейство -> выбранная конвенция ("" - без преобразования)
    "conventions": {
        APPARENT_PROPERTIES: "Benson-Helgeson",
        WATER_PROPERTIES: "",
    },

    # Максимум записей в кэше каждой точки входа (None - без ограничения)
    "cache_max_size": 10_000,

    # Обнаружение циклов вещество -> реакция -> вещество
    "detect_cycles": True,
}


def get_engine_config() -> Dict[str, Any]:
    """Получить копию конфигурации движка по умолчанию."""
    config = ENGINE_CONFIG.copy()
    config["conventions"] = dict(ENGINE_CONFIG["conventions"])
    return config


def resolve_convention(family: str, name: str) -> str:
    """
    Проверить конвенцию и вернуть её каноническое имя.

    Сравнение имён без учёта регистра. Пустая строка означает отсутствие
    преобразования и допустима для любого семейства.

    Args:
        family: Семейство конвенций (apparent-properties / water-properties)
        name: Имя конвенции

    Returns:
        Каноническое имя конвенции или ""

    Raises:
        ConventionError: Неизвестное семейство, конвенция или их несоответствие
    """
    if family not in (APPARENT_PROPERTIES, WATER_PROPERTIES):
        raise ConventionError(f"Unknown convention family `{family}`", "set_convention")

    if not name:
        return ""

    for canonical, canonical_family in IMPLEMENTED_CONVENTIONS.items():
        if canonical.lower() == name.lower():
            if canonical_family != family:
                raise ConventionError(
                    f"Convention `{canonical}` belongs to `{canonical_family}`, not `{family}`",
                    "set_convention",
                )
            return canonical

    raise ConventionError(
        f"Unknown convention `{name}`; implemented: {', '.join(IMPLEMENTED_CONVENTIONS)}",
        "set_convention",
    )


class EngineConfiguration(BaseModel):
    """
    Настройки одного экземпляра движка.

    Неизменяемая модель: движок заменяет её целиком при изменении настроек
    и сбрасывает кэши, так как настройки не входят в ключ кэша.
    """

    model_config = ConfigDict(frozen=True)

    solvent_symbol: str = Field(DEFAULT_SOLVENT_SYMBOL, description="Symbol of the solvent")
    conventions: Dict[str, str] = Field(
        default_factory=lambda: dict(ENGINE_CONFIG["conventions"]),
        description="Convention family -> convention name",
    )
    cache_max_size: Optional[int] = Field(ENGINE_CONFIG["cache_max_size"])
    detect_cycles: bool = Field(ENGINE_CONFIG["detect_cycles"])

    @field_validator("solvent_symbol")
    @classmethod
    def validate_solvent_symbol(cls, v):
        """Solvent symbol must be non-empty."""
        if not v or not v.strip():
            raise ValueError("solvent_symbol must be a non-empty string")
        return v

    @field_validator("conventions")
    @classmethod
    def validate_conventions(cls, v):
        """Normalize convention names; missing families mean no conversion."""
        resolved = {APPARENT_PROPERTIES: "", WATER_PROPERTIES: ""}
        for family, name in v.items():
            resolved[family] = resolve_convention(family, name)
        return resolved

    @field_validator("cache_max_size")
    @classmethod
    def validate_cache_max_size(cls, v):
        if v is not None and v <= 0:
            raise ValueError("cache_max_size must be positive or None")
        return v

    def convention(self, family: str) -> str:
        """Выбранная конвенция семейства ("" если не задана)."""
        return self.conventions.get(family, "")


def validate_config() -> bool:
    """
    Валидировать конфигурацию движка по умолчанию.

    Returns:
        True если конфигурация корректна
    """
    errors = []

    if not isinstance(ENGINE_CONFIG["solvent_symbol"], str) or not ENGINE_CONFIG["solvent_symbol"]:
        errors.append("solvent_symbol должен быть непустой строкой")

    cache_max_size = ENGINE_CONFIG["cache_max_size"]
    if cache_max_size is not None and (not isinstance(cache_max_size, int) or cache_max_size <= 0):
        errors.append("cache_max_size должен быть положительным int или None")

    if not isinstance(ENGINE_CONFIG["detect_cycles"], bool):
        errors.append("detect_cycles должен быть bool")

    for family, name in ENGINE_CONFIG["conventions"].items():
        try:
            resolve_convention(family, name)
        except ConventionError as e:
            errors.append(str(e))

    if errors:
        print("❌ Ошибки в конфигурации ENGINE_CONFIG:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


# Валидация конфигурации при импорте
if not validate_config():
    raise ValueError("Некорректная конфигурация термодинамического движка")
