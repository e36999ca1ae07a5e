"""
Физические константы и фиксированные справочные значения движка.
"""

import math

# Универсальная газовая постоянная, Дж/(моль·K)
R_CONSTANT = 8.31451

# Перевод калорий в джоули
CAL_TO_J = 4.184

# Перевод натурального логарифма в десятичный
LN_TO_LG = 1.0 / math.log(10.0)

# Стандартные условия
REFERENCE_TEMPERATURE = 298.15  # K
REFERENCE_PRESSURE = 1.0  # bar

# Символ протона: его свойства равны нулю в любой конвенции
HYDROGEN_ION_NAME = "H+"

# Растворитель по умолчанию
DEFAULT_SOLVENT_SYMBOL = "H2O@"

# Свойства воды в тройной точке, Helgeson & Kirkham (1974), p. 1098
STEAM_TABLES_ENTROPY = 15.1320 * CAL_TO_J  # Дж/(моль·K)
STEAM_TABLES_GIBBS_ENERGY = -56290.0 * CAL_TO_J  # Дж/моль
STEAM_TABLES_ENTHALPY = -68767.0 * CAL_TO_J  # Дж/моль
STEAM_TABLES_INTERNAL_ENERGY = -67887.0 * CAL_TO_J  # Дж/моль
STEAM_TABLES_HELMHOLTZ_ENERGY = -55415.0 * CAL_TO_J  # Дж/моль
