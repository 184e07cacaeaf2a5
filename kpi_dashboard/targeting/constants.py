# kpi_dashboard/targeting/constants.py
"""
Constants for the Targeting Module

Centralized configuration for:
- Calendar (months, seasons)
- Timephasing weights
- KPI formulas and default KPI configs
- Performance thresholds
- Seed data (products, provinces, planner defaults)
"""

# =====================================================================
# CALENDAR
# =====================================================================

# Solar Hijri calendar, the year starts with spring
MONTH_ORDER = [
    "Farvardin", "Ordibehesht", "Khordad",
    "Tir", "Mordad", "Shahrivar",
    "Mehr", "Aban", "Azar",
    "Dey", "Bahman", "Esfand",
]

SEASON_ORDER = ["Spring", "Summer", "Autumn", "Winter"]

SEASON_MONTHS = {
    "Spring": ["Farvardin", "Ordibehesht", "Khordad"],
    "Summer": ["Tir", "Mordad", "Shahrivar"],
    "Autumn": ["Mehr", "Aban", "Azar"],
    "Winter": ["Dey", "Bahman", "Esfand"],
}

# =====================================================================
# TIMEPHASING WEIGHTS
# =====================================================================

# Seasonal demand curve, normalized by their sum (4.40)
SEASON_WEIGHTS = {
    "Spring": 1.0,
    "Summer": 1.05,
    "Autumn": 1.10,
    "Winter": 1.25,
}

# 5% deviation from the monthly average for the first/last month of a season
MONTH_GROWTH_FACTOR = 0.05

# =====================================================================
# KPI FORMULAS
# =====================================================================

FORMULA_GOAL_ACHIEVEMENT = "goal_achievement"
FORMULA_DIRECT_PENALTY = "direct_penalty"
FORMULA_CONVERSION_FROM_LEADS = "conversion_from_leads"

KPI_FORMULAS = [
    FORMULA_GOAL_ACHIEVEMENT,
    FORMULA_DIRECT_PENALTY,
    FORMULA_CONVERSION_FROM_LEADS,
]

# KPI type whose actuals feed conversion_from_leads
LEADS_KPI_TYPE = "leads"

# Fixed business rule: expected conversion is 20% of recorded leads
LEAD_CONVERSION_RATE = 0.2

DEFAULT_KPI_CONFIGS = {
    "sales": {"name": "Sales", "max_points": 40, "formula": FORMULA_GOAL_ACHIEVEMENT},
    "leads": {"name": "Leads", "max_points": 20, "formula": FORMULA_GOAL_ACHIEVEMENT},
    "conversion": {"name": "Conversion to Customer", "max_points": 20, "formula": FORMULA_CONVERSION_FROM_LEADS},
    "procurement_error": {"name": "Procurement Error", "max_points": -2, "formula": FORMULA_DIRECT_PENALTY},
    "dissatisfaction_error": {"name": "Unanswered Dissatisfaction", "max_points": -2, "formula": FORMULA_DIRECT_PENALTY},
}

# =====================================================================
# SCORING
# =====================================================================

MIN_FINAL_SCORE = 0
MAX_FINAL_SCORE = 100

HIGH_PERFORMANCE_THRESHOLD = 80
LOW_PERFORMANCE_THRESHOLD = 50

SORT_OPTIONS = ['default', 'name_asc', 'name_desc', 'score_asc', 'score_desc']

# =====================================================================
# TERRITORIES & MARKET DATA
# =====================================================================

TERRITORY_PROVINCE = "province"
TERRITORY_MEDICAL_CENTER = "medical_center"

TERRITORY_KINDS = [TERRITORY_PROVINCE, TERRITORY_MEDICAL_CENTER]

MARKET_SCOPE_NATIONAL = "national"
MARKET_SCOPE_TEHRAN = "tehran"

MARKET_SCOPES = [MARKET_SCOPE_NATIONAL, MARKET_SCOPE_TEHRAN]

DEFAULT_ACQUISITION_RATE = 10

# =====================================================================
# SALES LEDGER
# =====================================================================

TARGET_FIELDS = ['target', 'actual']

# =====================================================================
# PLANNER
# =====================================================================

UNKNOWN_NUM_SALESPEOPLE = "num_salespeople"
UNKNOWN_TARGET_CUSTOMERS = "target_customers"

PLANNER_UNKNOWNS = [UNKNOWN_NUM_SALESPEOPLE, UNKNOWN_TARGET_CUSTOMERS]

# Rates and commission are percents
DEFAULT_SALES_CONFIG = {
    "total_time_per_person": 10600,
    "existing_client_time": 4700,
    "lead_to_opp_time": 35,
    "opp_to_customer_time": 52.5,
    "lead_to_opp_rate": 25,
    "opp_to_customer_rate": 35,
    "commission_rate": 4,
    "market_size": 1800,
}

DEFAULT_PLANNER_INPUTS = {
    "num_salespeople": 2,
    "target_customers": 450,
    "average_salary": 37000000,
    "average_deal_size": 150000000,
}

# =====================================================================
# SEED DATA
# =====================================================================

DEFAULT_YEAR = 1404

DEFAULT_PRODUCTS = [
    {"id": 1, "name": "Biopsy Needle", "price": 1200000},
    {"id": 2, "name": "Diagnostic Kit", "price": 750000},
    {"id": 3, "name": "Analyzer Device", "price": 25000000},
]

# Share of the national market for product 1, in percent
DEFAULT_PROVINCES = [
    ("KR", "Khorasan Razavi", 9.64),
    ("ES", "Isfahan", 7.68),
    ("FA", "Fars", 7.28),
    ("KZ", "Khuzestan", 7.07),
    ("AE", "East Azerbaijan", 5.86),
    ("MN", "Mazandaran", 4.93),
    ("AW", "West Azerbaijan", 4.90),
    ("KE", "Kerman", 4.75),
    ("SB", "Sistan and Baluchestan", 4.16),
    ("AL", "Alborz", 4.07),
    ("GI", "Gilan", 3.81),
    ("BK", "Kermanshah", 2.93),
    ("GO", "Golestan", 2.80),
    ("HG", "Hormozgan", 2.66),
    ("LO", "Lorestan", 2.64),
    ("HD", "Hamadan", 2.60),
    ("KD", "Kurdistan", 2.40),
    ("MK", "Markazi", 2.15),
    ("QM", "Qom", 1.94),
    ("QV", "Qazvin", 1.91),
    ("AR", "Ardabil", 1.91),
    ("BU", "Bushehr", 1.74),
    ("YA", "Yazd", 1.71),
    ("ZN", "Zanjan", 1.59),
    ("CB", "Chaharmahal and Bakhtiari", 1.42),
    ("NK", "North Khorasan", 1.29),
    ("SK", "South Khorasan", 1.15),
    ("KB", "Kohgiluyeh and Boyer-Ahmad", 1.07),
    ("SM", "Semnan", 1.05),
    ("IL", "Ilam", 0.87),
]

DEFAULT_EMPLOYEES = [
    {"id": 1, "name": "Hamidreza Soltanian", "title": "CEO", "department": "Management"},
    {"id": 2, "name": "Sara Hosseini", "title": "Sales Manager", "department": "Sales"},
    {"id": 3, "name": "Amir Ali Dabiri", "title": "Internal Affairs & IT", "department": "Support"},
]
