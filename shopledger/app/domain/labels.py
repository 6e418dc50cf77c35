"""
Display labels and message templates.

Enum values stay machine-readable; everything a person reads lives here.
"""

from shopledger.app.models.ledger_enums import (
    ExpenseCategory, IncomeSource, FamilyRelation, FamilyPaymentMethod
)


EXPENSE_CATEGORY_LABELS = {
    ExpenseCategory.GROCERIES: "Groceries (राशन)",
    ExpenseCategory.FOOD: "Food (खाना)",
    ExpenseCategory.ONLINE_SHOPPING: "Online Shopping (ऑनलाइन शॉपिंग)",
    ExpenseCategory.RECHARGE: "Recharge (रिचार्ज)",
    ExpenseCategory.PETROL: "Petrol/Diesel (पेट्रोल)",
    ExpenseCategory.TRAVEL: "Travel (यात्रा)",
    ExpenseCategory.ELECTRICITY: "Electricity Bill (बिजली)",
    ExpenseCategory.MEDICAL: "Medical (दवाई)",
    ExpenseCategory.EDUCATION: "Education (पढ़ाई)",
    ExpenseCategory.CLOTHING: "Clothing (कपड़े)",
    ExpenseCategory.ENTERTAINMENT: "Entertainment (मनोरंजन)",
    ExpenseCategory.MAKEUP: "Make Up (मेकअप)",
    ExpenseCategory.INSURANCE: "Insurance (बीमा)",
    ExpenseCategory.TAX: "Tax (टैक्स)",
    ExpenseCategory.REPAIRING: "Repairing (मरम्मत)",
    ExpenseCategory.GYM: "Gym (जिम)",
    ExpenseCategory.OTHER: "Other (अन्य)",
}

INCOME_SOURCE_LABELS = {
    IncomeSource.JOB: "Job Salary",
    IncomeSource.BUSINESS: "Business Income",
    IncomeSource.FREELANCE: "Freelance Work",
    IncomeSource.INVESTMENT: "Investment Returns",
    IncomeSource.RENTAL: "Rental Income",
    IncomeSource.OTHER: "Other Income",
}

RELATION_LABELS = {
    FamilyRelation.SELF: "Self (खुद)",
    FamilyRelation.FATHER: "Father (पिता)",
    FamilyRelation.MOTHER: "Mother (माता)",
    FamilyRelation.SPOUSE: "Wife/Husband (पत्नी/पति)",
    FamilyRelation.BROTHER: "Brother (भाई)",
    FamilyRelation.SISTER: "Sister (बहन)",
    FamilyRelation.SON: "Son (बेटा)",
    FamilyRelation.DAUGHTER: "Daughter (बेटी)",
    FamilyRelation.CHILD: "Child (बच्चा)",
    FamilyRelation.OTHER: "Other (अन्य)",
}

# Keyed by raw value so business and family methods share one table.
METHOD_LABELS = {
    FamilyPaymentMethod.CASH.value: "Cash",
    FamilyPaymentMethod.ONLINE.value: "Online Payment",
    FamilyPaymentMethod.FAMILY_ACCOUNT.value: "Family Account",
    FamilyPaymentMethod.PERSONAL_ACCOUNT.value: "Personal",
}

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Bill line items
PREVIOUS_DUES = "Previous dues"
MONTH_RENT = "{month} rent"
RENT_INCREASE = "Rent increase ({percentage}% - {period} months)"
ELECTRICITY_BILL = "Electricity bill"

# Penalty warnings
UPCOMING_MESSAGE = "Please clear your payment before the due date. {days_left} day(s) left. Thank you, have a good day!"
OVERDUE_MESSAGE = "A penalty may apply to payments made after the due date. Please pay as soon as possible. Thank you, have a good day!"
PENALTY_MESSAGE = (
    "Payment is overdue by {overdue_days} days! A penalty of {penalty} has been applied. "
    "Total amount due: {total_due}. Please pay immediately. Thank you!"
)

SPLIT_PAYMENT_NOTE = "Split Payment - {method}"


def method_label(method) -> str:
    value = getattr(method, "value", method)
    return METHOD_LABELS.get(value, str(value))


def month_label(year: int, month: int) -> str:
    """``March 2024`` style label."""
    return f"{MONTH_NAMES[month - 1]} {year}"


def percentage_label(value) -> str:
    """Drop a trailing ``.00`` so ``10.00`` reads as ``10``."""
    text = f"{value:f}" if hasattr(value, "is_finite") else str(value)
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
