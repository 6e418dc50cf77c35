"""
Ledger enumerations.

Values are the stored/wire representation only; display labels live in
shopledger.app.domain.labels.
"""

import enum


class BillStatus(str, enum.Enum):
    """
    Bill status enumeration.

    Status flow:
        PENDING -> PARTIAL -> PAID
        Reversing payments can move a bill back to PARTIAL or PENDING.
    """
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class PaymentMethod(str, enum.Enum):
    """How a business (rent) payment was received."""
    CASH = "cash"
    ONLINE = "online"
    FAMILY_ACCOUNT = "family_account"


class FamilyPaymentMethod(str, enum.Enum):
    """How a family expense was paid or family income was received."""
    CASH = "cash"
    ONLINE = "online"
    FAMILY_ACCOUNT = "family_account"
    PERSONAL_ACCOUNT = "personal_account"


class DepositSource(str, enum.Enum):
    """Tracked account a bank deposit is drawn from."""
    CASH = "cash"
    ONLINE = "online"
    PERSONAL_ACCOUNT = "personal_account"


class AccountBucket(str, enum.Enum):
    """
    Tracked money pools whose balances are derived by aggregation.

    PERSONAL is a fully partitioned ledger and never joins the combined total.
    """
    CASH = "cash"
    ONLINE = "online"
    FAMILY = "family"
    PERSONAL = "personal"


class ExpenseCategory(str, enum.Enum):
    GROCERIES = "groceries"
    FOOD = "food"
    ONLINE_SHOPPING = "online_shopping"
    RECHARGE = "recharge"
    PETROL = "petrol"
    TRAVEL = "travel"
    ELECTRICITY = "electricity"
    MEDICAL = "medical"
    EDUCATION = "education"
    CLOTHING = "clothing"
    ENTERTAINMENT = "entertainment"
    MAKEUP = "makeup"
    INSURANCE = "insurance"
    TAX = "tax"
    REPAIRING = "repairing"
    GYM = "gym"
    OTHER = "other"


class IncomeSource(str, enum.Enum):
    JOB = "job"
    BUSINESS = "business"
    FREELANCE = "freelance"
    INVESTMENT = "investment"
    RENTAL = "rental"
    OTHER = "other"


class FamilyRelation(str, enum.Enum):
    SELF = "self"
    FATHER = "father"
    MOTHER = "mother"
    SPOUSE = "spouse"
    BROTHER = "brother"
    SISTER = "sister"
    SON = "son"
    DAUGHTER = "daughter"
    CHILD = "child"
    OTHER = "other"


class WarningType(str, enum.Enum):
    """Penalty calculator warning states."""
    NONE = "none"
    UPCOMING = "upcoming"
    OVERDUE = "overdue"
    PENALTY = "penalty"


# Account bucket each method's money lands in.
METHOD_BUCKETS = {
    "cash": AccountBucket.CASH,
    "online": AccountBucket.ONLINE,
    "family_account": AccountBucket.FAMILY,
    "personal_account": AccountBucket.PERSONAL,
}
