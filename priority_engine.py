PRIORITY_HIGH = "HIGH"
PRIORITY_MEDIUM = "MEDIUM"
PRIORITY_NORMAL = "NORMAL"

HIGH_PRIORITY_CONDITIONS = ("cardiology", "neurology", "oncology", "pulmonology", "nephrology")
MEDIUM_PRIORITY_CONDITIONS = ("orthopedics", "gastroenterology", "endocrinology")


def classify_priority(condition):
    """
    Return HIGH / MEDIUM / NORMAL referral priority for a condition label.

    Keywords are matched as case-insensitive substrings and HIGH is checked
    before MEDIUM. Anything unmatched is NORMAL.
    """
    normalized = str(condition or "").lower()

    if any(keyword in normalized for keyword in HIGH_PRIORITY_CONDITIONS):
        return PRIORITY_HIGH
    if any(keyword in normalized for keyword in MEDIUM_PRIORITY_CONDITIONS):
        return PRIORITY_MEDIUM
    return PRIORITY_NORMAL
