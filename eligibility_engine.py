MAX_ELIGIBLE_SCHEMES = 6
SENIOR_CITIZEN_AGE = 60

DISABILITY_SCHEMES = frozenset({"AB-PMJAY", "NHM", "NRHM", "NUHM"})
SENIOR_CITIZEN_SCHEMES = frozenset({"CGHS", "AB-PMJAY", "NHA"})
BASELINE_SCHEMES = frozenset({"CGHS", "AIIMS", "OPD"})


def collect_schemes(hospitals):
    """Union of scheme names across hospitals, in order of first appearance."""
    seen = {}
    for hospital in hospitals:
        for scheme in hospital.scheme_names:
            seen.setdefault(scheme, None)
    return list(seen)


def is_scheme_eligible(scheme, below_poverty_line, disabled, age):
    if below_poverty_line:
        return True
    if disabled and scheme in DISABILITY_SCHEMES:
        return True
    if age >= SENIOR_CITIZEN_AGE and scheme in SENIOR_CITIZEN_SCHEMES:
        return True
    return scheme in BASELINE_SCHEMES


def eligible_schemes(hospitals, bpl_status, disabled, age):
    """
    Return up to six schemes the patient can use at the given hospitals.

    - bpl_status == "below": every scheme offered
    - disabled == "yes": AB-PMJAY, NHM, NRHM, NUHM
    - age >= 60: CGHS, AB-PMJAY, NHA
    - always: CGHS, AIIMS, OPD

    The result keeps discovery order and is cut at six entries without
    re-ranking.
    """
    below_poverty_line = bpl_status is True or bpl_status == "below"
    is_disabled = disabled is True or disabled == "yes"
    age = int(age or 0)

    eligible = [
        scheme
        for scheme in collect_schemes(hospitals)
        if is_scheme_eligible(scheme, below_poverty_line, is_disabled, age)
    ]
    return eligible[:MAX_ELIGIBLE_SCHEMES]
