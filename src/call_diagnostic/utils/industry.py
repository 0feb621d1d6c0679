"""
Industry detection from a company name
Targets home service and medical/dental businesses
"""

import re
from typing import List, Optional, Tuple

DEFAULT_INDUSTRY = "Home Services"

# Checked in order; the first match wins
INDUSTRY_RULES: List[Tuple[str, str]] = [
    ("Plumbing", r"plumb|pipe|drain|sewer|water\s*(heat|line)"),
    ("HVAC", r"hvac|heat|cool|air\s*cond|furnace|ac\s|a/c"),
    ("Electrical", r"electric|electrician|wiring"),
    ("Roofing", r"roof|gutter"),
    ("General Contractor", r"contract|construct|remodel|renovat|handyman"),
    ("Dental", r"dent|ortho|oral|smile"),
    ("Medical", r"medical|clinic|physician|doctor|health|care\s*center"),
    ("Flooring", r"carpet|floor|tile"),
    ("Pest Control", r"pest|exterminator|termite"),
    ("Landscaping", r"landscape|lawn|tree\s*service|yard"),
]

_COMPILED_RULES = [(industry, re.compile(pattern)) for industry, pattern in INDUSTRY_RULES]


def detect_industry(company_name: Optional[str]) -> str:
    """Guess the industry from keywords in the company name"""
    if not company_name:
        return DEFAULT_INDUSTRY

    name = company_name.lower()
    for industry, pattern in _COMPILED_RULES:
        if pattern.search(name):
            return industry

    return DEFAULT_INDUSTRY
