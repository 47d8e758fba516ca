"""Name inflection helpers.

Covers the handful of conversions the engines need to go between grid/tree
names, entity classes, table names and column labels. Only regular English
plurals plus a few common irregular endings are handled.
"""

import re

_IRREGULAR = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
}
_IRREGULAR_SINGULAR = {v: k for k, v in _IRREGULAR.items()}


def underscore(name: str) -> str:
    """Convert CamelCase to snake_case (``LineItem`` -> ``line_item``)."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace("-", "_").lower()


def camelize(name: str) -> str:
    """Convert snake_case to CamelCase (``line_item`` -> ``LineItem``)."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def humanize(name: str) -> str:
    """Turn an attribute name into a column label (``unit_price`` -> ``Unit price``)."""
    text = name[:-3] if name.endswith("_id") else name
    text = text.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


def pluralize(word: str) -> str:
    """Pluralize the last segment of a snake_case word."""
    head, _, last = word.rpartition("_")
    prefix = f"{head}_" if head else ""
    lower = last.lower()

    if lower in _IRREGULAR:
        return prefix + _IRREGULAR[lower]
    if lower in _IRREGULAR_SINGULAR:
        return word
    if re.search(r"[^aeiou]y$", lower):
        return prefix + last[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", lower):
        return prefix + last + "es"
    return prefix + last + "s"


def singularize(word: str) -> str:
    """Singularize the last segment of a snake_case word."""
    head, _, last = word.rpartition("_")
    prefix = f"{head}_" if head else ""
    lower = last.lower()

    if lower in _IRREGULAR_SINGULAR:
        return prefix + _IRREGULAR_SINGULAR[lower]
    if lower in _IRREGULAR:
        return word
    if lower.endswith("ies") and len(lower) > 3:
        return prefix + last[:-3] + "y"
    if re.search(r"(ss|x|z|ch|sh)es$", lower):
        return prefix + last[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return prefix + last[:-1]
    return word
