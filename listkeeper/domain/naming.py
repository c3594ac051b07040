import re

from listkeeper.domain.entities import ADDRESS_SUFFIXES

LIST_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9\-]*$")
MAX_LIST_NAME_LENGTH = 64


def validate_list_name(name: str) -> list[str]:
    """
    Check a requested list name.
    Returns a list of problems; empty if the name is usable.
    """
    errors = []
    if not name:
        return ["List name is required"]
    if len(name) > MAX_LIST_NAME_LENGTH:
        errors.append(f"List name must be at most {MAX_LIST_NAME_LENGTH} characters")
    if not LIST_NAME_PATTERN.match(name):
        errors.append(f"Invalid list name {name!r}")
    # A list named foo-owner would collide with the -owner address of list foo.
    for suffix in ADDRESS_SUFFIXES:
        if suffix and name.lower().endswith(suffix):
            errors.append(f"List name {name!r} ends with reserved suffix {suffix!r}")
            break
    return errors
