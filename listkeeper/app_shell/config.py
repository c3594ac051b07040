import logging

from listkeeper.rules.models import Rules

logger = logging.getLogger(__name__)


class RequirementError(RuntimeError):
    pass


def validate_requirements(rules: Rules) -> None:
    """
    Check operational requirements before reconciling.
    Raises RequirementError listing everything that is missing.
    """
    missing = []

    if not rules.mailman.bin_dir.is_dir():
        missing.append(
            f"Unable to find mailman library directory {rules.mailman.bin_dir}. "
            "Please, install mailman first."
        )
    if not rules.postfix.work_dir.is_dir():
        missing.append(f"Postfix working directory {rules.postfix.work_dir} does not exist")

    if missing:
        raise RequirementError("; ".join(missing))

    # Created on demand, like the install step would
    rules.mailman.disabled_lists_dir.mkdir(mode=0o750, parents=True, exist_ok=True)
    logger.debug("Requirements validated.")
